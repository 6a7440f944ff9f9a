#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for all oneiro operations.

Provides type-safe conversion, validation, and normalization functions
used by the metric extractor, the date resolver, the entry validator and
the options loader.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Optional, Union

from .exceptions import ValidationError

CANONICAL_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
NUMBER_PATTERN = re.compile(r"^-?\d+(?:\.\d+)?$")

Number = Union[int, float]


class DataValidator:
    """Centralized data validation for parsing operations."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        for field in required_fields:
            if field not in data or not data[field]:
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def validate_date_string(value: Any) -> bool:
        """
        Check that a value is a canonical YYYY-MM-DD date on the calendar.

        Examples:
            >>> DataValidator.validate_date_string("2024-01-15")
            True
            >>> DataValidator.validate_date_string("2024-02-30")
            False
            >>> DataValidator.validate_date_string("01/15/2024")
            False
        """
        if not isinstance(value, str) or not CANONICAL_DATE_PATTERN.match(value):
            return False
        try:
            date.fromisoformat(value)
        except ValueError:
            return False
        return True

    @staticmethod
    def normalize_number(value: Any) -> Optional[Number]:
        """
        Convert a decimal literal (optionally negative) to int or float.

        Only plain decimal notation is accepted: "4", "-2", "3.5".
        Anything else ("4/5", "1e3", "3.", "high") returns None.

        Args:
            value: Value to convert

        Returns:
            int for integral literals, float for decimals, or None
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not NUMBER_PATTERN.match(text):
            return None
        return float(text) if "." in text else int(text)

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Collapse internal whitespace and trim.

        Returns:
            Normalized string or None for empty input
        """
        if value is None:
            return None
        text = " ".join(str(value).split())
        return text or None

    @staticmethod
    def normalize_bool(value: Any) -> Optional[bool]:
        """
        Convert various inputs to boolean.

        Args:
            value: Value to convert

        Returns:
            Boolean value or None

        Raises:
            ValidationError: If conversion fails
        """
        if isinstance(value, bool):
            return value
        elif isinstance(value, (int, float)):
            if value == 0:
                return False
            elif value == 1:
                return True
            else:
                raise ValidationError(f"Cannot convert numeric '{value}' to boolean")
        elif isinstance(value, str):
            if value.lower() in ("true", "1", "yes", "on"):
                return True
            elif value.lower() in ("false", "0", "no", "off"):
                return False
            else:
                raise ValidationError(f"Cannot convert '{value}' to boolean")
        elif value is not None:
            return bool(value)
        return None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer safely.

        Args:
            value: Value to convert

        Returns:
            Integer value or None
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        number = DataValidator.normalize_number(value)
        if number is None or number != int(number):
            return None
        return int(number)
