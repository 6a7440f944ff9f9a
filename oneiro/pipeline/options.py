#!/usr/bin/env python3
"""
options.py
-------------------
Parse configuration for the content parser.

ParseOptions is a frozen dataclass checked when it is constructed, so a
bad option fails at the API boundary instead of deep inside the pipeline.

Options can come from keyword arguments, a mapping (snake_case or
camelCase keys), or a YAML file:

    callout_type: dream
    include_nested: true
    max_content_length: 200000

The legacy positional convention of the journal plugin ("a string
containing a path separator is a source path, anything else is a callout
type") lives in ``ParseOptions.from_args``.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import asdict, dataclass, fields, replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from oneiro.core.exceptions import ParseOptionsError, ValidationError
from oneiro.core.validators import DataValidator

# ----- Constants -----
DEFAULT_CALLOUT_TYPE = "dream"
DEFAULT_MAX_CONTENT_LENGTH = 500_000
DEFAULT_MAX_MATCHES = 1000

CALLOUT_TYPE_PATTERN = re.compile(r"^[\w-]+$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Plugin-era names that do not convert mechanically
ALIASES = {
    "marker_type": "callout_type",
    "source": "source_path",
}

BOOL_FIELDS = ("validate", "include_nested", "sanitize", "strict", "transactional", "debug")
INT_FIELDS = ("max_content_length", "max_matches")


def is_source_path(value: str) -> bool:
    """A string containing '/' or '\\' is treated as a source path."""
    return "/" in value or "\\" in value


def _snake_case(key: str) -> str:
    snake = _CAMEL_BOUNDARY.sub("_", key).lower().replace("-", "_")
    return ALIASES.get(snake, snake)


@dataclass(frozen=True)
class ParseOptions:
    """
    Options for one parse.

    Attributes:
        callout_type: Callout type to extract (word characters and hyphens)
        source_path: Provenance recorded on every entry
        validate: Attach validation defects to entries as warnings
        include_nested: Also extract target callouts quoted inside others
        sanitize: Normalize the text before scanning
        strict: Re-raise the first internal failure
        transactional: Discard all entries on a document-level failure
        max_content_length: Input is truncated to this many characters
        max_matches: Scanner stops after this many callouts
        debug: Log per-entry validation details
        fallback_date: Date used when a callout has none (default today)
    """

    callout_type: str = DEFAULT_CALLOUT_TYPE
    source_path: str = ""
    validate: bool = True
    include_nested: bool = False
    sanitize: bool = True
    strict: bool = False
    transactional: bool = False
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH
    max_matches: int = DEFAULT_MAX_MATCHES
    debug: bool = False
    fallback_date: Optional[date] = None

    def __post_init__(self) -> None:
        if not isinstance(self.callout_type, str) or not self.callout_type.strip():
            raise ParseOptionsError("callout_type must not be empty")
        if not CALLOUT_TYPE_PATTERN.match(self.callout_type):
            raise ParseOptionsError(
                f"callout_type may only contain letters, digits, '_' and '-', "
                f"got '{self.callout_type}'"
            )
        if not isinstance(self.source_path, str):
            raise ParseOptionsError(
                f"source_path must be a string, got {type(self.source_path).__name__}"
            )
        for name in INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ParseOptionsError(f"{name} must be a positive integer, got {value!r}")
        if self.fallback_date is not None and not isinstance(self.fallback_date, date):
            raise ParseOptionsError(
                f"fallback_date must be a date, got {type(self.fallback_date).__name__}"
            )

    # ---- Constructors ----
    @classmethod
    def from_args(
        cls,
        callout_type_or_source: Optional[str] = None,
        source: Optional[str] = None,
        **kwargs: Any,
    ) -> ParseOptions:
        """
        Build options from the positional convention.

        Args:
            callout_type_or_source: Callout type, or a source path if it
                contains a path separator
            source: Explicit source path, takes precedence
            **kwargs: Any other ParseOptions field

        Examples:
            >>> ParseOptions.from_args("journal").callout_type
            'journal'
            >>> ParseOptions.from_args("notes/2024.md").source_path
            'notes/2024.md'
        """
        values: Dict[str, Any] = dict(kwargs)
        if callout_type_or_source:
            if is_source_path(callout_type_or_source):
                values.setdefault("source_path", callout_type_or_source)
            else:
                values.setdefault("callout_type", callout_type_or_source)
        if source:
            values["source_path"] = source
        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParseOptions:
        """
        Build options from a mapping.

        Keys may be snake_case or camelCase. Values are coerced with
        DataValidator (``"yes"`` -> True, ``"1000"`` -> 1000).

        Raises:
            ParseOptionsError: On unknown keys or values that do not convert
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = _snake_case(str(raw_key))
            if key not in known:
                raise ParseOptionsError(f"Unknown parse option: '{raw_key}'")
            values[key] = cls._coerce(key, value)
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Union[str, Path], **overrides: Any) -> ParseOptions:
        """
        Load options from a YAML file; ``overrides`` win over file values.

        Raises:
            ParseOptionsError: If the file is not a mapping or has bad values
        """
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ParseOptionsError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ParseOptionsError(f"Options file must contain a mapping: {path}")

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(data)

    @staticmethod
    def _coerce(key: str, value: Any) -> Any:
        if value is None:
            return None if key == "fallback_date" else ParseOptions._default(key)
        try:
            if key in BOOL_FIELDS:
                return DataValidator.normalize_bool(value)
            if key in INT_FIELDS:
                number = DataValidator.normalize_int(value)
                if number is None:
                    raise ParseOptionsError(f"{key} must be an integer, got {value!r}")
                return number
        except ValidationError as e:
            if isinstance(e, ParseOptionsError):
                raise
            raise ParseOptionsError(f"{key}: {e}") from e
        if key == "fallback_date" and isinstance(value, str):
            if not DataValidator.validate_date_string(value):
                raise ParseOptionsError(f"fallback_date must be YYYY-MM-DD, got '{value}'")
            return date.fromisoformat(value)
        return value

    @staticmethod
    def _default(key: str) -> Any:
        for f in fields(ParseOptions):
            if f.name == key:
                return f.default
        raise ParseOptionsError(f"Unknown parse option: '{key}'")

    # ---- Helpers ----
    def replace(self, **changes: Any) -> ParseOptions:
        """Copy with some fields changed (re-validated)."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.fallback_date is not None:
            data["fallback_date"] = self.fallback_date.isoformat()
        return data
