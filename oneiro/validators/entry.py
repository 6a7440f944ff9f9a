#!/usr/bin/env python3
"""
entry.py
--------
Structural validation of extracted dream entries.

Validates:
- Date present and in YYYY-MM-DD form
- Title present, 2 to 200 characters
- Content present and at least 5 characters
- At least one metric
- Word count positive and close to the count re-derived from content
- Source path present

Defects are returned as strings and attached to the entry's metadata by
the content parser. Validation never raises and never removes an entry.

Usage:
    from oneiro.validators.entry import validate_entry

    issues = validate_entry(entry)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import logging
from typing import Any, List

# --- Local imports ---
from oneiro.core.validators import DataValidator
from oneiro.dataclasses.dream_entry import get_source_file
from oneiro.utils.txt import count_words

logger = logging.getLogger(__name__)

# ----- Constants -----
MIN_TITLE_LENGTH = 2
MAX_TITLE_LENGTH = 200
MIN_CONTENT_LENGTH = 5
MIN_WORD_COUNT_TOLERANCE = 10
WORD_COUNT_TOLERANCE_RATIO = 0.2
INTERNAL_ERROR = "Validation failed due to internal error"


def word_count_tolerance(derived: int) -> float:
    """Allowed drift between stored and re-derived word counts."""
    return max(MIN_WORD_COUNT_TOLERANCE, derived * WORD_COUNT_TOLERANCE_RATIO)


def _check_date(entry: Any, issues: List[str]) -> None:
    value = getattr(entry, "date", None)
    if not value:
        issues.append("Missing date")
    elif not DataValidator.validate_date_string(value):
        issues.append("Invalid date format (should be YYYY-MM-DD)")


def _check_title(entry: Any, issues: List[str]) -> None:
    title = getattr(entry, "title", None)
    if not title:
        issues.append("Missing title")
    elif not MIN_TITLE_LENGTH <= len(title) <= MAX_TITLE_LENGTH:
        issues.append(
            f"Title length should be between {MIN_TITLE_LENGTH} "
            f"and {MAX_TITLE_LENGTH} characters"
        )


def _check_content(entry: Any, issues: List[str]) -> None:
    content = getattr(entry, "content", None)
    if not content or len(content) < MIN_CONTENT_LENGTH:
        issues.append("Content too short or missing")


def _check_metrics(entry: Any, issues: List[str]) -> None:
    if not getattr(entry, "metrics", None):
        issues.append("No metrics found")


def _check_word_count(entry: Any, issues: List[str]) -> None:
    word_count = getattr(entry, "word_count", None)
    if not isinstance(word_count, int) or isinstance(word_count, bool):
        issues.append("Missing word count")
        return
    if word_count <= 0:
        issues.append("Word count should be positive")

    derived = count_words(getattr(entry, "content", "") or "")
    if abs(word_count - derived) > word_count_tolerance(derived):
        issues.append(
            f"Word count ({word_count}) doesn't match content ({derived} words)"
        )


def _check_source(entry: Any, issues: List[str]) -> None:
    if not get_source_file(getattr(entry, "source", None)):
        issues.append("Missing source")


CHECKS = (
    _check_date,
    _check_title,
    _check_content,
    _check_metrics,
    _check_word_count,
    _check_source,
)


def validate_entry(entry: Any) -> List[str]:
    """
    Check an entry against the structural rules.

    Args:
        entry: DreamEntry (or any object with the same attributes)

    Returns:
        List of defect messages, empty when the entry is clean
    """
    issues: List[str] = []
    try:
        for check in CHECKS:
            check(entry, issues)
    except Exception as e:
        logger.error(f"Entry validation crashed: {type(e).__name__}: {e}")
        return [INTERNAL_ERROR]
    return issues
