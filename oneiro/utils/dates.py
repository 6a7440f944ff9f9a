#!/usr/bin/env python3
"""
dates.py
-------------------
Date resolution for callout spans.

Grammars are tried in priority order and the first grammar that yields a
calendar-valid date wins. The grammars are never cross-checked against
each other:

1. ISO-like ``YYYY-MM-DD`` or ``YYYY/MM/DD`` anywhere in the span
2. US ``MM/DD/YYYY``
3. English month names, full or abbreviated (``January 15th, 2023``)
4. Block references ``^YYYYMMDD``

Only years between 1900 and 2100 are accepted. Month names are matched
against a fixed English table so results do not depend on the locale.
"""
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import date
from re import Match, Pattern
from typing import Callable, List, Optional, Tuple

from oneiro.core.validators import DataValidator

# ----- Constants -----
MIN_YEAR = 1900
MAX_YEAR = 2100

MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}
_MONTH_ALTERNATION = "|".join(sorted(MONTHS, key=len, reverse=True))

ISO_DATE = re.compile(r"(?<!\d)(\d{4})([-/])(\d{1,2})\2(\d{1,2})(?!\d)")
US_DATE = re.compile(r"(?<![\d/])(\d{1,2})/(\d{1,2})/(\d{4})(?!\d)")
TEXT_DATE = re.compile(
    rf"\b({_MONTH_ALTERNATION})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?,?\s+(\d{{4}})(?!\d)",
    re.IGNORECASE,
)
BLOCK_REF_DATE = re.compile(r"\^(\d{4})(\d{2})(\d{2})(?!\d)")


def _build(year: str, month: str, day: str) -> Optional[date]:
    y, m, d = int(year), int(month), int(day)
    if not MIN_YEAR <= y <= MAX_YEAR:
        return None
    try:
        return date(y, m, d)
    except ValueError:
        return None


def _iso(m: Match) -> Optional[date]:
    return _build(m.group(1), m.group(3), m.group(4))


def _us(m: Match) -> Optional[date]:
    return _build(m.group(3), m.group(1), m.group(2))


def _text(m: Match) -> Optional[date]:
    month = MONTHS[m.group(1).lower()]
    return _build(m.group(3), str(month), m.group(2))


def _block_ref(m: Match) -> Optional[date]:
    return _build(m.group(1), m.group(2), m.group(3))


GRAMMARS: List[Tuple[str, Pattern, Callable[[Match], Optional[date]]]] = [
    ("iso", ISO_DATE, _iso),
    ("us", US_DATE, _us),
    ("text", TEXT_DATE, _text),
    ("block_ref", BLOCK_REF_DATE, _block_ref),
]


# ----- Public API -----
def canonical_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.isoformat()


def is_canonical_date(value: object) -> bool:
    """True for a calendar-valid YYYY-MM-DD string."""
    return DataValidator.validate_date_string(value)


def resolve_date(span: Optional[str]) -> Optional[str]:
    """
    Find the first date in a span.

    Args:
        span: Callout text

    Returns:
        Canonical YYYY-MM-DD string, or None when no grammar matches

    Examples:
        >>> resolve_date("Dreamt on 2023/1/5 about trains")
        '2023-01-05'
        >>> resolve_date("03/04/2023")
        '2023-03-04'
        >>> resolve_date("January 15th, 2023")
        '2023-01-15'
        >>> resolve_date("2023-02-30") is None
        True
    """
    if not span or not isinstance(span, str):
        return None

    for _name, pattern, convert in GRAMMARS:
        for match in pattern.finditer(span):
            resolved = convert(match)
            if resolved is not None:
                return canonical_date(resolved)
    return None


def resolve_date_or_fallback(
    span: Optional[str], fallback: Optional[date] = None
) -> str:
    """
    Resolve a date, substituting ``fallback`` (default: today).

    The result always matches YYYY-MM-DD.
    """
    resolved = resolve_date(span)
    if resolved is not None:
        return resolved
    return canonical_date(fallback or date.today())
