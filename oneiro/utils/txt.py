"""
txt.py
-------------------
Text normalization utilities applied before callout scanning.

Journal notes arrive with curly punctuation, mojibake from copy-pasting,
stray control characters and, occasionally, sizes that would make the
regex-based scanner expensive. Everything here is pure and never raises
for data reasons.

Intended to be imported by the content parser.
"""

from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Optional, Tuple

# --- Third-party library imports ---
from ftfy import fix_text  # type: ignore


# ----- Constants -----
PUNCTUATION_MAP = {
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "—": "--",
    "–": "-",
    "…": "...",
}
_PUNCTUATION_PATTERN = re.compile("|".join(PUNCTUATION_MAP))

# C0 controls and DEL, keeping tab (\x09) and newline (\x0A)
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B-\x1F\x7F]")


# ----- Sanitizing -----
def sanitize_content(text: Optional[str]) -> str:
    """
    input: text, raw note content (None is treated as empty)
    output: normalized text
    process:
      * ftfy repairs mojibake, uncurls quotes and normalizes line breaks
        (HTML entities are left alone so the result is a fixed point)
      * remaining typographic dashes and ellipses become ASCII
      * control characters other than tab and newline are dropped

    sanitize_content(sanitize_content(x)) == sanitize_content(x)
    """
    if not text:
        return ""

    fixed: str = fix_text(
        text,
        unescape_html=False,
        uncurl_quotes=True,
        fix_line_breaks=True,
        normalization="NFC",
    )
    fixed = _PUNCTUATION_PATTERN.sub(lambda m: PUNCTUATION_MAP[m.group(0)], fixed)
    return CONTROL_CHARS.sub("", fixed)


def enforce_max_length(
    text: str, max_length: Optional[int]
) -> Tuple[str, Optional[str]]:
    """
    Cut ``text`` to ``max_length`` characters.

    Returns:
        Tuple of (possibly truncated text, warning message or None).
        Truncation is reported, never raised.
    """
    if max_length is None or len(text) <= max_length:
        return text, None
    warning = (
        f"Content truncated from {len(text)} to {max_length} characters"
    )
    return text[:max_length], warning


# ----- Word count -----
def count_words(text: Optional[str]) -> int:
    """Number of whitespace-separated tokens in ``text``."""
    if not text:
        return 0
    return len(text.split())
