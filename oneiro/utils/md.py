#!/usr/bin/env python3
"""
md.py
-------------------
Markdown-level helpers for callout bodies.

Provides:
- Title extraction (H1, H2, ``Title:`` line, short first line)
- Content cleaning (marker header, title lines, metrics section and
  ``key:: value`` property lines removed, blank runs collapsed)

Metrics are always extracted from the raw span, so removing the metrics
section here never loses data.
"""
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import List, Optional

from .callouts import strip_callout_header
from .metrics import find_metrics_section

# ----- Constants -----
MAX_TITLE_LENGTH = 100
FIRST_LINE_TITLE_LIMIT = 80
UNTITLED = "Untitled Entry"

H1_LINE = re.compile(r"^#[ \t]+(?P<title>.*\S.*)$", re.MULTILINE)
H2_LINE = re.compile(r"^##[ \t]+(?P<title>.*\S.*)$", re.MULTILINE)
TITLE_LINE = re.compile(r"^[ \t]*Title:[ \t]*(?P<title>.*\S.*)$", re.MULTILINE | re.IGNORECASE)
PROPERTY_LINE = re.compile(r"^[\w-]+::\s*\S.*$")


def truncate_title(title: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """
    Shorten a title to ``max_length`` characters, ending in '...'.

    Examples:
        >>> truncate_title("x" * 120)[-3:]
        '...'
        >>> len(truncate_title("x" * 120))
        100
    """
    if len(title) <= max_length:
        return title
    return title[: max_length - 3].rstrip() + "..."


# ----- Title -----
def extract_title(content: Optional[str]) -> str:
    """
    Pick a display title for a callout.

    First match wins:
    1. ``# Heading``
    2. ``## Heading``
    3. ``Title: Something`` (label is case-insensitive)
    4. The first non-empty line, if shorter than 80 characters

    Heading and label text is trimmed of surrounding whitespace, so
    ``# T`` gives back ``T`` only when ``T`` has no leading or trailing
    spaces (and fits in 100 characters).

    Args:
        content: Callout text, with or without its marker

    Returns:
        Non-empty title, at most 100 characters, or "Untitled Entry"

    Examples:
        >>> extract_title("# Flying\\nI was over the sea")
        'Flying'
        >>> extract_title("Title: The Library")
        'The Library'
    """
    if not content or not isinstance(content, str):
        return UNTITLED

    body = strip_callout_header(content)
    for pattern in (H1_LINE, H2_LINE, TITLE_LINE):
        match = pattern.search(body)
        if match:
            return truncate_title(match.group("title").strip())

    for line in body.splitlines():
        line = line.strip()
        if line:
            if len(line) < FIRST_LINE_TITLE_LIMIT:
                return line
            break
    return UNTITLED


# ----- Content -----
def _collapse_blank_lines(lines: List[str]) -> List[str]:
    collapsed: List[str] = []
    for line in lines:
        if not line.strip():
            if collapsed and collapsed[-1] == "":
                continue
            line = ""
        collapsed.append(line)
    return collapsed


def clean_content(span: Optional[str], callout_type: str = "dream") -> str:
    """
    Strip structural lines from a callout body.

    Removes, in order: a leading ``[!type]`` marker, the first H1, the
    first H2 and the first ``Title:`` line, the labeled metrics section,
    and every ``key:: value`` property line. Blank-line runs collapse to a
    single blank line and the result is trimmed. Inline metrics inside
    prose are left in place.

    Args:
        span: Raw callout text
        callout_type: Marker type whose header should be removed

    Returns:
        Cleaned body (possibly empty)
    """
    if not span or not isinstance(span, str):
        return ""

    header = re.compile(
        r"^\s*\[!" + re.escape(callout_type) + r"(?:\|[^\]\[\n|]*)?\][+-]?[ \t]*",
        re.IGNORECASE,
    )
    text = header.sub("", span, count=1)
    for pattern in (H1_LINE, H2_LINE, TITLE_LINE):
        text = pattern.sub("", text, count=1)

    lines = text.split("\n")
    section = find_metrics_section(lines)
    if section is not None:
        start, end = section
        del lines[start:end]

    lines = [line for line in lines if not PROPERTY_LINE.match(line.strip())]
    return "\n".join(_collapse_blank_lines(lines)).strip()
