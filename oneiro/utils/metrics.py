#!/usr/bin/env python3
"""
metrics.py
-------------------
Metric extraction from dream callouts.

Journals write metrics two ways: a dedicated section

    Metrics:
    Clarity: 4
    Vividness: 3

or inline with the prose (``Clarity: 4, Vividness: 3``). Extraction runs
two passes over the same span and merges them, first pass winning:

1. The metrics section: a ``Metrics`` label line (optionally bold) and the
   lines that follow it up to a blank line; without a label, every
   paragraph in which at least half of the non-empty lines are pairs.
2. Every line of the span.

Within a pass the first occurrence of a key wins. Values that are plain
decimal numbers become int/float, anything else stays a trimmed string.
"""
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Dict, Iterable, List, Optional, Tuple, Union

from oneiro.core.validators import DataValidator

MetricValue = Union[int, float, str]
Metrics = Dict[str, MetricValue]

# ----- Patterns -----
# "Metrics", "Metrics:", "**Metrics**", "**Metrics:** Clarity: 4", ...
METRICS_LABEL = re.compile(
    r"^\s*(?:\*\*)?Metrics(?:\*\*)?\s*(?::{1,2}(?:\*\*)?|(?=\s*$))\s*(?P<rest>.*)$",
    re.IGNORECASE,
)

# Key: up to five words starting with a letter.
# Value: a number not glued to other characters, or text up to , ; or EOL.
PAIR_PATTERN = re.compile(
    r"(?<![\w'-])"
    r"(?P<key>[^\W\d_][\w'-]*(?:[ \t]+[^\W\d_][\w'-]*){0,4})"
    r"[ \t]*::?(?!/)[ \t]*"
    r"(?P<value>-?\d+(?:\.\d+)?(?![\w:/-]|\.\d)|[^,;\n]*[^,;\s])"
)

SECTION_PAIR_RATIO = 0.5
LABEL_KEY = "metrics"


# ----- Values and pairs -----
def parse_metric_value(text: str) -> MetricValue:
    """
    Convert a raw metric value.

    Examples:
        >>> parse_metric_value("4")
        4
        >>> parse_metric_value("-2.5")
        -2.5
        >>> parse_metric_value(" very high ")
        'very high'
    """
    number = DataValidator.normalize_number(text)
    if number is not None:
        return number
    return text.strip()


def parse_metric_pairs(line: str) -> List[Tuple[str, MetricValue]]:
    """
    Parse every ``key: value`` pair on a line, in order.

    Pairs may be separated by commas or semicolons. The label word
    ``Metrics`` is never returned as a key.
    """
    pairs: List[Tuple[str, MetricValue]] = []
    if not line:
        return pairs
    label = METRICS_LABEL.match(line)
    if label:
        line = label.group("rest")
    for match in PAIR_PATTERN.finditer(line):
        key = DataValidator.normalize_string(match.group("key"))
        if not key or key.lower() == LABEL_KEY:
            continue
        pairs.append((key, parse_metric_value(match.group("value"))))
    return pairs


def _is_pair_line(line: str) -> bool:
    return bool(parse_metric_pairs(line))


# ----- Sections -----
def _paragraphs(lines: List[str]) -> List[Tuple[int, int]]:
    """(start, end) index ranges of blank-line separated paragraphs."""
    ranges: List[Tuple[int, int]] = []
    start: Optional[int] = None
    for i, line in enumerate(lines):
        if line.strip():
            if start is None:
                start = i
        elif start is not None:
            ranges.append((start, i))
            start = None
    if start is not None:
        ranges.append((start, len(lines)))
    return ranges


def find_metrics_section(lines: List[str]) -> Optional[Tuple[int, int]]:
    """
    Locate the labeled metrics section.

    Args:
        lines: Span split into lines

    Returns:
        (start, end) line range, label line included and end exclusive,
        or None when there is no ``Metrics`` label
    """
    for i, line in enumerate(lines):
        if METRICS_LABEL.match(line):
            end = i + 1
            while end < len(lines) and lines[end].strip():
                end += 1
            return i, end
    return None


def _section_lines(lines: List[str]) -> List[str]:
    """Lines belonging to the first pass."""
    section = find_metrics_section(lines)
    if section is not None:
        start, end = section
        return lines[start:end]

    dominated: List[str] = []
    for start, end in _paragraphs(lines):
        block = [line for line in lines[start:end] if line.strip()]
        pair_lines = sum(1 for line in block if _is_pair_line(line))
        if block and pair_lines / len(block) >= SECTION_PAIR_RATIO:
            dominated.extend(block)
    return dominated


def _collect(lines: Iterable[str], into: Metrics) -> None:
    for line in lines:
        for key, value in parse_metric_pairs(line):
            into.setdefault(key, value)


# ----- Public API -----
def extract_metrics(span: Optional[str]) -> Metrics:
    """
    Extract metrics from a callout span.

    Args:
        span: Raw, uncleaned callout text

    Returns:
        Mapping of metric name to number or string

    Examples:
        >>> extract_metrics("I flew over water.\\nClarity: 4, Vividness: 3")
        {'Clarity': 4, 'Vividness': 3}
    """
    if not span or not isinstance(span, str):
        return {}

    lines = span.splitlines()
    section: Metrics = {}
    _collect(_section_lines(lines), section)

    inline: Metrics = {}
    _collect(lines, inline)

    merged = dict(section)
    for key, value in inline.items():
        merged.setdefault(key, value)
    return merged


def extract_metrics_text(span: Optional[str]) -> str:
    """Lines of the span that carry at least one metric pair."""
    if not span or not isinstance(span, str):
        return ""
    return "\n".join(
        line.strip() for line in span.splitlines() if _is_pair_line(line)
    )


def extract_metrics_from_callouts(spans: Iterable[str]) -> Metrics:
    """Merge metrics from several spans; the earliest span wins."""
    merged: Metrics = {}
    for span in spans:
        for key, value in extract_metrics(span).items():
            merged.setdefault(key, value)
    return merged
