#!/usr/bin/env python3
"""
callouts.py
-------------------
Callout scanning for dream-journal notes.

A callout is a lead marker ``[!TYPE]`` followed by free text. The scanner
captures everything after a marker of the requested type, non-greedily, up
to the next ``[!`` of any type or the end of the text. There is no closing
token and no indentation scoping: a marker that shows up inside another
block's prose ends that block. Callers rely on the resulting block count,
so this stays as it is.

Provides:
- CalloutBlock / CalloutScanner: bounded, lazy block segmentation
- Nested scanning of target callouts quoted inside other callouts
- Marker helpers (type, pipe properties, stable ids, block references)

Intended to be imported by the entry builder and the content parser.
"""
from __future__ import annotations

# --- Standard library imports ---
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterator, List, Optional

from oneiro.core.exceptions import CalloutScanError

logger = logging.getLogger(__name__)


# ----- Constants -----
MAX_MATCHES = 1000
MAX_CONTAINERS = 100
ID_HASH_WINDOW = 1000
DEFAULT_TYPE = "unknown"

# [!type], [!type|k=v,k2=v2], optional fold marker
MARKER_PATTERN = re.compile(
    r"\[!(?P<type>[\w-]+)(?:\|(?P<props>[^\]\[\n|]*))?\][+-]?"
)
# Container markers: line start, at most one quote level
CONTAINER_PATTERN = re.compile(
    r"^[ \t]*(?:>[ \t]*)?\[!(?P<type>[\w-]+)(?:\|[^\]\[\n|]*)?\][+-]?",
    re.MULTILINE,
)
QUOTE_PREFIX = re.compile(r"^[ \t]*(?:>[ \t]?)+", re.MULTILINE)
LEADING_MARKER = re.compile(
    r"^\s*\[![\w-]+(?:\|[^\]\[\n|]*)?\][+-]?[ \t]*"
)
PROPERTY_LINE = re.compile(r"^\s*([\w-]+)(?:::|:)\s*(.+?)\s*$")
BLOCK_ID_PATTERN = re.compile(r"(?:^|\s)\^(?P<id>[A-Za-z0-9-]+)[ \t]*$", re.MULTILINE)


@lru_cache(maxsize=32)
def block_pattern(callout_type: str) -> re.Pattern:
    """Compiled block regex for one callout type (case-insensitive)."""
    return re.compile(
        r"\[!"
        + re.escape(callout_type)
        + r"(?:\|(?P<props>[^\]\[\n|]*))?\][+-]?"
        + r"(?P<body>[\s\S]*?)(?=\[!|\Z)",
        re.IGNORECASE,
    )


def _require_text(text: object) -> None:
    if text is not None and not isinstance(text, str):
        raise CalloutScanError(f"Cannot scan {type(text).__name__}, expected text")


# ----- Data -----
@dataclass(frozen=True)
class CalloutBlock:
    """
    One scanned callout.

    Attributes:
        raw_span: Trimmed text following the marker, up to the next marker
        start_offset: Offset of the marker in the scanned text
        callout_type: Type the scanner searched for
        properties: Pipe metadata from the marker (``[!dream|mood=calm]``)
        nested_in_type: Type of the enclosing callout for nested matches
        block_id: Synthetic id for nested matches, ``^ref`` id otherwise
    """

    raw_span: str
    start_offset: int
    callout_type: str
    properties: Dict[str, str] = field(default_factory=dict)
    nested_in_type: Optional[str] = None
    block_id: Optional[str] = None

    @property
    def is_nested(self) -> bool:
        return self.nested_in_type is not None


class CalloutScanner:
    """
    Bounded scanner for callouts of a single type.

    A scanner is cheap and holds per-scan state (``limit_reached``), so
    create one per document instead of sharing it between threads.

    Usage:
        scanner = CalloutScanner("dream")
        for block in scanner.scan(text):
            ...
        if scanner.limit_reached:
            ...
    """

    def __init__(
        self,
        callout_type: str = "dream",
        max_matches: int = MAX_MATCHES,
        max_containers: int = MAX_CONTAINERS,
    ) -> None:
        self.callout_type = callout_type
        self.max_matches = max_matches
        self.max_containers = max_containers
        self.limit_reached = False
        self._pattern = block_pattern(callout_type)

    def scan(self, text: str) -> Iterator[CalloutBlock]:
        """
        Yield blocks of the scanner's type in order of appearance.

        Stops after ``max_matches`` blocks. ``limit_reached`` is set as
        soon as the last allowed block is yielded.
        """
        _require_text(text)
        if not text:
            return

        count = 0
        for match in self._pattern.finditer(text):
            count += 1
            if count >= self.max_matches:
                self.limit_reached = True
                logger.debug(
                    "Callout limit %d reached at offset %d",
                    self.max_matches,
                    match.start(),
                )
            span = match.group("body").strip()
            yield CalloutBlock(
                raw_span=span,
                start_offset=match.start(),
                callout_type=self.callout_type,
                properties=parse_marker_properties(match.group("props")),
                block_id=find_block_id(span),
            )
            if count >= self.max_matches:
                return

    def scan_nested(self, text: str) -> Iterator[CalloutBlock]:
        """
        Yield target callouts quoted inside callouts of another type.

        Containers start at line-start markers (one quote level at most)
        and run to the next line-start marker. Containers of the target
        type are skipped. Quote prefixes are removed from the container
        body before it is re-scanned.
        """
        _require_text(text)
        if not text:
            return

        target = self.callout_type.lower()
        starts = list(CONTAINER_PATTERN.finditer(text))
        containers = 0

        for index, container in enumerate(starts):
            container_type = container.group("type")
            if container_type.lower() == target:
                continue
            if containers >= self.max_containers:
                self.limit_reached = True
                logger.debug("Container limit %d reached", self.max_containers)
                return
            containers += 1

            end = starts[index + 1].start() if index + 1 < len(starts) else len(text)
            body = QUOTE_PREFIX.sub("", text[container.end():end])

            for n, block in enumerate(self.scan(body)):
                yield CalloutBlock(
                    raw_span=block.raw_span,
                    start_offset=container.start(),
                    callout_type=block.callout_type,
                    properties=block.properties,
                    nested_in_type=container_type,
                    block_id=f"nested-{container.start()}-{n}",
                )
            if self.limit_reached:
                return


def scan_callouts(
    text: str, callout_type: str = "dream", max_matches: int = MAX_MATCHES
) -> Iterator[CalloutBlock]:
    """Convenience generator over a fresh CalloutScanner."""
    yield from CalloutScanner(callout_type, max_matches=max_matches).scan(text)


# ----- Marker helpers -----
def is_callout(text: Optional[str]) -> bool:
    """True when ``text`` starts with a callout marker."""
    if not text or not isinstance(text, str):
        return False
    return LEADING_MARKER.match(text) is not None


def extract_callout_type(text: Optional[str], default: str = DEFAULT_TYPE) -> str:
    """Type of the first marker in ``text``, or ``default``."""
    if not text or not isinstance(text, str):
        return default
    match = MARKER_PATTERN.search(text)
    return match.group("type") if match else default


def strip_callout_header(text: str) -> str:
    """Remove one leading ``[!type]`` marker."""
    return LEADING_MARKER.sub("", text, count=1)


def parse_callout_structure(
    text: Optional[str], default: str = DEFAULT_TYPE
) -> Dict[str, str]:
    """
    Split a callout into its type, body and content id.

    Returns:
        Dict with 'type', 'content' and, for non-empty input, 'id'

    Examples:
        >>> parse_callout_structure("[!dream] Flying")["content"]
        'Flying'
    """
    if not text or not isinstance(text, str):
        return {"type": default, "content": ""}
    return {
        "type": extract_callout_type(text, default),
        "content": strip_callout_header(text).strip(),
        "id": generate_callout_id(text),
    }


def extract_callout_properties(text: Optional[str]) -> Dict[str, str]:
    """
    Collect ``key:: value`` and ``key: value`` property lines.

    Later lines overwrite earlier ones with the same key.
    """
    properties: Dict[str, str] = {}
    if not text or not isinstance(text, str):
        return properties
    for line in text.splitlines():
        match = PROPERTY_LINE.match(line)
        if match:
            properties[match.group(1)] = match.group(2)
    return properties


def parse_marker_properties(raw: Optional[str]) -> Dict[str, str]:
    """
    Parse pipe metadata from a marker.

    Accepts the text after the pipe (``mood=calm, lucid``) or a whole
    marker body (``dream|mood=calm``). Bare words map to "true".

    Examples:
        >>> parse_marker_properties("dream|mood=calm,lucid")
        {'mood': 'calm', 'lucid': 'true'}
    """
    properties: Dict[str, str] = {}
    if not raw:
        return properties
    if "|" in raw:
        raw = raw.split("|", 1)[1]
    for item in re.split(r"[,;]", raw):
        item = item.strip()
        if not item:
            continue
        if "=" in item:
            key, value = item.split("=", 1)
            if key.strip():
                properties[key.strip()] = value.strip()
        else:
            properties[item] = "true"
    return properties


def generate_callout_id(text: Optional[str]) -> str:
    """
    Stable content-derived id.

    Running hash ``h * 31 + code point`` over the first 1000 characters,
    kept to a signed 32-bit accumulator; the id is ``callout-`` plus the
    last eight digits of its absolute value.

    Examples:
        >>> generate_callout_id("a")
        'callout-97'
    """
    if not text or not isinstance(text, str):
        return "callout-invalid-input"
    h = 0
    for char in text[:ID_HASH_WINDOW]:
        h = ((h << 5) - h + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return f"callout-{str(abs(h))[-8:]}"


def find_block_id(text: Optional[str]) -> Optional[str]:
    """Trailing ``^ref`` block reference, if any."""
    if not text:
        return None
    match = BLOCK_ID_PATTERN.search(text)
    return match.group("id") if match else None


def callout_types(text: str) -> List[str]:
    """Distinct marker types in order of first appearance."""
    seen: List[str] = []
    for match in MARKER_PATTERN.finditer(text or ""):
        kind = match.group("type")
        if kind.lower() not in (s.lower() for s in seen):
            seen.append(kind)
    return seen
