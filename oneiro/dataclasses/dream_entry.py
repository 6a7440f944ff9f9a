#!/usr/bin/env python3
"""
dream_entry.py
-------------------

Defines the DreamEntry dataclass representing one dream record extracted
from a ``[!dream]`` callout.

Each DreamEntry instance contains:
- canonical date (YYYY-MM-DD)
- title
- cleaned body content and its word count
- metrics found in the callout
- provenance (source file and optional block id)
- callout metadata, including recovery flags for fallback records

Entries are built from scanned CalloutBlocks with ``from_callout``. When a
callout cannot be built, ``fallback`` produces a clearly flagged record that
keeps the original text for manual inspection.
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List, Optional, Union

# ---- Local imports ----
from oneiro.core.exceptions import EntryBuildError
from oneiro.utils.callouts import CalloutBlock, generate_callout_id
from oneiro.utils.dates import resolve_date_or_fallback
from oneiro.utils.md import clean_content, extract_title, truncate_title
from oneiro.utils.metrics import MetricValue, extract_metrics
from oneiro.utils.txt import count_words


# ----- Logging ----
logger = logging.getLogger(__name__)


# ----- Constants -----
FALLBACK_TITLE = "Unparseable Entry"
FALLBACK_TITLE_LINE_LIMIT = 100
UNKNOWN_TYPE = "unknown"


# ----- Provenance -----
@dataclass(frozen=True)
class EntrySource:
    """Source file plus the id of the block inside it."""

    file: str
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"file": self.file}
        if self.id:
            data["id"] = self.id
        return data


Source = Union[str, EntrySource]


def create_source(file: str, block_id: Optional[str] = None) -> Source:
    """
    Build the source value for an entry.

    Returns:
        The bare path when there is no block id, otherwise an EntrySource
    """
    if block_id:
        return EntrySource(file=file, id=block_id)
    return file


def get_source_file(value: Union[DreamEntry, Source, None]) -> str:
    """Path of an entry's source, whichever shape it is stored in."""
    if isinstance(value, DreamEntry):
        value = value.source
    if isinstance(value, EntrySource):
        return value.file
    return value or ""


def get_source_id(value: Union[DreamEntry, Source, None]) -> str:
    """Block id of an entry's source, or an empty string."""
    if isinstance(value, DreamEntry):
        value = value.source
    if isinstance(value, EntrySource):
        return value.id or ""
    return ""


# ----- Metadata -----
@dataclass
class CalloutMetadata:
    """
    Diagnostics and provenance attached to every entry.

    Attributes:
        type: Callout type the entry came from
        id: Content-derived id (``callout-<digits>``) or nested id
        block_id: ``^ref`` id or synthetic nested id
        nested_in_type: Type of the enclosing callout, for nested entries
        properties: Pipe metadata from the marker
        error: Entry was produced from a failure
        parse_failure: Callout could not be built
        recovery_attempted: A fallback record replaced the callout
        is_valid: False for fallback records and invalid nested entries
        warnings: Validation defects and recovery messages
    """

    type: str = UNKNOWN_TYPE
    id: Optional[str] = None
    block_id: Optional[str] = None
    nested_in_type: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)
    error: bool = False
    parse_failure: bool = False
    recovery_attempted: bool = False
    is_valid: bool = True
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_block(cls, block: CalloutBlock) -> CalloutMetadata:
        entry_id = block.block_id if block.is_nested else generate_callout_id(block.raw_span)
        return cls(
            type=block.callout_type,
            id=entry_id,
            block_id=block.block_id,
            nested_in_type=block.nested_in_type,
            properties=dict(block.properties),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "is_valid": self.is_valid}
        for key in ("id", "block_id", "nested_in_type"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.properties:
            data["properties"] = dict(self.properties)
        for flag in ("error", "parse_failure", "recovery_attempted"):
            if getattr(self, flag):
                data[flag] = True
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data


# ----- Dataclass -----
@dataclass
class DreamEntry:
    """
    One dream record.

    Attributes:
        date (str): Canonical YYYY-MM-DD date, never empty.
        title (str): Display title, never empty, at most 100 characters.
        content (str): Body with marker, title lines and metrics section removed.
        source (str | EntrySource): Provenance of the callout.
        word_count (int): Whitespace-separated tokens in ``content``.
        metrics (dict): Metric name to number or string.
        callout_metadata (CalloutMetadata): Diagnostics for the record.
    """

    # ---- Attributes ----
    date: str
    title: str
    content: str
    source: Source = ""
    word_count: int = 0
    metrics: Dict[str, MetricValue] = field(default_factory=dict)
    callout_metadata: CalloutMetadata = field(default_factory=CalloutMetadata)

    # ---- Properties ----
    @property
    def source_file(self) -> str:
        return get_source_file(self.source)

    @property
    def is_fallback(self) -> bool:
        return self.callout_metadata.recovery_attempted

    # ---- Public constructors ----
    @classmethod
    def from_callout(
        cls,
        block: CalloutBlock,
        source_path: str = "",
        fallback_date: Optional[date] = None,
    ) -> DreamEntry:
        """
        Build an entry from one scanned callout.

        Title and metrics come from the raw span, so metrics inside the
        removed metrics section are still captured. The word count is
        taken from the cleaned content.

        Raises:
            EntryBuildError: If the span is not text or is empty
        """
        span = block.raw_span
        if not isinstance(span, str):
            raise EntryBuildError(
                f"Callout content is not text ({type(span).__name__})"
            )
        if not span.strip():
            raise EntryBuildError(
                f"Empty callout content found at position {block.start_offset}"
            )

        metadata = CalloutMetadata.from_block(block)
        content = clean_content(span, block.callout_type)
        entry = cls(
            date=resolve_date_or_fallback(span, fallback_date),
            title=extract_title(span),
            content=content,
            source=create_source(source_path, metadata.block_id),
            word_count=count_words(content),
            metrics=extract_metrics(span),
            callout_metadata=metadata,
        )
        logger.debug(
            f"Built entry {metadata.id} '{entry.title}' "
            f"({entry.word_count} words, {len(entry.metrics)} metrics)"
        )
        return entry

    @classmethod
    def fallback(
        cls,
        raw_span: Any,
        source_path: str,
        error: Union[BaseException, str],
        metadata: Optional[CalloutMetadata] = None,
        fallback_date: Optional[date] = None,
    ) -> DreamEntry:
        """
        Build a flagged record for a callout that failed to parse.

        The record keeps the original text in its content, has no metrics
        and is marked ``error``, ``parse_failure``, ``recovery_attempted``
        and not valid.
        """
        message = error if isinstance(error, str) else (str(error) or type(error).__name__)
        span = raw_span if isinstance(raw_span, str) else ("" if raw_span is None else str(raw_span))

        title = FALLBACK_TITLE
        first_line = span.split("\n", 1)[0].strip()
        if first_line and len(first_line) < FALLBACK_TITLE_LINE_LIMIT:
            title = truncate_title(f"Unparseable: {first_line}")

        base = metadata or CalloutMetadata()
        flagged = replace(
            base,
            properties=dict(base.properties),
            error=True,
            parse_failure=True,
            recovery_attempted=True,
            is_valid=False,
            warnings=[f"Parsing error: {message}"] + list(base.warnings),
        )

        content = f"Error parsing content: {message}\n\nOriginal content:\n{span}"
        return cls(
            date=resolve_date_or_fallback(span, fallback_date),
            title=title,
            content=content,
            source=create_source(source_path, flagged.block_id),
            word_count=count_words(content),
            metrics={},
            callout_metadata=flagged,
        )

    # ---- Output ----
    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        source = self.source.to_dict() if isinstance(self.source, EntrySource) else self.source
        return {
            "date": self.date,
            "title": self.title,
            "content": self.content,
            "source": source,
            "word_count": self.word_count,
            "metrics": dict(self.metrics),
            "callout_metadata": self.callout_metadata.to_dict(),
        }

    def __str__(self) -> str:
        return f"DreamEntry({self.date}, '{self.title}', {self.word_count} words)"
