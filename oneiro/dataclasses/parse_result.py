#!/usr/bin/env python3
"""
parse_result.py
-------------------

Defines the ParseResult returned for every parsed document.

A ParseResult holds the entries in order of first appearance and a
ParseMetadata block with counts, word statistics and diagnostics. Both
are created fresh for each parse; ``from_entries`` is the only place the
aggregates are computed, so ``total_entries`` always equals the number of
entries and ``success`` always follows ``error_count``.
"""
# ---- Annotations ----
from __future__ import annotations

# ---- Standard library imports ----
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# ---- Local imports ----
from oneiro.dataclasses.dream_entry import DreamEntry


@dataclass
class ParseMetadata:
    """
    Document-level statistics and diagnostics.

    Attributes:
        total_entries: Number of entries returned
        total_word_count: Sum of entry word counts
        average_word_count: Mean word count, one decimal
        callout_type: Callout type searched for
        error_count: Failures recovered from (or fatal in transactional mode)
        warning_count: Validation defects plus document warnings
        errors: Human-readable failure messages
        warnings: Document warnings (truncation, scanner limits)
    """

    total_entries: int = 0
    total_word_count: int = 0
    average_word_count: float = 0.0
    callout_type: str = "dream"
    error_count: int = 0
    warning_count: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.error_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_entries": self.total_entries,
            "total_word_count": self.total_word_count,
            "average_word_count": self.average_word_count,
            "callout_type": self.callout_type,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "success": self.success,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class ParseResult:
    """Entries of one document plus their metadata."""

    entries: List[DreamEntry] = field(default_factory=list)
    metadata: ParseMetadata = field(default_factory=ParseMetadata)

    # ---- Public constructors ----
    @classmethod
    def empty(
        cls,
        callout_type: str = "dream",
        errors: Optional[List[str]] = None,
    ) -> ParseResult:
        """
        Result with no entries.

        Each error message counts toward ``error_count``.
        """
        errors = list(errors or [])
        return cls(
            entries=[],
            metadata=ParseMetadata(
                callout_type=callout_type,
                error_count=len(errors),
                errors=errors,
            ),
        )

    @classmethod
    def from_entries(
        cls,
        entries: List[DreamEntry],
        callout_type: str = "dream",
        error_count: int = 0,
        warning_count: int = 0,
        errors: Optional[List[str]] = None,
        warnings: Optional[List[str]] = None,
    ) -> ParseResult:
        """Compute the aggregates for a list of entries."""
        entries = list(entries)
        total_words = sum(entry.word_count for entry in entries)
        average = round(total_words / len(entries), 1) if entries else 0.0
        return cls(
            entries=entries,
            metadata=ParseMetadata(
                total_entries=len(entries),
                total_word_count=total_words,
                average_word_count=average,
                callout_type=callout_type,
                error_count=error_count,
                warning_count=warning_count,
                errors=list(errors or []),
                warnings=list(warnings or []),
            ),
        )

    # ---- Output ----
    @property
    def success(self) -> bool:
        return self.metadata.success

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "metadata": self.metadata.to_dict(),
        }
