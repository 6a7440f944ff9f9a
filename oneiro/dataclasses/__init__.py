"""
dataclasses package
-------------------
Dataclass definitions for extracted dream records.

This package provides:
- DreamEntry: One record built from a callout (or a fallback record)
- CalloutMetadata / EntrySource: Diagnostics and provenance of a record
- ParseResult / ParseMetadata: Outcome of parsing one document
"""
from oneiro.dataclasses.dream_entry import (
    CalloutMetadata,
    DreamEntry,
    EntrySource,
    create_source,
    get_source_file,
    get_source_id,
)
from oneiro.dataclasses.parse_result import ParseMetadata, ParseResult

__all__ = [
    "CalloutMetadata",
    "DreamEntry",
    "EntrySource",
    "ParseMetadata",
    "ParseResult",
    "create_source",
    "get_source_file",
    "get_source_id",
]
