"""
Oneiro
======

Resilient extraction of dream entries from journal notes.

Notes contain callout blocks (``[!dream] ...``) holding a dream report:
a date, a title, free text, and metrics written as ``key: value`` pairs.
Oneiro turns each callout into a DreamEntry, tolerating malformed or
adversarial input: a callout that cannot be parsed becomes a flagged
fallback entry instead of an exception, and input size and scanner work
are both bounded.

Main Components:
    - pipeline: ContentParser / parse (failure policies), options, CLI
    - utils: Sanitizer, callout scanner, date resolver, metrics extractor,
      title extraction and content cleaning
    - dataclasses: DreamEntry and ParseResult
    - validators: Structural entry validation
    - core: Logging, exceptions, Result type, data validators

Primary Interfaces:
    - oneiro.parse: Parse one document
    - oneiro.pipeline.cli: Command-line interface (``oneiro``)

Example Usage:
    >>> from oneiro import parse
    >>> result = parse("[!dream] My Dream\\nI flew over water.\\nClarity: 4, Vividness: 3")
    >>> result.entries[0].metrics
    {'Clarity': 4, 'Vividness': 3}
"""

__version__ = "1.0.0"

# Expose primary interfaces for convenience
from oneiro.pipeline.content_parser import ContentParser, parse
from oneiro.pipeline.options import ParseOptions
from oneiro.dataclasses import DreamEntry, ParseResult
from oneiro.utils import (
    CalloutScanner,
    clean_content,
    extract_metrics,
    extract_title,
    resolve_date,
    sanitize_content,
    scan_callouts,
)
from oneiro.validators import validate_entry

__all__ = [
    "ContentParser",
    "parse",
    "ParseOptions",
    "DreamEntry",
    "ParseResult",
    "CalloutScanner",
    "clean_content",
    "extract_metrics",
    "extract_title",
    "resolve_date",
    "sanitize_content",
    "scan_callouts",
    "validate_entry",
]
