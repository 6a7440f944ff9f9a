#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Oneiro project.

This module defines the exceptions raised inside the callout extraction
pipeline. Only the parse supervisor decides whether a caller ever sees them
(strict mode) or whether they are converted into fallback entries and
diagnostics (lenient mode, the default).

Exception Hierarchy:
    Exception (built-in)
    ├── ValidationError - Data validation failures
    ├── ParseOptionsError - Invalid parse options (caller contract)
    ├── CalloutScanError - Document-level scanning failures
    └── EntryBuildError - Block-level entry construction failures

Usage:
    from oneiro.core.exceptions import EntryBuildError, CalloutScanError

    try:
        entry = DreamEntry.from_callout(block)
    except EntryBuildError as e:
        logger.log_warning(f"Callout skipped: {e}")
"""


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised by helpers that must reject a value outright rather than
    report a defect (the entry validator itself never raises):
    - Invalid date formats
    - Malformed option files
    - Type mismatches

    Examples:
        >>> raise ValidationError("Invalid date format: expected YYYY-MM-DD")
        >>> raise ValidationError("Options file must contain a mapping")
    """

    pass


class ParseOptionsError(ValidationError):
    """
    Exception for invalid parse option combinations.

    Raised at the API boundary, when ParseOptions are constructed, so
    that bad configuration fails fast instead of deep inside the pipeline:
    - Empty or malformed callout type
    - Non-positive content length or match limits
    - Unknown option keys in a config file

    Examples:
        >>> raise ParseOptionsError("callout_type must not be empty")
        >>> raise ParseOptionsError("max_content_length must be positive, got 0")
    """

    pass


class CalloutScanError(Exception):
    """
    Exception for document-level scanning failures.

    Raised when the callout scanner itself cannot continue over a
    document (unexpected structural failure while iterating matches).
    Governed by the transactional policy: transactional parses discard
    every entry collected so far, incremental parses keep them.

    Examples:
        >>> raise CalloutScanError("Scanner failed at offset 1024")
    """

    pass


class EntryBuildError(Exception):
    """
    Exception for block-level entry construction failures.

    Raised while turning one callout span into a DreamEntry:
    - Empty callout content
    - Span that is not text

    In lenient mode the supervisor converts it into a fallback entry and
    continues with the next callout.

    Examples:
        >>> raise EntryBuildError("Empty callout content")
    """

    pass
