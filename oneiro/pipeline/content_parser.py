#!/usr/bin/env python3
"""
content_parser.py
-------------------
Parse a note into dream entries without letting bad input escape.

Pipeline for one document:

    text ─► length limit ─► sanitize ─► scan ─► build entry ─► validate ─► ParseResult
                                         │          │
                                         │          └─ failure: fallback entry (lenient)
                                         └─ failure: keep or discard entries (incremental/transactional)

Two independent policies decide what happens on failure:

- strict / lenient: strict re-raises the first internal exception as is;
  lenient turns every failure into data (fallback entries, error strings)
  and never raises past ``parse``.
- transactional / incremental: applies only to document-level failures
  (the scanner itself breaking). Transactional discards every entry
  collected so far; incremental keeps them. A single callout that fails
  to build always yields a fallback entry, whatever this policy says.

The content parser is the only place where a failed Result becomes a
fallback entry or a raised exception.

Programmatic API:
    from oneiro.pipeline.content_parser import parse
    result = parse(text, "dream", "journal/2024-01.md")

    parser = ContentParser(ParseOptions(include_nested=True), logger)
    result = parser.parse(text)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, List, Optional

# --- Local imports ---
from oneiro.core.logging_manager import OneiroLogger, safe_logger
from oneiro.core.result import attempt
from oneiro.dataclasses.dream_entry import CalloutMetadata, DreamEntry
from oneiro.dataclasses.parse_result import ParseResult
from oneiro.pipeline.options import ParseOptions
from oneiro.utils.callouts import CalloutBlock, CalloutScanner
from oneiro.utils.txt import enforce_max_length, sanitize_content
from oneiro.validators.entry import validate_entry


@dataclass
class ParseContext:
    """Mutable state of one document parse."""

    options: ParseOptions
    entries: List[DreamEntry] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0

    def fail(self, message: str) -> None:
        self.error_count += 1
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warning_count += 1
        self.warnings.append(message)

    def result(self) -> ParseResult:
        return ParseResult.from_entries(
            self.entries,
            callout_type=self.options.callout_type,
            error_count=self.error_count,
            warning_count=self.warning_count,
            errors=self.errors,
            warnings=self.warnings,
        )


class ContentParser:
    """
    Resilient callout parser.

    Holds only configuration (options and diagnostics sink); every call to
    ``parse`` uses its own scanner and context, so one instance can serve
    several threads.
    """

    def __init__(
        self,
        options: Optional[ParseOptions] = None,
        logger: Optional[OneiroLogger] = None,
    ) -> None:
        self.options = options or ParseOptions()
        self.logger = logger

    # ---- Public API ----
    def parse(self, text: Any, options: Optional[ParseOptions] = None) -> ParseResult:
        """
        Parse one document.

        Args:
            text: Note content; anything that is not a string is treated
                as empty (and reported in lenient mode)
            options: Overrides the parser's options for this call

        Returns:
            ParseResult, always, unless ``options.strict`` is set

        Raises:
            Any internal exception, unwrapped, in strict mode only
        """
        opts = options or self.options
        log = safe_logger(self.logger)
        try:
            result = self._parse_document(text, opts)
        except Exception as e:
            if opts.strict:
                raise
            log.log_error(e, {"source": opts.source_path}, category="document")
            return ParseResult.empty(
                opts.callout_type, [f"Failed to parse content: {e}"]
            )

        log.log_operation(
            "parse_content",
            {
                "source": opts.source_path,
                "callout_type": opts.callout_type,
                "entries": result.metadata.total_entries,
                "errors": result.metadata.error_count,
                "warnings": result.metadata.warning_count,
            },
        )
        return result

    # ---- Document ----
    def _parse_document(self, text: Any, opts: ParseOptions) -> ParseResult:
        log = safe_logger(self.logger)
        ctx = ParseContext(opts)

        if not isinstance(text, str):
            if text is not None:
                if opts.strict:
                    raise TypeError(
                        f"Content must be a string, got {type(text).__name__}"
                    )
                ctx.fail(f"Invalid content type: {type(text).__name__}")
            return ctx.result()
        if not text.strip():
            return ctx.result()

        text, truncated = enforce_max_length(text, opts.max_content_length)
        if truncated:
            ctx.warn(truncated)
            log.log_warning(truncated, {"source": opts.source_path}, category="document")

        if opts.sanitize:
            text = sanitize_content(text)

        scanner = CalloutScanner(opts.callout_type, max_matches=opts.max_matches)
        try:
            for block in scanner.scan(text):
                self._process_block(block, ctx)
            if opts.include_nested:
                for block in scanner.scan_nested(text):
                    self._process_block(block, ctx)
        except Exception as e:
            if opts.strict:
                raise
            log.log_error(
                e,
                {"source": opts.source_path, "entries_so_far": len(ctx.entries)},
                category="scan",
            )
            ctx.fail(f"Failed to parse content: {e}")
            if opts.transactional:
                ctx.entries.clear()

        if scanner.limit_reached:
            message = (
                f"Reached maximum callout limit ({opts.max_matches}). "
                "Some callouts may be skipped."
            )
            ctx.warn(message)
            log.log_warning(message, {"source": opts.source_path}, category="scan")

        return ctx.result()

    # ---- Block ----
    def _process_block(self, block: CalloutBlock, ctx: ParseContext) -> None:
        opts = ctx.options
        log = safe_logger(self.logger)

        outcome = attempt(
            "build",
            DreamEntry.from_callout,
            block,
            source_path=opts.source_path,
            fallback_date=opts.fallback_date,
        )
        if not outcome.ok:
            if opts.strict:
                outcome.unwrap()
            self._recover(block, ctx, outcome.defect)
            return

        entry: DreamEntry = outcome.value  # type: ignore[assignment]
        if opts.validate:
            issues = validate_entry(entry)
            if issues:
                entry.callout_metadata.warnings.extend(issues)
                if block.is_nested:
                    entry.callout_metadata.is_valid = False
                ctx.warning_count += len(issues)
                if opts.debug:
                    log.log_debug(
                        "Validation warnings for entry",
                        {"source": opts.source_path, "title": entry.title, "issues": issues},
                        category="validate",
                    )
        ctx.entries.append(entry)

    def _recover(self, block: CalloutBlock, ctx: ParseContext, defect: Any) -> None:
        """Replace a callout that failed to build with a fallback entry."""
        opts = ctx.options
        log = safe_logger(self.logger)

        label = "nested callout" if block.is_nested else "callout"
        ctx.fail(f"Error processing {label}: {defect.message}")
        if defect.error is not None:
            log.log_error(
                defect.error,
                {"source": opts.source_path, "offset": block.start_offset},
                category="build",
            )

        metadata = CalloutMetadata(
            type=block.callout_type,
            block_id=block.block_id,
            nested_in_type=block.nested_in_type,
            properties=dict(block.properties),
        )
        ctx.entries.append(
            DreamEntry.fallback(
                block.raw_span,
                opts.source_path,
                defect.error if defect.error is not None else defect.message,
                metadata=metadata,
                fallback_date=opts.fallback_date,
            )
        )


def parse(
    text: Any,
    callout_type: Optional[str] = None,
    source_path: Optional[str] = None,
    options: Optional[ParseOptions] = None,
    logger: Optional[OneiroLogger] = None,
) -> ParseResult:
    """
    Parse a note and return its dream entries.

    Args:
        text: Note content
        callout_type: Overrides ``options.callout_type``
        source_path: Overrides ``options.source_path``
        options: Parse options (defaults: lenient, incremental, validated)
        logger: Diagnostics sink; None discards diagnostics

    Returns:
        ParseResult

    Raises:
        ParseOptionsError: If the callout type or options are invalid
        Any internal exception, in strict mode only

    Examples:
        >>> result = parse("[!dream] Flying\\nI flew.\\nClarity: 4")
        >>> result.entries[0].metrics
        {'Clarity': 4}
    """
    opts = options or ParseOptions()
    changes = {}
    if callout_type is not None:
        changes["callout_type"] = callout_type
    if source_path is not None:
        changes["source_path"] = source_path
    if changes:
        opts = opts.replace(**changes)
    return ContentParser(opts, logger).parse(text)
