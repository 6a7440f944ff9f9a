#!/usr/bin/env python3
"""
notes.py
-------------------
Parse note files from disk.

The content parser never touches the filesystem; this module is the file
reader around it, used by the command-line front end. Each note is read,
parsed with its path as the source, and folded into ParseStats.

Programmatic API:
    from oneiro.pipeline.notes import parse_file, parse_path
    result = parse_file(Path("journal/2024-01.md"), options, logger)
    results, stats = parse_path(Path("journal"), options, logger)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Dict, Optional, Tuple

# --- Local imports ---
from oneiro.core.cli_stats import ParseStats
from oneiro.core.cli_utils import find_note_files, read_note
from oneiro.core.logging_manager import OneiroLogger, safe_logger
from oneiro.dataclasses.parse_result import ParseResult
from oneiro.pipeline.content_parser import ContentParser
from oneiro.pipeline.options import ParseOptions


def parse_file(
    path: Path,
    options: Optional[ParseOptions] = None,
    logger: Optional[OneiroLogger] = None,
) -> ParseResult:
    """
    Read and parse one note.

    Args:
        path: Note file
        options: Parse options; ``source_path`` is set to ``path``
        logger: Optional diagnostics sink

    Returns:
        ParseResult for the note

    Raises:
        OSError: If the file cannot be read
    """
    opts = (options or ParseOptions()).replace(source_path=str(path))
    safe_logger(logger).log_debug(f"Parsing {path}", category="cli")
    return ContentParser(opts, logger).parse(read_note(path))


def parse_path(
    input_path: Path,
    options: Optional[ParseOptions] = None,
    logger: Optional[OneiroLogger] = None,
    pattern: str = "*.md",
) -> Tuple[Dict[str, ParseResult], ParseStats]:
    """
    Parse a note or every note under a directory.

    Unreadable files are counted as errors and skipped; parse failures are
    reported inside each ParseResult.

    Returns:
        Tuple of (results keyed by file path, aggregated stats)

    Raises:
        FileNotFoundError: If ``input_path`` does not exist
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input not found: {input_path}")

    stats = ParseStats()
    results: Dict[str, ParseResult] = {}
    files = find_note_files(input_path, pattern)

    safe_logger(logger).log_operation(
        "parse_path_start", {"input": str(input_path), "files_found": len(files)}
    )

    for note in files:
        try:
            result = parse_file(note, options, logger)
        except OSError as e:
            stats.errors += 1
            stats.failed_files.append(str(note))
            safe_logger(logger).log_error(e, {"file": str(note)}, category="cli")
            continue
        results[str(note)] = result
        stats.record(result, str(note))

    safe_logger(logger).log_operation("parse_path_complete", {"stats": stats.summary()})
    return results, stats
