#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for oneiro commands.

Functions:
    setup_logger: Initialize OneiroLogger for CLI operations
    find_note_files: Collect the notes to parse from a file or directory
    read_note: Read a note file for parsing

Usage:
    from oneiro.core.cli_utils import setup_logger

    logger = setup_logger(log_dir, "parser")
"""
from pathlib import Path
from typing import List

from oneiro.core.logging_manager import OneiroLogger


def setup_logger(log_dir: Path, component_name: str) -> OneiroLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    an OneiroLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g., 'parser')

    Returns:
        Configured OneiroLogger instance
    """
    operations_log_dir = log_dir / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return OneiroLogger(operations_log_dir, component_name=component_name)


def find_note_files(path: Path, pattern: str = "*.md") -> List[Path]:
    """
    Collect note files under a path.

    A file path is returned as-is; a directory is searched recursively,
    skipping hidden directories (.obsidian, .trash, ...).

    Args:
        path: File or directory
        pattern: Glob pattern for directory searches

    Returns:
        Sorted list of note files
    """
    if path.is_file():
        return [path]
    return sorted(
        p
        for p in path.rglob(pattern)
        if p.is_file()
        and not any(part.startswith(".") for part in p.relative_to(path).parts)
    )


def read_note(path: Path) -> str:
    """
    Read a note as UTF-8, replacing undecodable bytes.

    The parser sanitizes whatever survives decoding, so a stray byte
    should not stop a whole vault run.
    """
    return path.read_text(encoding="utf-8", errors="replace")
