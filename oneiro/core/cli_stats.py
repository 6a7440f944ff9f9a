#!/usr/bin/env python3
"""
cli_stats.py
-------------------
Statistics tracking for CLI operations.

Classes:
    OperationStats: Base class for all statistics
    ParseStats: For parse/check runs over one or more notes

Usage:
    from oneiro.core.cli_stats import ParseStats

    stats = ParseStats()
    stats.record(result)
    print(stats.summary())
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from oneiro.dataclasses.parse_result import ParseResult


@dataclass
class OperationStats:
    """
    Base class for CLI operation statistics.

    Attributes:
        files_processed: Number of files successfully processed
        errors: Number of errors encountered
        start_time: Operation start timestamp
    """
    files_processed: int = 0
    errors: int = 0
    start_time: datetime = field(default_factory=datetime.now)

    def duration(self) -> float:
        """
        Get elapsed time in seconds.

        Returns:
            Seconds elapsed since start_time
        """
        return (datetime.now() - self.start_time).total_seconds()

    def summary(self) -> str:
        """
        Get formatted summary string.

        Returns:
            Human-readable summary of operation statistics
        """
        return (
            f"{self.files_processed} files processed, "
            f"{self.errors} errors, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON output.

        Returns:
            Dictionary with all metrics and computed duration
        """
        return {
            "files_processed": self.files_processed,
            "errors": self.errors,
            "duration": self.duration(),
        }


@dataclass
class ParseStats(OperationStats):
    """
    Statistics for parse operations.

    Attributes:
        entries_found: Entries extracted across all files
        warnings: Validation and document warnings across all files
        failed_files: Files whose parse reported at least one error
    """
    entries_found: int = 0
    warnings: int = 0
    failed_files: List[str] = field(default_factory=list)

    def record(self, result: ParseResult, file_name: str = "") -> None:
        """Fold one file's ParseResult into the running totals."""
        self.files_processed += 1
        self.entries_found += result.metadata.total_entries
        self.warnings += result.metadata.warning_count
        self.errors += result.metadata.error_count
        if not result.metadata.success:
            self.failed_files.append(file_name)

    def summary(self) -> str:
        """Get formatted summary with entry metrics."""
        return (
            f"{self.files_processed} files processed, "
            f"{self.entries_found} entries, "
            f"{self.warnings} warnings, "
            f"{self.errors} errors, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with entry metrics."""
        d = super().to_dict()
        d.update({
            "entries_found": self.entries_found,
            "warnings": self.warnings,
            "failed_files": list(self.failed_files),
        })
        return d
