#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Diagnostics sink for the oneiro parser and its command-line front end.

Every message carries a level, a category tag (``scan``, ``build``,
``validate``, ``document``, ``cli``...) and an optional structured payload
that is written as JSON. OneiroLogger writes to rotating log files;
NullLogger is what the parsing core uses when the caller passes nothing,
so a missing sink silently discards diagnostics.

Log files (under ``log_dir``):
    <component>.log   everything from DEBUG up
    errors.log        errors only, with tracebacks

Usage:
    from oneiro.core.logging_manager import OneiroLogger, safe_logger

    logger = OneiroLogger(Path("logs"), component_name="parser")
    safe_logger(logger).log_warning("Callout limit reached", {"limit": 1000}, category="scan")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEFAULT_CATEGORY = "parser"


def format_message(
    category: str, message: str, details: Optional[Dict[str, Any]] = None
) -> str:
    """
    Render one diagnostic line.

    Examples:
        >>> format_message("scan", "limit reached", {"limit": 5})
        '[scan] limit reached | {"limit": 5}'
    """
    line = f"[{category}] {message}"
    if details:
        line += f" | {json.dumps(details, default=str, sort_keys=True)}"
    return line


class OneiroLogger:
    """
    Rotating-file diagnostics sink.

    Attributes:
        log_dir: Directory for log files
        component_name: Name of the component (used for the main log file)
        main_logger: Logger for all messages
        error_logger: Logger for errors only
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "oneiro",
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
        console_level: int = logging.WARNING,
    ) -> None:
        """
        Args:
            log_dir: Directory for log files (created if missing)
            component_name: Component name, e.g. 'parser' or 'check'
            max_bytes: Size at which a log file rotates
            backup_count: Rotated files to keep
            console_level: Minimum level echoed to stderr
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.console_level = console_level
        self._setup_loggers()

    def _setup_loggers(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._fresh_logger(f"oneiro.{self.component_name}", logging.DEBUG)
        self.error_logger = self._fresh_logger(f"oneiro.{self.component_name}.errors", logging.ERROR)

        self._add_file_handler(
            self.main_logger, self.log_dir / f"{self.component_name}.log", logging.DEBUG
        )
        self._add_file_handler(
            self.error_logger, self.log_dir / "errors.log", logging.ERROR
        )

        console = logging.StreamHandler()
        console.setLevel(self.console_level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        self.main_logger.addHandler(console)

    @staticmethod
    def _fresh_logger(name: str, level: int) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        # Only this logger's handlers are reset, never global state
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        return logger

    def _add_file_handler(
        self, logger: logging.Logger, file_path: Path, level: int
    ) -> None:
        handler = RotatingFileHandler(
            file_path,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    def close(self) -> None:
        """Close and detach every handler owned by this logger."""
        for logger in (self.main_logger, self.error_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    # ---- Leveled messages ----
    def log_debug(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        category: str = DEFAULT_CATEGORY,
    ) -> None:
        self.main_logger.debug(format_message(category, message, details))

    def log_info(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        category: str = DEFAULT_CATEGORY,
    ) -> None:
        self.main_logger.info(format_message(category, message, details))

    def log_warning(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        category: str = DEFAULT_CATEGORY,
    ) -> None:
        self.main_logger.warning(format_message(category, message, details))

    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a completed or started operation (category 'operation')."""
        self.main_logger.info(format_message("operation", operation, details))

    def log_error(
        self,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
        category: str = DEFAULT_CATEGORY,
    ) -> None:
        """
        Log an exception to both files, with traceback in errors.log.

        Args:
            error: Exception that occurred
            context: Where it happened (file, stage, offset...)
            category: Category tag
        """
        message = format_message(category, f"{type(error).__name__}: {error}", context)
        self.main_logger.error(message)
        self.error_logger.error(message)
        if error.__traceback__ is not None:
            tb = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
            self.error_logger.error(f"Traceback:\n{tb}")

    def log_cli_error(
        self,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log an error and return the message to show in the terminal.

        Examples:
            >>> logger.log_cli_error(ParseOptionsError("max_matches must be positive"))
            '❌ ParseOptionsError: max_matches must be positive'
        """
        self.log_error(error, context or {"source": "cli"}, category="cli")
        return cli_error_message(error, show_traceback)


def cli_error_message(error: BaseException, show_traceback: bool = False) -> str:
    """Terminal rendering of an error."""
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback and error.__traceback__ is not None:
        tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        message += f"\n\n{tb}"
    return message


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log an error raised inside a click command, print it, and exit.

    The logger and verbose flag are read from ``ctx.obj``. This function
    never returns.

    Args:
        ctx: Click context
        error: Exception that occurred
        operation: Command that failed (e.g. 'parse', 'check')
        additional_context: Extra context (file path, options...)
        exit_code: Process exit code
    """
    obj = ctx.obj or {}
    logger: Optional[OneiroLogger] = obj.get("logger")
    verbose: bool = obj.get("verbose", False)

    context = {"operation": operation}
    if additional_context:
        context.update(additional_context)

    click.echo(safe_logger(logger).log_cli_error(error, context, show_traceback=verbose), err=True)
    sys.exit(exit_code)


class NullLogger:
    """
    Logger with the OneiroLogger interface that discards everything.

    Used by the parsing core whenever no sink is supplied.
    """

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None, category: str = DEFAULT_CATEGORY) -> None:
        pass

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None, category: str = DEFAULT_CATEGORY) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None, category: str = DEFAULT_CATEGORY) -> None:
        pass

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: BaseException, context: Optional[Dict[str, Any]] = None, category: str = DEFAULT_CATEGORY) -> None:
        pass

    def log_cli_error(
        self,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return cli_error_message(error, show_traceback)

    def close(self) -> None:
        pass


_null_logger = NullLogger()


def safe_logger(logger: Optional[OneiroLogger]) -> OneiroLogger:
    """
    Return ``logger``, or the shared NullLogger when it is None.

    Use:
        safe_logger(logger).log_info("message")
    """
    return logger if logger is not None else _null_logger  # type: ignore[return-value]
