#!/usr/bin/env python3
"""
Oneiro CLI
----------

Command-line interface for extracting dream entries from journal notes.

Commands:
    - parse: Extract entries from a note or a directory of notes
    - check: Summarize entries, warnings and errors per note

Usage:
    # Extract entries as JSON
    oneiro parse journal/2024-01.md

    # Whole vault, nested callouts, YAML output to a file
    oneiro parse journal/ --nested --format yaml -o dreams.yaml

    # Report problems (exit code 1 if any note has errors)
    oneiro check journal/
"""
from __future__ import annotations

import click
from pathlib import Path

from oneiro.core.paths import LOG_DIR
from oneiro.core.cli_utils import setup_logger


@click.group()
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Directory for log files",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, log_dir: str, verbose: bool) -> None:
    """Oneiro dream journal parser"""
    ctx.ensure_object(dict)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "parser")
    ctx.call_on_close(ctx.obj["logger"].close)


# Import and register commands from submodules
from .extract import parse, check

cli.add_command(parse)
cli.add_command(check)


if __name__ == "__main__":
    cli(obj={})
