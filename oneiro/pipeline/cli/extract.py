"""
Extraction Commands
-------------------

Commands for extracting dream entries from notes.

Commands:
    - parse: Print extracted entries (JSON or YAML)
    - check: Per-note summary of entries, warnings and errors

Both accept a single note or a directory (searched recursively for
``*.md``, hidden folders skipped) and share the parse option flags.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
import yaml

from oneiro.core.exceptions import ParseOptionsError
from oneiro.core.logging_manager import OneiroLogger, handle_cli_error
from oneiro.pipeline.notes import parse_path
from oneiro.pipeline.options import ParseOptions
from oneiro.utils.callouts import callout_types
from oneiro.core.cli_utils import read_note


def parse_options(func: Callable) -> Callable:
    """Attach the shared parse option flags to a command."""
    decorators = [
        click.argument("input_path", type=click.Path(exists=True, path_type=Path)),
        click.option("-t", "--callout-type", default=None, help="Callout type to extract [default: dream]"),
        click.option("--nested", is_flag=True, help="Also extract callouts quoted inside other callouts"),
        click.option("--strict", is_flag=True, help="Stop at the first internal failure"),
        click.option("--transactional", is_flag=True, help="Discard a note's entries if scanning fails"),
        click.option("--no-validate", is_flag=True, help="Skip entry validation"),
        click.option("--no-sanitize", is_flag=True, help="Skip text normalization"),
        click.option("--max-length", type=int, default=None, help="Truncate notes to this many characters"),
        click.option(
            "-c",
            "--config",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="YAML file with parse options",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def build_options(
    callout_type: Optional[str],
    nested: bool,
    strict: bool,
    transactional: bool,
    no_validate: bool,
    no_sanitize: bool,
    max_length: Optional[int],
    config: Optional[Path],
) -> ParseOptions:
    """
    Merge flags over the optional config file.

    Only flags that were actually given override the file.
    """
    overrides: Dict[str, Any] = {
        "callout_type": callout_type,
        "max_content_length": max_length,
        "include_nested": True if nested else None,
        "strict": True if strict else None,
        "transactional": True if transactional else None,
        "validate": False if no_validate else None,
        "sanitize": False if no_sanitize else None,
    }
    if config is not None:
        return ParseOptions.from_yaml(config, **overrides)
    return ParseOptions.from_dict({k: v for k, v in overrides.items() if v is not None})


@click.command()
@parse_options
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Output format",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout",
)
@click.pass_context
def parse(
    ctx: click.Context,
    input_path: Path,
    callout_type: Optional[str],
    nested: bool,
    strict: bool,
    transactional: bool,
    no_validate: bool,
    no_sanitize: bool,
    max_length: Optional[int],
    config: Optional[Path],
    output_format: str,
    output: Optional[Path],
) -> None:
    """
    Extract dream entries from INPUT_PATH (a note or a directory).
    """
    logger: OneiroLogger = ctx.obj["logger"]

    try:
        options = build_options(
            callout_type, nested, strict, transactional,
            no_validate, no_sanitize, max_length, config,
        )
        results, stats = parse_path(input_path, options, logger)
    except (ParseOptionsError, FileNotFoundError) as e:
        handle_cli_error(ctx, e, "parse", {"input": str(input_path)})
        return
    except Exception as e:
        handle_cli_error(ctx, e, "parse", {"input": str(input_path), "strict": strict})
        return

    payload = {
        "files": [
            {"source": source, **result.to_dict()} for source, result in results.items()
        ],
        "summary": stats.to_dict(),
    }
    if output_format == "yaml":
        text = yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(payload, indent=2, ensure_ascii=False)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"✅ {stats.summary()}")
        click.echo(f"Written to {output}")
    else:
        click.echo(text)


@click.command()
@parse_options
@click.pass_context
def check(
    ctx: click.Context,
    input_path: Path,
    callout_type: Optional[str],
    nested: bool,
    strict: bool,
    transactional: bool,
    no_validate: bool,
    no_sanitize: bool,
    max_length: Optional[int],
    config: Optional[Path],
) -> None:
    """
    Report entries, warnings and errors for each note in INPUT_PATH.

    Exits with status 1 when any note had errors.
    """
    logger: OneiroLogger = ctx.obj["logger"]
    verbose: bool = ctx.obj.get("verbose", False)

    try:
        options = build_options(
            callout_type, nested, strict, transactional,
            no_validate, no_sanitize, max_length, config,
        )
        results, stats = parse_path(input_path, options, logger)
    except (ParseOptionsError, FileNotFoundError) as e:
        handle_cli_error(ctx, e, "check", {"input": str(input_path)})
        return
    except Exception as e:
        handle_cli_error(ctx, e, "check", {"input": str(input_path), "strict": strict})
        return

    click.echo(f"🔍 Checking {options.callout_type} callouts in {input_path}\n")

    for source, result in results.items():
        meta = result.metadata
        icon = "✅" if meta.success else "❌"
        click.echo(
            f"{icon} {source}: {meta.total_entries} entries, "
            f"{meta.warning_count} warnings, {meta.error_count} errors"
        )
        for message in meta.errors + meta.warnings:
            click.echo(f"    • {message}")
        if verbose:
            for entry in result.entries:
                for warning in entry.callout_metadata.warnings:
                    click.echo(f"    - {entry.date} '{entry.title}': {warning}")
        if meta.total_entries == 0 and meta.success:
            found = [t for t in callout_types(read_note(Path(source))) if t.lower() != options.callout_type.lower()]
            if found:
                click.echo(f"    (other callout types present: {', '.join(found)})")

    for failed in stats.failed_files:
        if failed not in results:
            click.echo(f"❌ {failed}: unreadable")

    click.echo(f"\n{stats.summary()}")
    if stats.failed_files:
        ctx.exit(1)
