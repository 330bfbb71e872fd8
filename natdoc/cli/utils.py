"""CLI helper utilities for natdoc commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from natdoc.core.config import DocConfig, load_config
from natdoc.core.diagnostics import BuildResult
from natdoc.core.exceptions import NatDocError
from natdoc.core.logging import configure_logging

console = Console()
err_console = Console(stderr=True)


def global_options(ctx: typer.Context) -> dict[str, Any]:
    """Global flags stored on ``ctx.obj`` by the app callback."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    return {"verbose": obj.get("verbose", False), "quiet": obj.get("quiet", False)}


def setup_logging(ctx: typer.Context, config: DocConfig, *, machine_output: bool = False) -> None:
    """Apply the configured logging, adjusted by ``--verbose``/``--quiet``.

    Machine-readable output keeps the log quiet so only errors reach stderr.
    """
    options = global_options(ctx)
    level = config.logging.level
    if options["verbose"]:
        level = "DEBUG"
    elif options["quiet"] or machine_output:
        level = "ERROR"

    configure_logging(
        level=level,
        format=config.logging.format,
        output_file=config.logging.output_file,
        use_color=config.logging.use_color,
        include_timestamp=config.logging.include_timestamp,
        use_rich=config.logging.use_rich,
        enable_stdlib_bridge=config.logging.enable_stdlib_bridge,
        force_reconfigure=True,
    )


def load_cli_config(root: Path, config_path: Path | None) -> DocConfig:
    """Load configuration for ``root``, exiting with status 1 on failure."""
    try:
        return load_config(config_path, search_dir=root)
    except FileNotFoundError as e:
        err_console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1) from e
    except NatDocError as e:
        err_console.print(f"[red]✗ Configuration error:[/red] {e}")
        raise typer.Exit(1) from e


def print_result(result: BuildResult, *, quiet: bool = False) -> None:
    """Pretty-print warnings and skipped files."""
    if result.warnings and not quiet:
        table = Table(show_header=True, border_style="yellow", title="Warnings")
        table.add_column("Code", style="yellow")
        table.add_column("Location", style="cyan")
        table.add_column("Message", style="white")
        for warning in result.warnings:
            location = warning.source_file or ""
            if location and warning.line is not None:
                location = f"{location}:{warning.line}"
            table.add_row(str(warning.code), location, warning.message)
        console.print(table)

    for failure in result.failed_files:
        console.print(f"[red]✗ Skipped[/red] {failure.source_file}: {failure.reason}")
