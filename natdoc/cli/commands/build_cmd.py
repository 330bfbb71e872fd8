"""Documentation build and check commands for the natdoc CLI."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel

from natdoc.builder import DocBuilder
from natdoc.cli.utils import (
    console,
    err_console,
    global_options,
    load_cli_config,
    print_result,
    setup_logging,
)
from natdoc.core.config import DocConfig
from natdoc.core.diagnostics import BuildResult
from natdoc.core.exceptions import NatDocError
from natdoc.project import discover_sources, load_homepage, write_outputs

RootArgument = Annotated[
    Path,
    typer.Argument(
        help="Project root containing the source directory",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to natdoc.toml or pyproject.toml"),
]
StrictOption = Annotated[
    bool,
    typer.Option("--strict", "-s", help="Fail on the first parse error or unknown tag"),
]


def _run(root: Path, config: DocConfig) -> BuildResult:
    if not config.title:
        config = dataclasses.replace(config, title=root.resolve().name)
    sources = discover_sources(root, config.src, config.extensions)
    homepage = load_homepage(root, config.homepage)
    return DocBuilder(config).build(sources, homepage=homepage)


def build(
    ctx: typer.Context,
    root: RootArgument = Path("."),
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Output directory (default: <root>/<out> from config)"),
    ] = None,
    config_path: ConfigOption = None,
    strict: StrictOption = False,
    json_out: Annotated[
        bool, typer.Option("--json", help="Print a machine-readable build report")
    ] = False,
    clean: Annotated[
        bool, typer.Option("--clean/--no-clean", help="Empty the output directory first")
    ] = True,
) -> None:
    """Build the documentation book for a project.

    Examples
    --------
    natdoc build
    natdoc build path/to/project --out site --strict
    natdoc build --json
    """
    config = load_cli_config(root, config_path)
    if strict:
        config = dataclasses.replace(config, strict=True)
    setup_logging(ctx, config, machine_output=json_out)

    out_dir = out if out is not None else root / config.out
    try:
        result = _run(root, config)
        written = write_outputs(out_dir, result.outputs, clean=clean)
    except NatDocError as e:
        err_console.print(f"[red]✗ Build failed:[/red] {e}")
        raise typer.Exit(1) from e

    if json_out:
        report = {
            "out_dir": str(out_dir),
            "files": sorted(result.outputs),
            "warnings": [w.model_dump(mode="json") for w in result.warnings],
            "failed_files": [f.model_dump(mode="json") for f in result.failed_files],
        }
        typer.echo(json.dumps(report, indent=2))
        return

    quiet = global_options(ctx)["quiet"]
    print_result(result, quiet=quiet)
    if not quiet:
        console.print(
            Panel.fit(
                f"[green]✓[/green] Wrote {written} files to [cyan]{out_dir}[/cyan]\n"
                f"[dim]{len(result.warnings)} warnings, "
                f"{len(result.failed_files)} files skipped[/dim]",
                border_style="green",
            )
        )


def check(
    ctx: typer.Context,
    root: RootArgument = Path("."),
    config_path: ConfigOption = None,
    strict: StrictOption = False,
) -> None:
    """Build without writing and fail if anything was skipped or warned about.

    Examples
    --------
    natdoc check
    natdoc check path/to/project --strict
    """
    config = load_cli_config(root, config_path)
    if strict:
        config = dataclasses.replace(config, strict=True)
    setup_logging(ctx, config)

    try:
        result = _run(root, config)
    except NatDocError as e:
        err_console.print(f"[red]✗ Check failed:[/red] {e}")
        raise typer.Exit(1) from e

    print_result(result, quiet=global_options(ctx)["quiet"])
    if result.warnings or result.failed_files:
        console.print(
            f"[red]✗[/red] {len(result.warnings)} warnings, "
            f"{len(result.failed_files)} files skipped"
        )
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Documentation is clean ({len(result.outputs)} files)")
