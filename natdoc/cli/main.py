"""natdoc CLI - Main entrypoint."""

import typer
from rich.console import Console

from natdoc import __version__
from natdoc.cli.commands import build_cmd

# Create the main Typer app
app = typer.Typer(
    name="natdoc",
    help="natdoc - Markdown documentation books from NatSpec-annotated sources.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.command("build", help="Build the documentation book")(build_cmd.build)
app.command("check", help="Build without writing and report problems")(build_cmd.check)


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    *,
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Suppress non-error output"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable verbose logging"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    """natdoc - documentation generator for Solidity-style sources.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}
    ctx.obj.update({"quiet": quiet, "verbose": verbose})

    if version:
        console.print(f"[bold blue]natdoc[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
