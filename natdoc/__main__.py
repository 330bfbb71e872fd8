"""Entry point for running natdoc as a module: ``python -m natdoc``."""

from __future__ import annotations


def main() -> None:
    """Main entry point for module execution."""
    from natdoc.cli.main import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
