#!/usr/bin/env python3
"""Entry point for natdoc CLI when run as python -m natdoc.cli."""

if __name__ == "__main__":
    from natdoc.cli.main import main

    main()
