"""CLI command modules."""

from . import build_cmd

__all__ = ["build_cmd"]
