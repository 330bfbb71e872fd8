"""Filesystem side of a build: source discovery and output writing."""

from __future__ import annotations

import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path

from natdoc.core.exceptions import ConfigurationError, WriteError
from natdoc.core.logging import get_logger

logger = get_logger(__name__)


def discover_sources(
    root: str | Path, src: str = "src", extensions: Iterable[str] = (".sol",)
) -> dict[str, str]:
    """Read every source file under ``root/src``.

    Parameters
    ----------
    root : str | Path
        Project root; returned paths are relative to it
    src : str
        Source directory below ``root``
    extensions : Iterable[str]
        File suffixes to pick up, e.g. ``(".sol",)``

    Returns
    -------
    dict[str, str]
        POSIX path relative to ``root`` mapped to file text, sorted by path

    Raises
    ------
    ConfigurationError
        If the source directory does not exist
    """
    root = Path(root)
    source_dir = root / src
    if not source_dir.is_dir():
        raise ConfigurationError("src", f"source directory '{source_dir}' does not exist")

    suffixes = tuple(extensions)
    sources: dict[str, str] = {}
    for path in sorted(source_dir.rglob("*")):
        if path.is_file() and path.name.endswith(suffixes):
            sources[path.relative_to(root).as_posix()] = path.read_text(encoding="utf-8")

    logger.debug("Discovered {count} source files in {dir}", count=len(sources), dir=source_dir)
    return sources


def load_homepage(root: str | Path, homepage: str | None) -> str | None:
    """Text of the configured homepage file, or None when none is configured."""
    if homepage is None:
        return None
    path = Path(root) / homepage
    if not path.is_file():
        raise ConfigurationError("homepage", f"file '{path}' does not exist")
    return path.read_text(encoding="utf-8")


def write_outputs(out_dir: str | Path, outputs: Mapping[str, str], clean: bool = True) -> int:
    """Write rendered pages below ``out_dir``.

    Parameters
    ----------
    out_dir : str | Path
        Book root directory
    outputs : Mapping[str, str]
        Book-relative POSIX path to file contents
    clean : bool, default=True
        Remove ``out_dir`` first so pages of deleted declarations disappear

    Returns
    -------
    int
        Number of files written

    Raises
    ------
    WriteError
        If a path escapes ``out_dir`` or the filesystem refuses a write
    """
    out_dir = Path(out_dir)
    try:
        if clean and out_dir.exists():
            shutil.rmtree(out_dir)

        resolved_root = out_dir.resolve()
        for relative, text in sorted(outputs.items()):
            target = out_dir / relative
            if not target.resolve().is_relative_to(resolved_root):
                raise WriteError(f"Output path '{relative}' escapes '{out_dir}'")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8", newline="\n")
    except OSError as e:
        raise WriteError(f"Cannot write documentation to '{out_dir}': {e}") from e

    logger.info("Wrote {count} files to {dir}", count=len(outputs), dir=out_dir)
    return len(outputs)


__all__ = ["discover_sources", "load_homepage", "write_outputs"]
