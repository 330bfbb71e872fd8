"""Accumulating markdown buffer with heading-depth tracking."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from natdoc.writer.markdown import Markdown


class BufWriter:
    """Collect markdown blocks and join them into a page.

    Blocks are separated by one blank line. Headings are written at the
    current level; ``nested()`` moves one level down for the duration of a
    ``with`` block, so members land one level below their group heading no
    matter where rendering started.

    Examples
    --------
    >>> writer = BufWriter()
    >>> writer.heading("Counter")
    >>> with writer.nested():
    ...     writer.heading("Functions")
    >>> writer.finish()
    '# Counter\\n\\n## Functions\\n'
    """

    def __init__(self, level: int = 1) -> None:
        self._level = level
        self._blocks: list[str] = []

    @property
    def level(self) -> int:
        return self._level

    @contextmanager
    def nested(self) -> Iterator[BufWriter]:
        self._level += 1
        try:
            yield self
        finally:
            self._level -= 1

    def heading(self, text: str) -> None:
        self.write(Markdown.heading(text, self._level))

    def write(self, block: str) -> None:
        """Append a block; blank blocks are ignored."""
        block = "\n".join(line.rstrip() for line in block.strip("\n").splitlines())
        if block.strip():
            self._blocks.append(block)

    def is_empty(self) -> bool:
        return not self._blocks

    def finish(self) -> str:
        """The page text, ending in exactly one newline."""
        if not self._blocks:
            return ""
        return "\n\n".join(self._blocks) + "\n"


__all__ = ["BufWriter"]
