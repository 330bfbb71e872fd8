"""Markdown primitives.

Every helper returns plain text with ``\\n`` line endings and no trailing
whitespace, so rendered pages diff cleanly between runs.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class Markdown:
    """Stateless markdown building blocks."""

    @staticmethod
    def heading(text: str, level: int) -> str:
        level = max(1, min(level, 6))
        return f"{'#' * level} {text.strip()}"

    @staticmethod
    def bold(text: str) -> str:
        return f"**{text.strip()}**"

    @staticmethod
    def italic(text: str) -> str:
        return f"*{text.strip()}*"

    @staticmethod
    def code(text: str) -> str:
        """Inline code; the fence grows when the text itself contains backticks."""
        fence = "``" if "`" in text else "`"
        return f"{fence}{text}{fence}"

    @staticmethod
    def code_block(text: str, language: str = "solidity") -> str:
        body = "\n".join(line.rstrip() for line in text.strip("\n").splitlines())
        return f"```{language}\n{body}\n```"

    @staticmethod
    def link(text: str, target: str) -> str:
        return f"[{text}]({target})"

    @staticmethod
    def bullet_list(entries: Iterable[str], indent: int = 0) -> str:
        prefix = "  " * indent
        return "\n".join(f"{prefix}- {entry}" for entry in entries)

    @staticmethod
    def table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
        """Pipe table: ``|Name|Type|Description|``."""
        lines = [
            "|" + "|".join(headers) + "|",
            "|" + "|".join("-" * max(len(h), 3) for h in headers) + "|",
        ]
        for row in rows:
            lines.append("|" + "|".join(_cell(value) for value in row) + "|")
        return "\n".join(lines)


def _cell(value: str) -> str:
    return " ".join(value.split()).replace("|", "\\|")


__all__ = ["Markdown"]
