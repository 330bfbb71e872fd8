"""Structural tokenizer for Solidity-style sources.

The lexer only knows enough to keep the parser honest: string literals and
comments become single tokens so that braces inside them never change the
bracket depth, and every token remembers its byte span and line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from natdoc.core.exceptions import UnbalancedDelimitersError


class TokenKind(Enum):
    """Kinds of tokens the parser distinguishes."""

    IDENT = auto()
    NUMBER = auto()
    STRING = auto()
    PUNCT = auto()
    DOC_COMMENT = auto()  # /// ... or /** ... */
    COMMENT = auto()  # // ... or /* ... */


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical token with its position in the source buffer."""

    kind: TokenKind
    text: str
    start: int
    end: int
    line: int

    @property
    def is_comment(self) -> bool:
        return self.kind in (TokenKind.DOC_COMMENT, TokenKind.COMMENT)

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == text

    def is_ident(self, text: str | None = None) -> bool:
        return self.kind is TokenKind.IDENT and (text is None or self.text == text)


_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"0[xX][0-9a-fA-F_]*|[0-9][0-9_]*(?:\.[0-9_]*)?(?:[eE][-+]?[0-9]+)?")
_MULTI_PUNCT = ("=>", "->", "==", "!=", "<=", ">=", "&&", "||", "++", "--", "**", "<<", ">>")


def tokenize(source_text: str, source_file: str | None = None) -> list[Token]:
    """Split ``source_text`` into tokens, dropping whitespace.

    Parameters
    ----------
    source_text : str
        Full contents of the source file
    source_file : str | None
        Path used in error messages

    Returns
    -------
    list[Token]
        Tokens in source order, comments included

    Raises
    ------
    UnbalancedDelimitersError
        If a string literal or block comment is never closed
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    length = len(source_text)

    while pos < length:
        char = source_text[pos]

        if char == "\n":
            line += 1
            pos += 1
            continue
        if char.isspace():
            pos += 1
            continue

        start = pos
        start_line = line

        if source_text.startswith("//", pos):
            end = source_text.find("\n", pos)
            end = length if end == -1 else end
            text = source_text[pos:end]
            # "////" separators are ordinary comments
            is_doc = text.startswith("///") and not text.startswith("////")
            kind = TokenKind.DOC_COMMENT if is_doc else TokenKind.COMMENT
            tokens.append(Token(kind, text.rstrip(), start, end, start_line))
            pos = end
            continue

        if source_text.startswith("/*", pos):
            end = source_text.find("*/", pos + 2)
            if end == -1:
                raise UnbalancedDelimitersError(source_file, "/*", start_line)
            end += 2
            text = source_text[pos:end]
            # "/**/" is an empty plain comment, "/***" a decorative one
            is_doc = text.startswith("/**") and not text.startswith("/***") and text != "/**/"
            kind = TokenKind.DOC_COMMENT if is_doc else TokenKind.COMMENT
            tokens.append(Token(kind, text, start, end, start_line))
            line += text.count("\n")
            pos = end
            continue

        if char in "\"'":
            end = _scan_string(source_text, pos, source_file, start_line)
            tokens.append(Token(TokenKind.STRING, source_text[pos:end], start, end, start_line))
            pos = end
            continue

        if match := _IDENT_RE.match(source_text, pos):
            end = match.end()
            # hex"..." and unicode"..." literals
            if end < length and source_text[end] in "\"'" and match.group() in ("hex", "unicode"):
                end = _scan_string(source_text, end, source_file, start_line)
                kind = TokenKind.STRING
            else:
                kind = TokenKind.IDENT
            tokens.append(Token(kind, source_text[pos:end], start, end, start_line))
            pos = end
            continue

        if char.isdigit():
            match = _NUMBER_RE.match(source_text, pos)
            end = match.end() if match else pos + 1
            tokens.append(Token(TokenKind.NUMBER, source_text[pos:end], start, end, start_line))
            pos = end
            continue

        width = 2 if source_text.startswith(_MULTI_PUNCT, pos) else 1
        end = pos + width
        tokens.append(Token(TokenKind.PUNCT, source_text[pos:end], start, end, start_line))
        pos = end

    return tokens


def _scan_string(source_text: str, pos: int, source_file: str | None, line: int) -> int:
    """Return the end offset of the string literal opening at ``pos``."""
    quote = source_text[pos]
    index = pos + 1
    length = len(source_text)
    while index < length:
        char = source_text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if char == "\n":
            break
        index += 1
    raise UnbalancedDelimitersError(source_file, quote, line)


__all__ = ["Token", "TokenKind", "tokenize"]
