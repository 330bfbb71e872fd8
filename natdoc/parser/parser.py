"""Structural parser for Solidity-style sources.

The parser walks the token stream at statement level. It recognises
declarations by their leading keyword, tracks bracket depth to find where
each one ends, and attaches the doc comment block that immediately precedes
it. Signatures are slices of the original text, never re-synthesised.

The parser is stateless across files: one ``Parser`` per file, items are
emitted in source order (a contract before its members) and members carry
their container's name in ``parent``.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from natdoc.core.diagnostics import DocWarning, WarningCode
from natdoc.core.exceptions import ParseError, UnbalancedDelimitersError
from natdoc.core.logging import get_logger
from natdoc.parser.comments import Comments, parse_doc_comment
from natdoc.parser.items import (
    ContractKind,
    ContractSource,
    EnumSource,
    ErrorSource,
    EventSource,
    FunctionKind,
    FunctionSource,
    ModifierSource,
    Param,
    ParseItem,
    ParseSource,
    StructSource,
    TypeSource,
    VariableSource,
    Visibility,
)
from natdoc.parser.lexer import Token, TokenKind, tokenize

logger = get_logger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")": "(", "]": "[", "}": "{"}

_CONTRACT_KEYWORDS = frozenset({"contract", "interface", "library", "abstract"})
_FUNCTION_KEYWORDS = frozenset({"function", "constructor", "fallback", "receive"})
_STATEMENT_KEYWORDS = frozenset({"pragma", "import", "using"})
_VISIBILITY = frozenset(v.value for v in Visibility)
_MUTABILITY = frozenset({"pure", "view", "payable", "nonpayable"})
_STORAGE = frozenset({"memory", "storage", "calldata"})
_VARIABLE_QUALIFIERS = _VISIBILITY | {"constant", "immutable", "transient", "override"}
_FUNCTION_TYPE_KEYWORDS = frozenset({"internal", "external", "returns"}) | _MUTABILITY
_FUNCTION_QUALIFIERS = _VISIBILITY | _MUTABILITY | {"virtual", "override", "returns"}

_BLANK_LINE = re.compile(r"\n[ \t\r\f\v]*\n")


def parse(
    source_text: str, file_path: str, *, strict: bool = False
) -> tuple[list[ParseItem], list[DocWarning]]:
    """Parse one source file.

    Parameters
    ----------
    source_text : str
        File contents
    file_path : str
        POSIX path recorded on every item
    strict : bool, default=False
        Raise on malformed doc comment tags

    Returns
    -------
    tuple[list[ParseItem], list[DocWarning]]
        Items in source order and the warnings produced while parsing

    Raises
    ------
    ParseError
        If delimiters are unbalanced, or a tag is malformed in strict mode
    """
    return Parser(source_text, file_path, strict=strict).parse()


class Parser:
    """Recover declarations and their doc comments from one source file."""

    def __init__(self, source_text: str, source_file: str, *, strict: bool = False) -> None:
        self.text = source_text
        self.source_file = source_file
        self.strict = strict
        self.tokens: list[Token] = []
        self.items: list[ParseItem] = []
        self.warnings: list[DocWarning] = []
        self._pos = 0
        self._pending: list[Token] = []

    def parse(self) -> tuple[list[ParseItem], list[DocWarning]]:
        """Parse the whole file; see :func:`parse`."""
        self.tokens = tokenize(self.text, self.source_file)
        self._check_balanced()
        self._parse_members(parent=None)
        logger.debug(
            "Parsed {file}: {count} items", file=self.source_file, count=len(self.items)
        )
        return self.items, self.warnings

    # ------------------------------------------------------------------
    # Statement loop
    # ------------------------------------------------------------------

    def _parse_members(self, parent: ContractSource | None) -> None:
        """Parse statements until end of file, or until the closing ``}`` of ``parent``."""
        while self._pos < len(self.tokens):
            token = self.tokens[self._pos]

            if token.kind is TokenKind.DOC_COMMENT:
                self._push_doc(token)
                self._pos += 1
                continue
            if token.kind is TokenKind.COMMENT:
                self._pos += 1
                continue
            if token.is_punct("}"):
                break

            self._parse_statement(token, parent)

        self._discard_pending("doc comment at end of block is not attached to a declaration")

    def _parse_statement(self, token: Token, parent: ContractSource | None) -> None:
        start = self._pos
        word = token.text if token.kind is TokenKind.IDENT else ""

        if word in _STATEMENT_KEYWORDS:
            self._discard_pending(f"doc comment precedes a '{word}' statement")
            self._pos = self._statement_end(start)[1] + 1
        elif word in _CONTRACT_KEYWORDS and parent is None and self._is_contract(start):
            self._parse_contract(start)
        elif word in _FUNCTION_KEYWORDS and self._is_function(start):
            self._parse_function(start, parent)
        elif word == "modifier" and self._peek_ident(start + 1):
            self._parse_modifier(start, parent)
        elif word == "struct" and self._peek_ident(start + 1):
            self._parse_struct(start, parent)
        elif word == "enum" and self._peek_ident(start + 1):
            self._parse_enum(start, parent)
        elif word == "event" and self._peek_ident(start + 1):
            self._parse_event(start, parent)
        elif word == "error" and self._peek_ident(start + 1) and self._peek_punct(start + 2, "("):
            self._parse_error(start, parent)
        elif word == "type" and self._peek_ident(start + 1) and self._peek_ident(start + 2, "is"):
            self._parse_type(start, parent)
        else:
            self._parse_variable(start, parent)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _parse_contract(self, start: int) -> None:
        index = start
        contract_kind = ContractKind(self.tokens[index].text)
        if contract_kind is ContractKind.ABSTRACT:
            index = self._expect_next(index)
        index = self._expect_next(index)
        if self.tokens[index].kind is not TokenKind.IDENT:
            raise ParseError(
                self.source_file,
                f"expected a name after '{self.tokens[start].text}'",
                self.tokens[index].line,
            )
        name = self.tokens[index].text

        body = self._find_forward(index, lambda t: t.is_punct("{"))
        if not self._is_open_brace(body):
            self._skip_incomplete(name, body)
            return
        header = self._code_tokens(index + 1, body)
        bases: list[str] = []
        if header and header[0].is_ident("is"):
            for group in _split_groups(header[1:], ","):
                bases.append(_leading_path(group))

        source = ContractSource(
            name=name,
            signature=self._slice(start, self._prev_code(body)),
            contract_kind=contract_kind,
            bases=[b for b in bases if b],
        )
        comments = self._take_comments(start)
        close = self._match_close(body)
        self._emit(source, comments, start, close, parent=None)

        self._pos = body + 1
        self._parse_members(parent=source)
        self._pos = close + 1

    def _parse_function(self, start: int, parent: ContractSource | None) -> None:
        keyword = self.tokens[start].text
        index = self._expect_next(start)
        if keyword != "function":
            name, function_kind = keyword, FunctionKind(keyword)
        elif self.tokens[index].kind is TokenKind.IDENT:
            name = self.tokens[index].text
            function_kind = FunctionKind.FUNCTION
            if name in ("fallback", "receive"):
                function_kind = FunctionKind(name)
        elif self.tokens[index].is_punct("("):
            # Pre-0.6 unnamed fallback function
            name, function_kind = "fallback", FunctionKind.FALLBACK
        else:
            self._skip_incomplete(keyword, index)
            return

        open_paren = self._find_forward(start, lambda t: t.is_punct("("))
        if open_paren >= len(self.tokens) or not self.tokens[open_paren].is_punct("("):
            self._skip_incomplete(name, open_paren)
            return
        close_paren = self._match_close(open_paren)
        params = self._parse_params(open_paren + 1, close_paren)

        end = self._find_forward(close_paren + 1, lambda t: t.is_punct("{") or t.is_punct(";"))
        source = FunctionSource(
            name=name,
            signature=self._slice(start, self._prev_code(end)),
            function_kind=function_kind,
            params=params,
        )
        self._apply_qualifiers(source, close_paren + 1, end)
        if source.visibility is None:
            source.visibility = _default_function_visibility(function_kind, parent)

        comments = self._take_comments(start)
        comments = comments.bind_returns([p.name for p in source.returns])
        stop = self._body_stop(end)
        self._emit(source, comments, start, stop, parent)
        if self._is_open_brace(end):
            self._report_nested_docs(end + 1, stop)
        self._pos = stop + 1

    def _parse_modifier(self, start: int, parent: ContractSource | None) -> None:
        name = self.tokens[self._next_code(start)].text
        end = self._find_forward(start, lambda t: t.is_punct("{") or t.is_punct(";"))
        source = ModifierSource(name=name, signature=self._slice(start, self._prev_code(end)))

        index = self._next_code(self._next_code(start))
        if index < end and self.tokens[index].is_punct("("):
            close_paren = self._match_close(index)
            source.params = self._parse_params(index + 1, close_paren)
            index = close_paren + 1
        for token in self._code_tokens(index, end):
            if token.is_ident("virtual"):
                source.is_virtual = True
        source.overrides = self._parse_overrides(index, end)

        comments = self._take_comments(start)
        stop = self._body_stop(end)
        self._emit(source, comments, start, stop, parent)
        if self._is_open_brace(end):
            self._report_nested_docs(end + 1, stop)
        self._pos = stop + 1

    def _parse_struct(self, start: int, parent: ContractSource | None) -> None:
        name = self.tokens[self._next_code(start)].text
        body = self._find_forward(start, lambda t: t.is_punct("{"))
        if not self._is_open_brace(body):
            self._skip_incomplete(name, body)
            return
        close = self._match_close(body)
        fields = []
        for group in _split_groups(self._code_tokens(body + 1, close), ";"):
            if group:
                fields.append(_parse_param(group))

        source = StructSource(name=name, signature=self._slice(start, close), fields=fields)
        self._emit(source, self._take_comments(start), start, close, parent)
        self._report_nested_docs(body + 1, close)
        self._pos = close + 1

    def _parse_enum(self, start: int, parent: ContractSource | None) -> None:
        name = self.tokens[self._next_code(start)].text
        body = self._find_forward(start, lambda t: t.is_punct("{"))
        if not self._is_open_brace(body):
            self._skip_incomplete(name, body)
            return
        close = self._match_close(body)
        values = [
            group[0].text
            for group in _split_groups(self._code_tokens(body + 1, close), ",")
            if group
        ]
        source = EnumSource(name=name, signature=self._slice(start, close), values=values)
        self._emit(source, self._take_comments(start), start, close, parent)
        self._report_nested_docs(body + 1, close)
        self._pos = close + 1

    def _parse_event(self, start: int, parent: ContractSource | None) -> None:
        name = self.tokens[self._next_code(start)].text
        end, last = self._statement_end(start)
        source = EventSource(name=name, signature=self._slice(start, last))
        open_paren = self._find_forward(start, lambda t: t.is_punct("("))
        if open_paren < end:
            close_paren = self._match_close(open_paren)
            source.params = self._parse_params(open_paren + 1, close_paren)
            source.anonymous = any(
                t.is_ident("anonymous") for t in self._code_tokens(close_paren + 1, end)
            )
        self._emit(source, self._take_comments(start), start, last, parent)
        self._pos = last + 1

    def _parse_error(self, start: int, parent: ContractSource | None) -> None:
        name = self.tokens[self._next_code(start)].text
        end, last = self._statement_end(start)
        open_paren = self._find_forward(start, lambda t: t.is_punct("("))
        close_paren = self._match_close(open_paren)
        source = ErrorSource(
            name=name,
            signature=self._slice(start, last),
            params=self._parse_params(open_paren + 1, close_paren),
        )
        self._emit(source, self._take_comments(start), start, last, parent)
        self._pos = last + 1

    def _parse_type(self, start: int, parent: ContractSource | None) -> None:
        name_index = self._next_code(start)
        is_index = self._next_code(name_index)
        end, last = self._statement_end(start)
        source = TypeSource(
            name=self.tokens[name_index].text,
            signature=self._slice(start, last),
            underlying=_join_tokens(self._code_tokens(is_index + 1, end)),
        )
        self._emit(source, self._take_comments(start), start, last, parent)
        self._pos = last + 1

    def _parse_variable(self, start: int, parent: ContractSource | None) -> None:
        """Parse a state variable or file-level constant; skip anything else."""
        brace = self._find_forward(start, lambda t: t.is_punct(";") or t.is_punct("{"))
        if self._is_open_brace(brace):
            # Not a declaration we understand: skip it, body included
            self._discard_pending("doc comment precedes an unrecognised statement")
            self._pos = self._match_close(brace) + 1
            return

        end, last = self._statement_end(start)
        code = self._code_tokens(start, end)
        assign = next((i for i, t in _depth_zero(code) if t.is_punct("=")), len(code))
        source = _parse_variable_declaration(code[:assign], self._slice(start, last))
        if source is None:
            self._discard_pending("doc comment precedes a non-declaration statement")
            self._pos = last + 1
            return

        if source.visibility is None:
            source.visibility = Visibility.INTERNAL
        self._emit(source, self._take_comments(start), start, last, parent)
        self._pos = last + 1

    # ------------------------------------------------------------------
    # Qualifiers and parameters
    # ------------------------------------------------------------------

    def _apply_qualifiers(self, source: FunctionSource, start: int, end: int) -> None:
        """Read visibility, mutability, modifiers and return list after the parameter list."""
        index = start
        while index < end:
            token = self.tokens[index]
            if token.is_comment:
                index += 1
                continue
            if token.kind is not TokenKind.IDENT:
                index += 1
                continue

            word = token.text
            following = self._next_code(index)
            has_args = following < end and self.tokens[following].is_punct("(")

            if word in _VISIBILITY:
                source.visibility = Visibility(word)
            elif word in _MUTABILITY:
                source.mutability = word
            elif word == "virtual":
                source.is_virtual = True
            elif word == "override":
                source.overrides = []
                if has_args:
                    close = self._match_close(following)
                    source.overrides = [
                        _leading_path(g)
                        for g in _split_groups(self._code_tokens(following + 1, close), ",")
                    ]
                    index = close
            elif word == "returns" and has_args:
                close = self._match_close(following)
                source.returns = self._parse_params(following + 1, close)
                index = close
            else:
                # Modifier invocation, possibly dotted and with arguments
                last = index
                while self._peek_punct(last + 1, ".") and self._peek_ident(last + 2):
                    last += 2
                after = self._next_code(last)
                if after < end and self.tokens[after].is_punct("("):
                    last = self._match_close(after)
                source.modifiers.append(self._slice(index, last))
                index = last
            index += 1

    def _parse_overrides(self, start: int, end: int) -> list[str] | None:
        for index in range(start, end):
            if self.tokens[index].is_ident("override"):
                following = self._next_code(index)
                if following < end and self.tokens[following].is_punct("("):
                    close = self._match_close(following)
                    return [
                        _leading_path(g)
                        for g in _split_groups(self._code_tokens(following + 1, close), ",")
                    ]
                return []
        return None

    def _parse_params(self, start: int, end: int) -> list[Param]:
        return [
            _parse_param(group)
            for group in _split_groups(self._code_tokens(start, end), ",")
            if group
        ]

    # ------------------------------------------------------------------
    # Doc comment attachment
    # ------------------------------------------------------------------

    def _push_doc(self, token: Token) -> None:
        if self._pending and self._has_blank_line(self._pending[-1].end, token.start):
            self._discard_pending("doc comment is separated from the next declaration")
        self._pending.append(token)

    def _take_comments(self, declaration: int) -> Comments:
        """Consume the pending doc block if it immediately precedes ``declaration``."""
        if not self._pending:
            return Comments()
        if self._has_blank_line(self._pending[-1].end, self.tokens[declaration].start):
            self._discard_pending("doc comment is separated from the next declaration")
            return Comments()

        block = self._pending
        self._pending = []
        raw = "\n".join(token.text for token in block)
        return parse_doc_comment(
            raw, strict=self.strict, source_file=self.source_file, line=block[0].line
        )

    def _discard_pending(self, reason: str) -> None:
        if not self._pending:
            return
        first = self._pending[0]
        self._pending = []
        self._warn_dangling(first, reason)

    def _report_nested_docs(self, start: int, end: int) -> None:
        """Warn once per doc block found inside a body between ``start`` and ``end``."""
        previous_doc = False
        for token in self.tokens[start:end]:
            is_doc = token.kind is TokenKind.DOC_COMMENT
            if is_doc and not previous_doc:
                self._warn_dangling(token, "doc comment inside a body is not attached")
            previous_doc = is_doc

    def _warn_dangling(self, token: Token, reason: str) -> None:
        warning = DocWarning(
            code=WarningCode.DANGLING_COMMENT,
            message=reason,
            source_file=self.source_file,
            line=token.line,
        )
        logger.debug("Discarding doc comment: {warning}", warning=str(warning))
        self.warnings.append(warning)

    def _has_blank_line(self, start: int, end: int) -> bool:
        return _BLANK_LINE.search(self.text, start, end) is not None

    # ------------------------------------------------------------------
    # Token navigation
    # ------------------------------------------------------------------

    def _check_balanced(self) -> None:
        stack: list[Token] = []
        for token in self.tokens:
            if token.kind is not TokenKind.PUNCT:
                continue
            if token.text in _OPENERS:
                stack.append(token)
            elif token.text in _CLOSERS:
                if not stack or stack[-1].text != _CLOSERS[token.text]:
                    raise UnbalancedDelimitersError(self.source_file, token.text, token.line)
                stack.pop()
        if stack:
            raise UnbalancedDelimitersError(self.source_file, stack[-1].text, stack[-1].line)

    def _emit(
        self,
        source: ParseSource,
        comments: Comments,
        start: int,
        end: int,
        parent: ContractSource | None,
    ) -> None:
        first = self.tokens[start]
        last = self.tokens[min(end, len(self.tokens) - 1)]
        self.items.append(
            ParseItem(
                comments=comments,
                source=source,
                source_file=self.source_file,
                span=(first.start, last.end),
                line=first.line,
                parent=parent.name if parent else None,
            )
        )

    def _slice(self, start: int, end: int) -> str:
        """Source text from token ``start`` through token ``end``, inclusive."""
        return self.text[self.tokens[start].start : self.tokens[end].end].strip()

    def _code_tokens(self, start: int, end: int) -> list[Token]:
        return [t for t in self.tokens[start:end] if not t.is_comment]

    def _next_code(self, index: int) -> int:
        index += 1
        while index < len(self.tokens) and self.tokens[index].is_comment:
            index += 1
        return index

    def _expect_next(self, index: int) -> int:
        """Index of the code token after ``index``; raise if the file ends first."""
        following = self._next_code(index)
        if following >= len(self.tokens):
            token = self.tokens[index]
            raise ParseError(
                self.source_file, f"unexpected end of file after '{token.text}'", token.line
            )
        return following

    def _peek_ident(self, index: int, text: str | None = None) -> bool:
        index = self._next_code(index - 1)
        return index < len(self.tokens) and self.tokens[index].is_ident(text)

    def _peek_punct(self, index: int, text: str) -> bool:
        index = self._next_code(index - 1)
        return index < len(self.tokens) and self.tokens[index].is_punct(text)

    def _match_close(self, index: int) -> int:
        depth = 0
        for position in range(index, len(self.tokens)):
            token = self.tokens[position]
            if token.kind is not TokenKind.PUNCT:
                continue
            if token.text in _OPENERS:
                depth += 1
            elif token.text in _CLOSERS:
                depth -= 1
                if depth == 0:
                    return position
        raise UnbalancedDelimitersError(
            self.source_file, self.tokens[index].text, self.tokens[index].line
        )

    def _find_forward(self, index: int, predicate: Callable[[Token], bool]) -> int:
        """Index of the first depth-zero code token matching ``predicate``, or len(tokens).

        Opening brackets are tested before being descended into, so a
        predicate can look for ``(`` or ``{`` themselves.
        """
        depth = 0
        for position in range(index, len(self.tokens)):
            token = self.tokens[position]
            if token.is_comment:
                continue
            if depth == 0 and predicate(token):
                return position
            if token.kind is TokenKind.PUNCT:
                if token.text in _OPENERS:
                    depth += 1
                elif token.text in _CLOSERS:
                    if depth == 0:
                        # Reached the end of the enclosing block
                        return position
                    depth -= 1
        return len(self.tokens)

    def _statement_end(self, index: int) -> tuple[int, int]:
        """Bound of the statement starting at ``index`` and its last token.

        The bound is the terminating ``;``, which is also the last token. A
        statement missing its ``;`` stops before the enclosing ``}`` (or at end
        of file) and its last token is the code token before that.
        """
        end = self._find_forward(index, lambda t: t.is_punct(";"))
        if end < len(self.tokens) and self.tokens[end].is_punct(";"):
            return end, end
        return end, self._prev_code(end)

    def _body_stop(self, end: int) -> int:
        """Last token of a function or modifier whose header stops at ``end``."""
        if self._is_open_brace(end):
            return self._match_close(end)
        if end < len(self.tokens) and self.tokens[end].is_punct(";"):
            return end
        return self._prev_code(end)

    def _prev_code(self, index: int) -> int:
        index -= 1
        while index > 0 and self.tokens[index].is_comment:
            index -= 1
        return index

    def _is_open_brace(self, index: int) -> bool:
        return index < len(self.tokens) and self.tokens[index].is_punct("{")

    def _skip_incomplete(self, name: str, stop: int) -> None:
        self._discard_pending(f"doc comment precedes an incomplete declaration of '{name}'")
        self._pos = stop

    def _is_contract(self, index: int) -> bool:
        if self.tokens[index].text == "abstract":
            return self._peek_ident(index + 1, "contract")
        return self._peek_ident(index + 1)

    def _is_function(self, index: int) -> bool:
        if self.tokens[index].text != "function":
            return self._peek_punct(index + 1, "(")
        if not self._peek_punct(index + 1, "("):
            return True
        # ``function (`` opens a legacy fallback or a function-type variable
        end = self._find_forward(index, lambda t: t.is_punct("{") or t.is_punct(";"))
        if self._is_open_brace(end):
            return True
        return not _is_function_type_variable(self._code_tokens(index, end))


# ============================================================================
# Token helpers
# ============================================================================


def _depth_zero(tokens: list[Token]):
    """Yield ``(index, token)`` for tokens outside any brackets."""
    depth = 0
    for index, token in enumerate(tokens):
        if token.kind is TokenKind.PUNCT and token.text in _CLOSERS:
            depth -= 1
        if depth == 0:
            yield index, token
        if token.kind is TokenKind.PUNCT and token.text in _OPENERS:
            depth += 1


def _split_groups(tokens: list[Token], separator: str) -> list[list[Token]]:
    groups: list[list[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.kind is TokenKind.PUNCT:
            if token.text in _OPENERS:
                depth += 1
            elif token.text in _CLOSERS:
                depth -= 1
            elif token.text == separator and depth == 0:
                groups.append([])
                continue
        groups[-1].append(token)
    return [g for g in groups if g]


def _join_tokens(tokens: list[Token]) -> str:
    """Render tokens as compact type text: ``mapping(address => uint256)``."""
    parts: list[str] = []
    previous: Token | None = None
    for token in tokens:
        tight_before = token.text in (")", "]", ",", ".", "[", "(")
        tight_after = previous is not None and previous.text in ("(", "[", ".")
        if parts and not tight_before and not tight_after:
            parts.append(" ")
        parts.append(token.text)
        previous = token
    return "".join(parts)


def _leading_path(tokens: list[Token]) -> str:
    """The dotted identifier at the start of ``tokens``: ``Base(1)`` -> ``Base``."""
    parts: list[str] = []
    for token in tokens:
        if token.kind is TokenKind.IDENT or token.is_punct("."):
            parts.append(token.text)
        else:
            break
    return "".join(parts).strip(".")


def _parse_param(tokens: list[Token]) -> Param:
    storage = None
    indexed = False
    remaining: list[Token] = []
    for token in tokens:
        if token.is_ident() and token.text in _STORAGE:
            storage = token.text
        elif token.is_ident("indexed"):
            indexed = True
        else:
            remaining.append(token)

    name = None
    if (
        len(remaining) >= 2
        and remaining[-1].kind is TokenKind.IDENT
        and remaining[-1].text != "payable"
        and not remaining[-2].is_punct(".")
    ):
        name = remaining[-1].text
        remaining = remaining[:-1]

    return Param(name=name, type=_join_tokens(remaining), storage=storage, indexed=indexed)


def _parse_variable_declaration(tokens: list[Token], signature: str) -> VariableSource | None:
    """Split ``<type> <qualifiers> <name>`` tokens; None if they do not form a declaration."""
    type_tokens: list[Token] = []
    name: str | None = None
    visibility: Visibility | None = None
    mutability: str | None = None
    overrides: list[str] | None = None
    qualifiers_started = False

    skip_until = -1
    if len(tokens) > 1 and tokens[0].is_ident("function") and tokens[1].is_punct("("):
        # The function type's own visibility and return list belong to the type
        skip_until = _function_type_end(tokens) - 1
        type_tokens = tokens[: skip_until + 1]

    positions = dict(_depth_zero(tokens))
    for index, token in enumerate(tokens):
        if index <= skip_until:
            continue
        at_top = index in positions
        if at_top and token.is_ident() and token.text in _VARIABLE_QUALIFIERS:
            qualifiers_started = True
            if token.text in _VISIBILITY:
                visibility = Visibility(token.text)
            elif token.text == "override":
                overrides = []
                if index + 1 < len(tokens) and tokens[index + 1].is_punct("("):
                    close = _close_index(tokens, index + 1)
                    groups = _split_groups(tokens[index + 2 : close], ",")
                    overrides = [_leading_path(g) for g in groups]
                    skip_until = close
            else:
                mutability = token.text
        elif qualifiers_started:
            if at_top and token.kind is TokenKind.IDENT and name is None:
                name = token.text
            else:
                return None
        else:
            type_tokens.append(token)

    if name is None:
        # No qualifiers: the name is the trailing identifier of the type tokens
        if (
            len(type_tokens) < 2
            or type_tokens[-1].kind is not TokenKind.IDENT
            or type_tokens[-2].is_punct(".")
        ):
            return None
        name = type_tokens[-1].text
        type_tokens = type_tokens[:-1]

    if not type_tokens or type_tokens[0].kind is not TokenKind.IDENT:
        return None

    return VariableSource(
        name=name,
        signature=signature,
        type=_join_tokens(type_tokens),
        visibility=visibility,
        mutability=mutability,
        overrides=overrides,
    )


def _is_function_type_variable(tokens: list[Token]) -> bool:
    """True when a bodiless ``function (...)`` header declares a variable.

    A variable of function type ends in its name or carries an initializer;
    a bodiless legacy fallback ends in a qualifier or a closing bracket.
    """
    top = [token for _, token in _depth_zero(tokens)]
    if any(token.is_punct("=") for token in top):
        return True
    last = top[-1]
    return last.kind is TokenKind.IDENT and last.text not in _FUNCTION_QUALIFIERS


def _function_type_end(tokens: list[Token]) -> int:
    """Index just past the ``function (...) <qualifiers> returns (...)`` type at the start."""
    index = _close_index(tokens, 1) + 1
    while (
        index < len(tokens)
        and tokens[index].kind is TokenKind.IDENT
        and tokens[index].text in _FUNCTION_TYPE_KEYWORDS
    ):
        if tokens[index].text == "returns" and index + 1 < len(tokens):
            if tokens[index + 1].is_punct("("):
                index = _close_index(tokens, index + 1)
        index += 1
    return index


def _close_index(tokens: list[Token], index: int) -> int:
    depth = 0
    for position in range(index, len(tokens)):
        text = tokens[position].text
        if tokens[position].kind is TokenKind.PUNCT and text in _OPENERS:
            depth += 1
        elif tokens[position].kind is TokenKind.PUNCT and text in _CLOSERS:
            depth -= 1
            if depth == 0:
                return position
    return len(tokens) - 1


def _default_function_visibility(
    function_kind: FunctionKind, parent: ContractSource | None
) -> Visibility:
    if parent is None:
        return Visibility.INTERNAL
    if parent.contract_kind is ContractKind.INTERFACE:
        return Visibility.EXTERNAL
    if function_kind in (FunctionKind.FALLBACK, FunctionKind.RECEIVE):
        return Visibility.EXTERNAL
    return Visibility.PUBLIC


__all__ = ["Parser", "parse"]
