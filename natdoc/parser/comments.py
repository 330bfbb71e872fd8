"""Typed documentation comments.

A doc comment block (``///`` lines or a ``/** ... */`` block) is split into
tagged comments following the NatSpec convention::

    /// @title Counter
    /// @notice Counts things.
    /// @dev Not thread safe.
    ///      Continuation lines join the open tag.
    /// @param step How far to move
    /// @return count The new value
    /// @inheritdoc ICounter
    /// @custom:security-contact team@example.org

Untagged text before the first tag is an implicit ``@notice``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Literal

from natdoc.core.exceptions import MalformedTagError

ParamPolicy = Literal["per_name", "replace"]


class CommentTagKind(StrEnum):
    """Closed set of tag kinds."""

    TITLE = "title"
    AUTHOR = "author"
    NOTICE = "notice"
    DEV = "dev"
    PARAM = "param"
    RETURN = "return"
    INHERITDOC = "inheritdoc"
    CUSTOM = "custom"


# Tags whose local occurrence hides every inherited one of the same kind
_SINGULAR_KINDS = frozenset(
    {CommentTagKind.TITLE, CommentTagKind.AUTHOR, CommentTagKind.NOTICE, CommentTagKind.DEV}
)


@dataclass(frozen=True, slots=True)
class CommentTag:
    """A tag kind plus its binding identifier.

    ``name`` holds the parameter name for ``@param``, the return slot name
    for ``@return`` (None when unbound), the base reference for
    ``@inheritdoc`` and the tag name for ``@custom:<name>``.
    """

    kind: CommentTagKind
    name: str | None = None

    def __str__(self) -> str:
        if self.kind is CommentTagKind.CUSTOM:
            return f"@custom:{self.name}"
        if self.name:
            return f"@{self.kind} {self.name}"
        return f"@{self.kind}"


@dataclass(frozen=True, slots=True)
class Comment:
    """One tagged comment and its text."""

    tag: CommentTag
    value: str

    @property
    def kind(self) -> CommentTagKind:
        return self.tag.kind

    @property
    def name(self) -> str | None:
        return self.tag.name


class Comments:
    """Ordered, immutable sequence of comments attached to one declaration."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Comment] = ()) -> None:
        self._items: tuple[Comment, ...] = tuple(items)

    def __iter__(self) -> Iterator[Comment]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __getitem__(self, index: int) -> Comment:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Comments):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"Comments({list(self._items)!r})"

    # --- Lookup ---

    def first(self, kind: CommentTagKind) -> str | None:
        """Return the text of the first comment of ``kind``, if any."""
        for comment in self._items:
            if comment.kind is kind:
                return comment.value
        return None

    def all(self, kind: CommentTagKind) -> list[str]:
        """Return the texts of every comment of ``kind`` in source order."""
        return [comment.value for comment in self._items if comment.kind is kind]

    def find(self, kind: CommentTagKind, name: str | None = None) -> Comment | None:
        """Return the first comment of ``kind`` bound to ``name``."""
        for comment in self._items:
            if comment.kind is kind and comment.name == name:
                return comment
        return None

    def find_param(self, name: str) -> Comment | None:
        return self.find(CommentTagKind.PARAM, name)

    def params(self) -> list[Comment]:
        return [c for c in self._items if c.kind is CommentTagKind.PARAM]

    def returns(self) -> list[Comment]:
        return [c for c in self._items if c.kind is CommentTagKind.RETURN]

    def custom(self) -> list[Comment]:
        return [c for c in self._items if c.kind is CommentTagKind.CUSTOM]

    def inheritdoc(self) -> str | None:
        """Return the base reference of the first ``@inheritdoc`` tag."""
        comment = next((c for c in self._items if c.kind is CommentTagKind.INHERITDOC), None)
        return comment.name if comment else None

    def include(self, *kinds: CommentTagKind) -> Comments:
        return Comments(c for c in self._items if c.kind in kinds)

    def exclude(self, *kinds: CommentTagKind) -> Comments:
        return Comments(c for c in self._items if c.kind not in kinds)

    # --- Transformations ---

    def bind_returns(self, names: Sequence[str | None]) -> Comments:
        """Bind unnamed ``@return`` tags to named return slots.

        A ``@return`` whose first word equals a return name becomes
        ``Return{name}`` and loses that word from its text.
        """
        known = {name for name in names if name}
        if not known:
            return self

        bound = []
        for comment in self._items:
            if comment.kind is CommentTagKind.RETURN and comment.name is None:
                words = comment.value.split(None, 1)
                if words and words[0] in known:
                    text = words[1].strip() if len(words) > 1 else ""
                    comment = Comment(CommentTag(CommentTagKind.RETURN, words[0]), text)
            bound.append(comment)
        return Comments(bound)

    def merge_inherited(self, base: Comments, policy: ParamPolicy = "per_name") -> Comments:
        """Combine these (local) comments with comments inherited from ``base``.

        Local tags win over inherited tags of the same kind. ``@inheritdoc``
        tags from both sides are dropped. Inherited comments come first,
        followed by local ones, each in their own source order.

        Parameters
        ----------
        base : Comments
            Effective comments of the referenced base declaration
        policy : ParamPolicy
            ``per_name`` keeps inherited ``@param``/``@return`` tags whose slot
            has no local tag; ``replace`` drops all inherited ones of a kind as
            soon as one local tag of that kind exists

        Returns
        -------
        Comments
            The merged comments
        """
        local = self.exclude(CommentTagKind.INHERITDOC)
        local_kinds = {c.kind for c in local}
        local_custom = {c.name for c in local.custom()}
        local_params = {c.name for c in local.params()}
        local_returns = _return_keys(local.returns())

        inherited = []
        base_returns = base.returns()
        for comment in base:
            kind = comment.kind
            if kind is CommentTagKind.INHERITDOC:
                continue
            if kind in _SINGULAR_KINDS:
                keep = kind not in local_kinds
            elif kind is CommentTagKind.CUSTOM:
                keep = comment.name not in local_custom
            elif kind is CommentTagKind.PARAM:
                if policy == "replace":
                    keep = not local_params
                else:
                    keep = comment.name not in local_params
            else:  # RETURN
                if policy == "replace":
                    keep = not local_returns
                else:
                    keep = _return_key(comment, base_returns) not in local_returns
            if keep:
                inherited.append(comment)

        return Comments([*inherited, *local])

    def with_values(self, transform: Callable[[Comment], str]) -> Comments:
        """Return a copy with every comment's text replaced by ``transform(comment)``."""
        return Comments(replace(c, value=transform(c)) for c in self._items)


def _return_key(comment: Comment, returns: list[Comment]) -> str:
    if comment.name:
        return comment.name
    return f"#{returns.index(comment)}"


def _return_keys(returns: list[Comment]) -> set[str]:
    return {_return_key(c, returns) for c in returns}


# ============================================================================
# Parsing
# ============================================================================


def parse_doc_comment(
    raw_text: str,
    *,
    strict: bool = False,
    source_file: str | None = None,
    line: int | None = None,
) -> Comments:
    """Parse a raw doc comment block into Comments.

    Parameters
    ----------
    raw_text : str
        The comment block exactly as written, markers included
    strict : bool, default=False
        Raise on unknown or incomplete tags instead of keeping them as custom tags
    source_file : str | None
        File the block came from, used in error messages
    line : int | None
        Line of the first block line, used in error messages

    Returns
    -------
    Comments
        Tagged comments in source order

    Raises
    ------
    MalformedTagError
        In strict mode, when a tag is unknown or lacks its identifier
    """
    comments: list[Comment] = []
    current: CommentTag | None = None
    body: list[str] = []

    def flush() -> None:
        if current is not None:
            comments.append(Comment(current, _join_body(body)))

    for offset, text in enumerate(_strip_markers(raw_text)):
        if text.startswith("@"):
            flush()
            head, rest = _split_word(text[1:])
            lineno = line + offset if line is not None else None
            current, first = _parse_tag(head, rest, strict, source_file, lineno)
            body = [first]
        elif current is None:
            if not text:
                continue
            current = CommentTag(CommentTagKind.NOTICE)
            body = [text]
        else:
            body.append(text)
    flush()

    return Comments(comments)


def _parse_tag(
    head: str, rest: str, strict: bool, source_file: str | None, line: int | None
) -> tuple[CommentTag, str]:
    """Split a tag line into its CommentTag and the first line of its text."""
    match head:
        case "title" | "author" | "notice" | "dev":
            return CommentTag(CommentTagKind(head)), rest
        case "return":
            return CommentTag(CommentTagKind.RETURN), rest
        case "param" | "inheritdoc":
            name, text = _split_word(rest)
            if name:
                return CommentTag(CommentTagKind(head), name), text
        case _ if head.startswith("custom:") and len(head) > len("custom:"):
            return CommentTag(CommentTagKind.CUSTOM, head[len("custom:") :]), rest

    if strict:
        raise MalformedTagError(source_file, head, line)
    return CommentTag(CommentTagKind.CUSTOM, head), rest


def _split_word(text: str) -> tuple[str, str]:
    parts = text.split(None, 1)
    if not parts:
        return "", ""
    return parts[0], parts[1].strip() if len(parts) > 1 else ""


def _strip_markers(raw_text: str) -> list[str]:
    """Remove comment markers and per-line indentation."""
    lines = []
    for raw_line in raw_text.splitlines():
        text = raw_line.strip()
        if text.startswith("///"):
            text = text[3:]
        else:
            opened = text.startswith("/**")
            if opened:
                text = text[3:]
            if text.endswith("*/"):
                text = text[:-2]
            text = text.strip()
            if not opened and text.startswith("*"):
                text = text[1:]
        lines.append(text.strip())
    return lines


def _join_body(lines: list[str]) -> str:
    start, end = 0, len(lines)
    while start < end and not lines[start]:
        start += 1
    while end > start and not lines[end - 1]:
        end -= 1
    return "\n".join(lines[start:end])


__all__ = [
    "Comment",
    "CommentTag",
    "CommentTagKind",
    "Comments",
    "ParamPolicy",
    "parse_doc_comment",
]
