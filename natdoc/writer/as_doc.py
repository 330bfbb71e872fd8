"""Render declarations and Documents to markdown.

``AsDoc`` is the rendering contract. ``MarkdownWriter`` implements it with
one ``match`` over the declaration variants, ending in ``assert_never`` so a
new variant cannot be added without teaching the writer about it. Rendering
is total: sections whose data is absent are left out, never invented.
"""

from __future__ import annotations

from typing import Protocol, assert_never

from natdoc.document.document import KIND_ORDER, Document
from natdoc.parser.comments import Comment, CommentTagKind, Comments
from natdoc.parser.items import (
    ContractSource,
    EnumSource,
    ErrorSource,
    EventSource,
    FunctionSource,
    ItemKind,
    ModifierSource,
    Param,
    ParseItem,
    StructSource,
    TypeSource,
    VariableSource,
)
from natdoc.preprocessing.base import PreprocessorId
from natdoc.writer.buf_writer import BufWriter
from natdoc.writer.markdown import Markdown

GROUP_TITLES: dict[ItemKind, str] = {
    ItemKind.VARIABLE: "State Variables",
    ItemKind.MODIFIER: "Modifiers",
    ItemKind.FUNCTION: "Functions",
    ItemKind.EVENT: "Events",
    ItemKind.ERROR: "Errors",
    ItemKind.STRUCT: "Structs",
    ItemKind.ENUM: "Enums",
    ItemKind.TYPE: "Types",
}

_PARAM_HEADERS = ("Name", "Type", "Description")


class AsDoc(Protocol):
    """Rendering contract for a single declaration."""

    def render(self, item: ParseItem) -> str:
        """Markdown for ``item``, headed at the writer's current level."""
        ...


class MarkdownWriter:
    """Markdown implementation of ``AsDoc`` plus whole-page rendering."""

    def render(self, item: ParseItem, level: int = 1) -> str:
        writer = BufWriter(level)
        self.write_item(writer, item)
        return writer.finish()

    def render_document(self, document: Document) -> str:
        """Render one page: the root declaration followed by its member groups.

        Parameters
        ----------
        document : Document
            The Document to render; only read, never modified

        Returns
        -------
        str
            Markdown ending in exactly one newline
        """
        writer = BufWriter()
        item = document.item
        writer.heading(item.name)

        git_url = document.annotations.get(PreprocessorId.GIT_SOURCE.value)
        if git_url:
            writer.write(Markdown.link("Git Source", git_url))

        writer.write(Markdown.code_block(item.source.signature))

        if isinstance(item.source, ContractSource) and item.source.bases:
            links = document.annotations.get(PreprocessorId.CONTRACT_INHERITANCE.value, {})
            bases = [
                Markdown.link(base, document.link_to(links[base])) if base in links else base
                for base in item.source.bases
            ]
            writer.write(f"{Markdown.bold('Inherits:')}\n{', '.join(bases)}")

        self._write_comments(writer, item.comments)
        self._write_tables(writer, item)

        with writer.nested():
            for kind in KIND_ORDER:
                members = [child for child in document.children if child.kind is kind]
                if not members:
                    continue
                writer.heading(GROUP_TITLES.get(kind, str(kind).title()))
                with writer.nested():
                    for member in members:
                        self.write_item(writer, member)

        return writer.finish()

    def write_item(self, writer: BufWriter, item: ParseItem) -> None:
        """Write a member section: heading, comments, signature, tables."""
        writer.heading(item.name)
        self._write_comments(writer, item.comments)
        writer.write(Markdown.code_block(item.source.signature))
        self._write_tables(writer, item)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _write_comments(self, writer: BufWriter, comments: Comments) -> None:
        """Tag sections in source order; parameter and return tags go to tables."""
        for comment in comments:
            if block := _comment_block(comment):
                writer.write(block)

    def _write_tables(self, writer: BufWriter, item: ParseItem) -> None:
        source = item.source
        match source:
            case FunctionSource():
                writer.write(_params_table("Parameters", source.params, item.comments))
                writer.write(_returns_table(source.returns, item.comments))
            case ModifierSource() | EventSource() | ErrorSource():
                writer.write(_params_table("Parameters", source.params, item.comments))
            case StructSource():
                writer.write(_params_table("Properties", source.fields, item.comments))
            case ContractSource() | VariableSource() | EnumSource() | TypeSource():
                pass
            case _:
                assert_never(source)


def render_document(document: Document) -> str:
    """Render ``document`` with the default markdown writer."""
    return MarkdownWriter().render_document(document)


def _comment_block(comment: Comment) -> str:
    if not comment.value:
        return ""
    match comment.kind:
        case CommentTagKind.TITLE:
            return f"{Markdown.bold('Title:')}\n{comment.value}"
        case CommentTagKind.AUTHOR:
            return f"{Markdown.bold('Author:')}\n{comment.value}"
        case CommentTagKind.NOTICE:
            return comment.value
        case CommentTagKind.DEV:
            return "\n".join(Markdown.italic(line) for line in comment.value.splitlines() if line)
        case CommentTagKind.CUSTOM:
            return f"{Markdown.bold(f'{comment.name}:')}\n{comment.value}"
        case CommentTagKind.PARAM | CommentTagKind.RETURN | CommentTagKind.INHERITDOC:
            return ""
        case _:
            assert_never(comment.kind)


def _params_table(title: str, params: list[Param], comments: Comments) -> str:
    documented = {c.name: c.value for c in comments.params()}
    if not params or not any(p.name in documented for p in params):
        return ""
    rows = [
        (_name_cell(p.name), Markdown.code(p.type), documented.get(p.name or "", ""))
        for p in params
    ]
    return f"{Markdown.bold(title)}\n\n{Markdown.table(_PARAM_HEADERS, rows)}"


def _returns_table(returns: list[Param], comments: Comments) -> str:
    tags = comments.returns()
    if not returns or not tags:
        return ""
    named = {c.name: c.value for c in tags if c.name}

    rows = []
    for position, param in enumerate(returns):
        if param.name and param.name in named:
            description = named[param.name]
        elif position < len(tags) and not tags[position].name:
            # Unbound @return tags describe return slots in order
            description = tags[position].value
        else:
            description = ""
        rows.append((_name_cell(param.name), Markdown.code(param.type), description))
    return f"{Markdown.bold('Returns')}\n\n{Markdown.table(_PARAM_HEADERS, rows)}"


def _name_cell(name: str | None) -> str:
    return Markdown.code(name) if name else "`<none>`"


__all__ = ["GROUP_TITLES", "AsDoc", "MarkdownWriter", "render_document"]
