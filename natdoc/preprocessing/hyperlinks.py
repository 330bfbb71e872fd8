"""Turn ``{Name}`` references in comment text into markdown links."""

from __future__ import annotations

import dataclasses
import re

from natdoc.core.diagnostics import DocWarning
from natdoc.document.document import Document, heading_anchor
from natdoc.parser.comments import Comment
from natdoc.parser.items import ParseItem
from natdoc.preprocessing.base import PreprocessorId

# {Name}, {Name.member} or {Name-member}; "[{" is left alone so links survive a rerun
_REFERENCE = re.compile(r"(?<!\[)\{([A-Za-z_$][\w$]*)(?:[.-]([A-Za-z_$][\w$]*))?\}")


class InferInlineHyperlinks:
    """Rewrite inline references into relative links between pages.

    ``{Name}`` links to the page of the Document called ``Name``;
    ``{Name.member}`` and ``{Name-member}`` link to the member's heading on
    that page. References to unknown names are left as written.
    """

    id = PreprocessorId.HYPERLINKS

    def __init__(self) -> None:
        self.warnings: list[DocWarning] = []

    def apply(self, documents: list[Document]) -> list[Document]:
        self.warnings = []
        pages: dict[str, Document] = {}
        for document in documents:
            pages.setdefault(document.name, document)

        result = []
        for document in documents:

            def link(comment: Comment, document: Document = document) -> str:
                return _REFERENCE.sub(lambda m: self._replace(m, document, pages), comment.value)

            def rewrite(item: ParseItem) -> ParseItem:
                if not any("{" in c.value for c in item.comments):
                    return item
                return dataclasses.replace(item, comments=item.comments.with_values(link))

            result.append(
                dataclasses.replace(
                    document,
                    item=rewrite(document.item),
                    children=[rewrite(child) for child in document.children],
                )
            )
        return result

    @staticmethod
    def _replace(match: re.Match[str], document: Document, pages: dict[str, Document]) -> str:
        name, member = match.group(1), match.group(2)
        target = pages.get(name)
        if target is None:
            return match.group(0)
        if member is None:
            return f"[{name}]({document.link_to(target.out_path)})"
        if not any(child.name == member for child in target.children):
            return match.group(0)
        anchor = heading_anchor(member)
        return f"[{name}.{member}]({document.link_to(target.out_path, anchor)})"


__all__ = ["InferInlineHyperlinks"]
