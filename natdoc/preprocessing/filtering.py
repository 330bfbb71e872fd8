"""Drop members, Documents and custom tags the configuration excludes."""

from __future__ import annotations

import dataclasses
from fnmatch import fnmatchcase

from natdoc.core.diagnostics import DocWarning, WarningCode
from natdoc.core.logging import get_logger
from natdoc.document.document import Document
from natdoc.parser.comments import CommentTagKind
from natdoc.parser.items import ParseItem, Visibility
from natdoc.preprocessing.base import PreprocessorId

logger = get_logger(__name__)


class Filtering:
    """Inclusion/exclusion filter.

    - children with a visibility below ``min_visibility`` are dropped
      (private < internal < public = external; items without a visibility,
      such as events, are always kept)
    - Documents whose source path matches an ``exclude`` glob are dropped
    - ``@custom:<name>`` comments not in ``custom_tags`` are dropped when a
      whitelist is configured

    A Document or child that a surviving ``@inheritdoc`` tag still refers to
    is kept, with a ``filter-kept`` warning.
    """

    id = PreprocessorId.FILTERING

    def __init__(
        self,
        min_visibility: str = "internal",
        exclude: tuple[str, ...] = (),
        custom_tags: tuple[str, ...] | None = None,
    ) -> None:
        self.min_rank = Visibility(min_visibility).rank
        self.exclude = exclude
        self.custom_tags = frozenset(custom_tags) if custom_tags is not None else None
        self.warnings: list[DocWarning] = []

    def apply(self, documents: list[Document]) -> list[Document]:
        self.warnings = []
        referenced = _inheritdoc_references([d for d in documents if not self._is_excluded(d)])

        result = []
        dropped = 0
        for document in documents:
            if self._is_excluded(document):
                names = {document.item.qualified_name}
                names.update(child.qualified_name for child in document.children)
                if not names & referenced:
                    dropped += 1
                    continue
                self._warn_kept(document.item, "excluded document")

            children = []
            for child in document.children:
                if self._is_visible(child):
                    children.append(child)
                elif child.qualified_name in referenced:
                    self._warn_kept(child, f"{child.visibility} member")
                    children.append(child)
            result.append(
                dataclasses.replace(
                    document,
                    item=self._filter_tags(document.item),
                    children=[self._filter_tags(child) for child in children],
                )
            )

        if dropped:
            logger.debug("Excluded {count} documents", count=dropped)
        return result

    def _is_excluded(self, document: Document) -> bool:
        return any(fnmatchcase(document.source_file, pattern) for pattern in self.exclude)

    def _is_visible(self, item: ParseItem) -> bool:
        visibility = item.visibility
        return visibility is None or visibility.rank >= self.min_rank

    def _filter_tags(self, item: ParseItem) -> ParseItem:
        if self.custom_tags is None:
            return item
        comments = [
            c
            for c in item.comments
            if c.kind is not CommentTagKind.CUSTOM or c.name in self.custom_tags
        ]
        if len(comments) == len(item.comments):
            return item
        return dataclasses.replace(item, comments=type(item.comments)(comments))

    def _warn_kept(self, item: ParseItem, what: str) -> None:
        self.warnings.append(
            DocWarning(
                code=WarningCode.FILTER_KEPT,
                message=f"{what} kept because an @inheritdoc tag still refers to it",
                source_file=item.source_file,
                item=item.qualified_name,
                line=item.line,
            )
        )


def _inheritdoc_references(documents: list[Document]) -> set[str]:
    """Qualified names targeted by ``@inheritdoc`` tags left in ``documents``."""
    referenced: set[str] = set()
    for document in documents:
        for item in (document.item, *document.children):
            reference = item.comments.inheritdoc()
            if reference is None:
                continue
            base = reference.rsplit(".", 1)[-1]
            referenced.add(base if item.is_container else f"{base}.{item.name}")
    return referenced


__all__ = ["Filtering"]
