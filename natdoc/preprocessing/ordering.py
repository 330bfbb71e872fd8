"""Deterministic ordering of Documents and their members."""

from __future__ import annotations

import dataclasses

from natdoc.core.diagnostics import DocWarning
from natdoc.document.document import KIND_RANK, Document
from natdoc.parser.items import ParseItem
from natdoc.preprocessing.base import PreprocessorId


def _item_key(item: ParseItem) -> tuple[int, str]:
    return (KIND_RANK[item.kind], item.name)


def _document_key(document: Document) -> tuple[int, str, str]:
    return (KIND_RANK[document.kind], document.name, document.source_file)


class Ordering:
    """Stable sort: members by (kind rank, name), Documents by (kind rank, name, file).

    Sorting is stable, so overloads keep their declaration order and an
    already ordered tree comes back unchanged.
    """

    id = PreprocessorId.ORDERING

    def __init__(self) -> None:
        self.warnings: list[DocWarning] = []

    def apply(self, documents: list[Document]) -> list[Document]:
        self.warnings = []
        ordered = sorted(documents, key=_document_key)
        return [
            dataclasses.replace(document, children=sorted(document.children, key=_item_key))
            for document in ordered
        ]


__all__ = ["Ordering"]
