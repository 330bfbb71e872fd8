"""Remove repeated Documents and members."""

from __future__ import annotations

import dataclasses

from natdoc.core.diagnostics import DocWarning, WarningCode
from natdoc.document.document import Document, item_identity
from natdoc.parser.items import ParseItem
from natdoc.preprocessing.base import PreprocessorId


class Deduplication:
    """Keep the first of several declarations sharing an identity.

    The identity is (source file, kind, qualified name, signature), so
    overloads with different signatures are all kept.
    """

    id = PreprocessorId.DEDUPLICATION

    def __init__(self) -> None:
        self.warnings: list[DocWarning] = []

    def apply(self, documents: list[Document]) -> list[Document]:
        self.warnings = []
        seen_documents: set[tuple[str, str, str, str]] = set()
        result = []
        for document in documents:
            if document.identity in seen_documents:
                self._warn(document.item)
                continue
            seen_documents.add(document.identity)

            seen_children: set[tuple[str, str, str, str]] = set()
            children = []
            for child in document.children:
                identity = item_identity(child)
                if identity in seen_children:
                    self._warn(child)
                    continue
                seen_children.add(identity)
                children.append(child)

            if len(children) != len(document.children):
                document = dataclasses.replace(document, children=children)
            result.append(document)
        return result

    def _warn(self, item: ParseItem) -> None:
        self.warnings.append(
            DocWarning(
                code=WarningCode.DUPLICATE,
                message=f"duplicate {item.kind} '{item.qualified_name}' removed",
                source_file=item.source_file,
                item=item.qualified_name,
                line=item.line,
            )
        )


__all__ = ["Deduplication"]
