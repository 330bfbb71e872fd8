"""Group parsed items into Documents with collision-checked output paths."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from itertools import groupby

from natdoc.core.diagnostics import DocWarning, WarningCode
from natdoc.core.exceptions import PathCollisionError
from natdoc.core.logging import get_logger
from natdoc.document.document import Document, out_path_for
from natdoc.parser.items import FunctionSource, ParseItem

logger = get_logger(__name__)


class DocumentBuilder:
    """Build the Document tree from a flat list of ParseItems.

    Files are visited in sorted path order. Within a file, containers keep
    their members (matched by ``parent``) in declaration order, and top-level
    non-containers become singleton Documents. Members whose container is not
    in the file are promoted to singleton Documents with a warning.

    Examples
    --------
    >>> builder = DocumentBuilder()
    >>> documents = builder.build(items)  # doctest: +SKIP
    >>> builder.warnings  # doctest: +SKIP
    []
    """

    def __init__(self) -> None:
        self.warnings: list[DocWarning] = []

    def build(self, items: Iterable[ParseItem]) -> list[Document]:
        """Group ``items`` into Documents.

        Parameters
        ----------
        items : Iterable[ParseItem]
            Parsed items, in any file order but in source order within a file

        Returns
        -------
        list[Document]
            Documents in file order, then declaration order

        Raises
        ------
        PathCollisionError
            If two Documents would be written to the same output path
        """
        self.warnings = []
        # sorted() is stable, so source order within a file survives
        ordered = sorted(items, key=lambda item: item.source_file)

        documents: list[Document] = []
        for _, file_items in groupby(ordered, key=lambda item: item.source_file):
            documents.extend(self._build_file(list(file_items)))

        self._check_collisions(documents)
        logger.debug("Built {count} documents", count=len(documents))
        return documents

    def _build_file(self, items: list[ParseItem]) -> list[Document]:
        documents: list[Document] = []
        containers: dict[str, Document] = {}

        for item in items:
            if item.parent is None:
                document = Document(item=item, out_path=out_path_for(item))
                documents.append(document)
                if item.is_container:
                    containers.setdefault(item.name, document)
                continue

            container = containers.get(item.parent)
            if container is not None:
                container.children.append(item)
                continue

            self.warnings.append(
                DocWarning(
                    code=WarningCode.ORPHAN_MEMBER,
                    message=f"container '{item.parent}' not found; documented on its own",
                    source_file=item.source_file,
                    item=item.qualified_name,
                    line=item.line,
                )
            )
            promoted = dataclasses.replace(item, parent=None)
            documents.append(Document(item=promoted, out_path=out_path_for(promoted)))

        return documents

    def _check_collisions(self, documents: list[Document]) -> None:
        seen: dict[str, Document] = {}
        for document in documents:
            first = seen.setdefault(document.out_path, document)
            if first is not document:
                hint = None
                if isinstance(first.item.source, FunctionSource) and isinstance(
                    document.item.source, FunctionSource
                ):
                    hint = "overloaded free functions map to one page; move them into a library"
                raise PathCollisionError(
                    document.out_path,
                    f"{first.source_file}:{first.item.line}",
                    f"{document.source_file}:{document.item.line}",
                    hint=hint,
                )


__all__ = ["DocumentBuilder"]
