"""Link each contract's base names to the pages of those bases."""

from __future__ import annotations

import dataclasses

from natdoc.core.diagnostics import DocWarning
from natdoc.core.logging import get_logger
from natdoc.document.document import Document
from natdoc.parser.items import ContractSource
from natdoc.preprocessing.base import PreprocessorId

logger = get_logger(__name__)


class ContractInheritance:
    """Annotate contracts with ``{base name: out_path}`` for their known bases.

    Bases are matched by their last path segment (``lib.Base`` matches a
    contract named ``Base``). When several files declare a contract with the
    same name, the first Document in tree order wins. Unknown bases are left
    out of the annotation and rendered as plain text.
    """

    id = PreprocessorId.CONTRACT_INHERITANCE

    def __init__(self) -> None:
        self.warnings: list[DocWarning] = []

    def apply(self, documents: list[Document]) -> list[Document]:
        self.warnings = []
        contracts: dict[str, str] = {}
        for document in documents:
            if document.item.is_container:
                contracts.setdefault(document.name, document.out_path)

        result = []
        for document in documents:
            source = document.item.source
            if not isinstance(source, ContractSource) or not source.bases:
                result.append(document)
                continue

            links = {}
            for base in source.bases:
                target = contracts.get(base.rsplit(".", 1)[-1])
                if target is not None and target != document.out_path:
                    links[base] = target
            annotations = {**document.annotations, self.id.value: links}
            result.append(dataclasses.replace(document, annotations=annotations))

        logger.debug("Linked bases for {count} contracts", count=len(contracts))
        return result


__all__ = ["ContractInheritance"]
