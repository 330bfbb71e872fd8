"""Annotate each Document with a link to its source in the repository."""

from __future__ import annotations

import dataclasses

from natdoc.core.diagnostics import DocWarning
from natdoc.core.exceptions import PreprocessError
from natdoc.document.document import Document
from natdoc.preprocessing.base import PreprocessorId


class GitSource:
    """Store ``<repository>/blob/<commit>/<source_file>#L<line>`` on each Document.

    Does nothing when no repository is configured. A repository without a
    commit cannot produce stable links and fails the pass.
    """

    id = PreprocessorId.GIT_SOURCE

    def __init__(self, repository: str | None = None, commit: str | None = None) -> None:
        self.repository = repository.rstrip("/") if repository else None
        self.commit = commit
        self.warnings: list[DocWarning] = []

    def apply(self, documents: list[Document]) -> list[Document]:
        self.warnings = []
        if not self.repository:
            return documents
        if not self.commit:
            first = documents[0].out_path if documents else None
            raise PreprocessError(
                self.id.value, first, "'repository' is configured but 'commit' is missing"
            )

        return [
            dataclasses.replace(
                document,
                annotations={**document.annotations, self.id.value: self.url_for(document)},
            )
            for document in documents
        ]

    def url_for(self, document: Document) -> str:
        source_file = document.source_file.lstrip("/")
        return f"{self.repository}/blob/{self.commit}/{source_file}#L{document.item.line}"


__all__ = ["GitSource"]
