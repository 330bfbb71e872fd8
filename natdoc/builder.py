"""Documentation build orchestrator.

``DocBuilder`` runs the whole core pipeline on in-memory sources::

    sources -> parse (threads) -> DocumentBuilder -> preprocessors
            -> render (threads) -> book manifest -> BuildResult

No file I/O happens here; ``natdoc.project`` reads sources and writes
outputs around it.
"""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from natdoc.core.config.models import DocConfig
from natdoc.core.diagnostics import BuildResult, DocWarning, FileFailure, WarningCode
from natdoc.core.exceptions import ParseError
from natdoc.core.logging import get_logger
from natdoc.document.builder import DocumentBuilder
from natdoc.document.document import Document
from natdoc.parser.items import ParseItem
from natdoc.parser.parser import parse
from natdoc.preprocessing.base import build_chain
from natdoc.writer.as_doc import MarkdownWriter
from natdoc.writer.summary import render_manifest

logger = get_logger(__name__)


@dataclass(slots=True)
class _FileOutcome:
    """Result of parsing one file on a worker thread."""

    source_file: str
    items: list[ParseItem] = field(default_factory=list)
    warnings: list[DocWarning] = field(default_factory=list)
    error: ParseError | None = None


class DocBuilder:
    """Build markdown documentation from source texts.

    Parameters
    ----------
    config : DocConfig | None
        Build configuration; defaults to ``DocConfig()``

    Examples
    --------
    >>> result = DocBuilder().build({"src/Counter.sol": "contract Counter {}"})
    >>> sorted(result.outputs)
    ['book.toml', 'src/README.md', 'src/SUMMARY.md', 'src/src/Counter.sol/contract.Counter.md']
    """

    def __init__(self, config: DocConfig | None = None) -> None:
        self.config = config or DocConfig()
        self.writer = MarkdownWriter()

    def build(self, sources: Mapping[str, str], *, homepage: str | None = None) -> BuildResult:
        """Run the pipeline.

        Parameters
        ----------
        sources : Mapping[str, str]
            POSIX source path to UTF-8 source text
        homepage : str | None
            Markdown used as the book README instead of the generated index

        Returns
        -------
        BuildResult
            Rendered pages keyed by output path, warnings and skipped files

        Raises
        ------
        ParseError
            In strict mode, the first parse failure in sorted path order
        BuildError
            If two declarations map to the same output path
        PreprocessError
            If a preprocessor pass fails
        ConfigurationError
            If the configuration enables an unknown preprocessor
        """
        chain = build_chain(self.config)
        warnings: list[DocWarning] = []
        failures: list[FileFailure] = []

        items: list[ParseItem] = []
        for outcome in self._parse_all(sources):
            if outcome.error is not None:
                if self.config.strict:
                    raise outcome.error
                failures.append(
                    FileFailure(
                        source_file=outcome.source_file,
                        reason=outcome.error.reason,
                        line=outcome.error.line,
                    )
                )
                warnings.append(
                    DocWarning(
                        code=WarningCode.PARSE_FAILED,
                        message=f"skipped: {outcome.error.reason}",
                        source_file=outcome.source_file,
                        line=outcome.error.line,
                    )
                )
                continue
            items.extend(outcome.items)
            warnings.extend(outcome.warnings)

        document_builder = DocumentBuilder()
        documents = document_builder.build(items)
        warnings.extend(document_builder.warnings)

        for preprocessor in chain:
            logger.debug("Running preprocessor {name}", name=preprocessor.id.value)
            documents = preprocessor.apply(documents)
            warnings.extend(preprocessor.warnings)

        outputs = self._render_all(documents)
        outputs.update(render_manifest(documents, self.config.title, homepage))

        for warning in warnings:
            logger.warning("{warning}", warning=str(warning))
        logger.info(
            "Rendered {pages} pages from {files} files ({failed} skipped)",
            pages=len(documents),
            files=len(sources),
            failed=len(failures),
        )
        return BuildResult(outputs=outputs, warnings=warnings, failed_files=failures)

    def _parse_all(self, sources: Mapping[str, str]) -> list[_FileOutcome]:
        """Parse every file concurrently; outcomes come back in sorted path order."""
        paths = sorted(sources)
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            return list(executor.map(lambda path: self._parse_one(path, sources[path]), paths))

    def _parse_one(self, source_file: str, source_text: str) -> _FileOutcome:
        try:
            items, warnings = parse(source_text, source_file, strict=self.config.strict)
        except ParseError as e:
            logger.debug("Parse failed for {file}: {error}", file=source_file, error=str(e))
            return _FileOutcome(source_file=source_file, error=e)
        return _FileOutcome(source_file=source_file, items=items, warnings=warnings)

    def _render_all(self, documents: list[Document]) -> dict[str, str]:
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            pages = list(executor.map(self.writer.render_document, documents))
        return {document.out_path: page for document, page in zip(documents, pages, strict=True)}


__all__ = ["DocBuilder"]
