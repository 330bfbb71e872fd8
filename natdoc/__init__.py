"""natdoc - markdown documentation books from NatSpec-annotated sources.

The pipeline parses source files into declarations with typed doc comments,
groups them into Documents, runs the preprocessor chain (inheritance links,
``@inheritdoc`` resolution, filtering, deduplication, ordering, inline links,
source links) and renders every Document to markdown.

Examples
--------
>>> from natdoc import DocBuilder, DocConfig
>>> result = DocBuilder(DocConfig(title="Counter")).build(
...     {"src/Counter.sol": "/// @notice Counts.\ncontract Counter {}"}
... )
>>> print(result.outputs["src/src/Counter.sol/contract.Counter.md"])  # doctest: +SKIP
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("natdoc")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Running from a source checkout

from natdoc.builder import DocBuilder
from natdoc.core.config import DocConfig, LoggingConfig, load_config
from natdoc.core.diagnostics import BuildResult, DocWarning, FileFailure, WarningCode
from natdoc.core.exceptions import (
    BuildError,
    ConfigurationError,
    MalformedTagError,
    NatDocError,
    ParseError,
    PathCollisionError,
    PreprocessError,
    UnbalancedDelimitersError,
    ValidationError,
    WriteError,
)
from natdoc.document import Document, DocumentBuilder
from natdoc.parser import Comments, ParseItem, parse, parse_doc_comment
from natdoc.writer import MarkdownWriter, render_document

__all__ = [
    "BuildError",
    "BuildResult",
    "Comments",
    "ConfigurationError",
    "DocBuilder",
    "DocConfig",
    "DocWarning",
    "Document",
    "DocumentBuilder",
    "FileFailure",
    "LoggingConfig",
    "MalformedTagError",
    "MarkdownWriter",
    "NatDocError",
    "ParseError",
    "ParseItem",
    "PathCollisionError",
    "PreprocessError",
    "UnbalancedDelimitersError",
    "ValidationError",
    "WarningCode",
    "WriteError",
    "__version__",
    "load_config",
    "parse",
    "parse_doc_comment",
    "render_document",
]
