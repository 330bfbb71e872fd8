"""Book manifest: ``SUMMARY.md``, ``README.md`` and ``book.toml``."""

from __future__ import annotations

import json
import posixpath
from itertools import groupby

from natdoc.document.document import Document
from natdoc.writer.buf_writer import BufWriter
from natdoc.writer.markdown import Markdown

BOOK_SRC = "src"
SUMMARY_PATH = f"{BOOK_SRC}/SUMMARY.md"
README_PATH = f"{BOOK_SRC}/README.md"
BOOK_TOML_PATH = "book.toml"


def _book_relative(out_path: str) -> str:
    """Path of a page relative to the book's ``src`` directory."""
    return posixpath.relpath(out_path, BOOK_SRC)


def _source_dir(document: Document) -> str:
    return posixpath.dirname(document.source_file) or "."


def render_summary(documents: list[Document]) -> str:
    """Table of contents: the README, then one part per source directory."""
    writer = BufWriter()
    writer.heading("Summary")
    writer.write(Markdown.link("Home", "README.md"))

    by_directory = sorted(documents, key=_source_dir)
    for directory, group in groupby(by_directory, key=_source_dir):
        writer.heading(directory)
        writer.write(
            Markdown.bullet_list(
                Markdown.link(d.name, _book_relative(d.out_path)) for d in group
            )
        )
    return writer.finish()


def render_readme(title: str, documents: list[Document], homepage: str | None = None) -> str:
    """The homepage text when given, otherwise a generated index."""
    if homepage is not None and homepage.strip():
        return homepage.strip("\n") + "\n"

    writer = BufWriter()
    writer.heading(title or "Documentation")
    if documents:
        writer.write(
            Markdown.bullet_list(
                f"{Markdown.link(d.name, _book_relative(d.out_path))} ({d.source_file})"
                for d in documents
            )
        )
    return writer.finish()


def render_book_toml(title: str) -> str:
    # JSON string escaping is valid TOML basic-string escaping
    return (
        "[book]\n"
        f"title = {json.dumps(title)}\n"
        f"src = {json.dumps(BOOK_SRC)}\n"
        "\n"
        "[output.html]\n"
        "no-section-label = true\n"
    )


def render_manifest(
    documents: list[Document], title: str, homepage: str | None = None
) -> dict[str, str]:
    """All manifest files keyed by their book-relative output path."""
    return {
        SUMMARY_PATH: render_summary(documents),
        README_PATH: render_readme(title, documents, homepage),
        BOOK_TOML_PATH: render_book_toml(title),
    }


__all__ = [
    "BOOK_TOML_PATH",
    "README_PATH",
    "SUMMARY_PATH",
    "render_book_toml",
    "render_manifest",
    "render_readme",
    "render_summary",
]
