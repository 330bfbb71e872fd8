"""Markdown rendering of Documents and the book manifest."""

from natdoc.writer.as_doc import GROUP_TITLES, AsDoc, MarkdownWriter, render_document
from natdoc.writer.buf_writer import BufWriter
from natdoc.writer.markdown import Markdown
from natdoc.writer.summary import (
    BOOK_TOML_PATH,
    README_PATH,
    SUMMARY_PATH,
    render_book_toml,
    render_manifest,
    render_readme,
    render_summary,
)

__all__ = [
    "BOOK_TOML_PATH",
    "GROUP_TITLES",
    "README_PATH",
    "SUMMARY_PATH",
    "AsDoc",
    "BufWriter",
    "Markdown",
    "MarkdownWriter",
    "render_book_toml",
    "render_document",
    "render_manifest",
    "render_readme",
    "render_summary",
]
