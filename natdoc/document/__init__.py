"""Document tree: one Document per output page."""

from natdoc.document.builder import DocumentBuilder
from natdoc.document.document import (
    KIND_ORDER,
    KIND_RANK,
    Document,
    heading_anchor,
    item_identity,
    out_path_for,
    page_kind,
    relative_link,
)

__all__ = [
    "KIND_ORDER",
    "KIND_RANK",
    "Document",
    "DocumentBuilder",
    "heading_anchor",
    "item_identity",
    "out_path_for",
    "page_kind",
    "relative_link",
]
