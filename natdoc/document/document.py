"""The Document tree passed between the builder, preprocessors and writer."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Any

from natdoc.parser.items import ContractSource, ItemKind, ParseItem

# Group order of members inside a Document, and of Documents in the tree
KIND_ORDER: tuple[ItemKind, ...] = (
    ItemKind.CONTRACT,
    ItemKind.VARIABLE,
    ItemKind.MODIFIER,
    ItemKind.FUNCTION,
    ItemKind.EVENT,
    ItemKind.ERROR,
    ItemKind.STRUCT,
    ItemKind.ENUM,
    ItemKind.TYPE,
)
KIND_RANK: dict[ItemKind, int] = {kind: rank for rank, kind in enumerate(KIND_ORDER)}


@dataclass(slots=True)
class Document:
    """One output page: a root declaration and the members documented with it.

    Attributes
    ----------
    item : ParseItem
        Root declaration (a contract, or a top-level non-container)
    children : list[ParseItem]
        Members of the root, same source file, in tree order
    out_path : str
        Output path relative to the book root, ``/`` separated
    annotations : dict[str, Any]
        Preprocessor outputs keyed by preprocessor id, read by the writer
    """

    item: ParseItem
    children: list[ParseItem] = field(default_factory=list)
    out_path: str = ""
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def kind(self) -> ItemKind:
        return self.item.kind

    @property
    def source_file(self) -> str:
        return self.item.source_file

    @property
    def identity(self) -> tuple[str, str, str, str]:
        return item_identity(self.item)

    def link_to(self, target_path: str, anchor: str | None = None) -> str:
        """Relative link from this Document's page to the page at ``target_path``."""
        return relative_link(self.out_path, target_path, anchor)

    def __str__(self) -> str:
        return self.out_path or f"{self.source_file}:{self.item.qualified_name}"


def relative_link(from_path: str, to_path: str, anchor: str | None = None) -> str:
    """Link from the page at ``from_path`` to ``to_path``, both book-root relative."""
    path = posixpath.relpath(to_path, posixpath.dirname(from_path) or ".")
    return f"{path}#{anchor}" if anchor else path


def item_identity(item: ParseItem) -> tuple[str, str, str, str]:
    """Identity used for deduplication: file, kind, qualified name, signature."""
    return (item.source_file, str(item.kind), item.qualified_name, item.source.signature)


def page_kind(item: ParseItem) -> str:
    """File name prefix: the contract kind for containers, the item kind otherwise."""
    if isinstance(item.source, ContractSource):
        return str(item.source.contract_kind)
    return str(item.kind)


def out_path_for(item: ParseItem) -> str:
    """``src/<source_file>/<kind>.<Name>.md``."""
    source_file = item.source_file.lstrip("/")
    return f"src/{source_file}/{page_kind(item)}.{item.name}.md"


def heading_anchor(text: str) -> str:
    """Anchor mdBook generates for a heading."""
    anchor = []
    for char in text.strip().lower():
        if char.isalnum() or char in "-_":
            anchor.append(char)
        elif char.isspace():
            anchor.append("-")
    return "".join(anchor)


__all__ = [
    "KIND_ORDER",
    "KIND_RANK",
    "Document",
    "heading_anchor",
    "item_identity",
    "out_path_for",
    "page_kind",
    "relative_link",
]
