"""Resolve ``@inheritdoc`` tags by copying documentation from base declarations.

Resolution runs in two phases. First every reference is resolved against
an index of the whole tree, using the comments as they were before the
pass; then the merged comments are written into a new tree. An item's
result therefore never depends on the order in which items are visited.

Cycles (``A`` inherits from ``B`` which inherits from ``A``) are detected
on the reference graph. Items on a cycle keep their tag, inherit nothing and
produce an ``inheritdoc-cycle`` warning. A chain that is longer than
``max_depth`` without looping is an error.
"""

from __future__ import annotations

import dataclasses
from collections import defaultdict

from natdoc.core.diagnostics import DocWarning, WarningCode
from natdoc.core.exceptions import PreprocessError
from natdoc.core.logging import get_logger
from natdoc.document.document import Document
from natdoc.parser.comments import Comments, ParamPolicy
from natdoc.parser.items import ParseItem
from natdoc.preprocessing.base import PreprocessorId

logger = get_logger(__name__)


class NameIndex:
    """Lookup of declarations by name across the whole tree.

    Built once per run and passed explicitly to resolution, so nothing holds
    a reference back into the tree.
    """

    def __init__(self, documents: list[Document]) -> None:
        self.contracts: dict[str, ParseItem] = {}
        self.members: dict[tuple[str, str], list[ParseItem]] = defaultdict(list)
        self.owner: dict[int, Document] = {}

        for document in documents:
            self.owner[id(document.item)] = document
            if document.item.is_container:
                self.contracts.setdefault(document.name, document.item)
            for child in document.children:
                self.owner[id(child)] = document
                if child.parent is not None:
                    self.members[(child.parent, child.name)].append(child)

    def lookup(self, item: ParseItem, reference: str) -> ParseItem | None:
        """Find the declaration ``item``'s ``@inheritdoc <reference>`` points at.

        Contracts resolve to the base contract. Members resolve to the member
        of the same name and kind in the base, disambiguated by parameter
        types when the base overloads it.
        """
        base = reference.rsplit(".", 1)[-1]
        if item.is_container:
            return self.contracts.get(base)

        candidates = [c for c in self.members.get((base, item.name), []) if c.kind == item.kind]
        if len(candidates) == 1:
            return candidates[0]
        for candidate in candidates:
            if candidate.param_types == item.param_types:
                return candidate
        return None


class Inheritdoc:
    """Splice base documentation into items tagged ``@inheritdoc``.

    Parameters
    ----------
    param_policy : ParamPolicy, default="per_name"
        How inherited ``@param``/``@return`` tags combine with local ones
    max_depth : int, default=32
        Longest chain followed before raising ``PreprocessError``
    """

    id = PreprocessorId.INHERITDOC

    def __init__(self, param_policy: ParamPolicy = "per_name", max_depth: int = 32) -> None:
        self.param_policy = param_policy
        self.max_depth = max_depth
        self.warnings: list[DocWarning] = []

    def apply(self, documents: list[Document]) -> list[Document]:
        self.warnings = []
        index = NameIndex(documents)

        items = [item for document in documents for item in (document.item, *document.children)]
        targets = self._resolve_targets(items, index)
        cyclic = self._find_cycles(targets)

        resolved: dict[int, Comments] = {}
        for item in items:
            if id(item) in targets:
                self._effective(item, targets, cyclic, index, resolved)

        for item in items:
            if id(item) in cyclic:
                self.warnings.append(
                    DocWarning(
                        code=WarningCode.INHERITDOC_CYCLE,
                        message=(
                            f"@inheritdoc {item.comments.inheritdoc()} forms a cycle; "
                            "nothing inherited"
                        ),
                        source_file=item.source_file,
                        item=item.qualified_name,
                        line=item.line,
                    )
                )

        if resolved:
            logger.debug("Resolved {count} @inheritdoc tags", count=len(resolved))
        return [self._rewrite(document, resolved) for document in documents]

    def _resolve_targets(self, items: list[ParseItem], index: NameIndex) -> dict[int, ParseItem]:
        targets: dict[int, ParseItem] = {}
        for item in items:
            reference = item.comments.inheritdoc()
            if reference is None:
                continue
            target = index.lookup(item, reference)
            if target is None:
                self.warnings.append(
                    DocWarning(
                        code=WarningCode.UNRESOLVED_INHERITDOC,
                        message=f"@inheritdoc {reference} does not match any declaration",
                        source_file=item.source_file,
                        item=item.qualified_name,
                        line=item.line,
                    )
                )
                continue
            targets[id(item)] = target
        return targets

    @staticmethod
    def _find_cycles(targets: dict[int, ParseItem]) -> set[int]:
        """Ids of items lying on a reference cycle.

        Every item has at most one target, so each walk either ends or runs
        into a loop; the loop is the suffix of the walk from the repeated item.
        """
        cyclic: set[int] = set()
        finished: set[int] = set()
        for start in targets:
            path: list[int] = []
            position: dict[int, int] = {}
            current: int | None = start
            while current is not None and current not in finished:
                if current in position:
                    cyclic.update(path[position[current] :])
                    break
                position[current] = len(path)
                path.append(current)
                target = targets.get(current)
                current = id(target) if target is not None else None
            finished.update(path)
        return cyclic

    def _effective(
        self,
        item: ParseItem,
        targets: dict[int, ParseItem],
        cyclic: set[int],
        index: NameIndex,
        resolved: dict[int, Comments],
    ) -> Comments:
        """Comments of ``item`` after inheritance, memoised in ``resolved``."""
        key = id(item)
        if key in resolved:
            return resolved[key]
        if key not in targets or key in cyclic:
            return item.comments

        chain = self._chain_length(item, targets, cyclic)
        if chain > self.max_depth:
            document = index.owner.get(key)
            raise PreprocessError(
                self.id.value,
                document.out_path if document else None,
                f"@inheritdoc chain from {item.qualified_name} is {chain} levels deep "
                f"(max_inheritdoc_depth={self.max_depth})",
            )

        base = self._effective(targets[key], targets, cyclic, index, resolved)
        merged = item.comments.merge_inherited(base, self.param_policy)
        resolved[key] = merged
        return merged

    @staticmethod
    def _chain_length(item: ParseItem, targets: dict[int, ParseItem], cyclic: set[int]) -> int:
        length = 0
        current: ParseItem | None = item
        while current is not None and id(current) in targets:
            length += 1
            current = targets[id(current)]
            if id(current) in cyclic:
                break
        return length

    @staticmethod
    def _rewrite(document: Document, resolved: dict[int, Comments]) -> Document:
        def updated(item: ParseItem) -> ParseItem:
            comments = resolved.get(id(item))
            if comments is None:
                return item
            return dataclasses.replace(item, comments=comments)

        return dataclasses.replace(
            document,
            item=updated(document.item),
            children=[updated(child) for child in document.children],
        )


__all__ = ["Inheritdoc", "NameIndex"]
