"""Configuration file for pytest containing shared fixtures.

This module provides fixtures that can be used across multiple test files:
- counter_sources: a small two-file project with an interface and an implementation
- make_documents: parses sources and groups them into Documents
- find_item: looks up a declaration in a Document tree by qualified name
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from natdoc.core.config import clear_config_cache
from natdoc.document import Document, DocumentBuilder
from natdoc.parser import ParseItem, parse

ICOUNTER_SOL = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

/// @title Counter interface
/// @notice Something that counts.
interface ICounter {
    /// @notice Current value.
    /// @return The count
    function count() external view returns (uint256);

    /// @notice Move the counter.
    /// @dev Reverts on overflow.
    /// @param step How far to move
    function increment(uint256 step) external;
}
"""

COUNTER_SOL = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

import {ICounter} from "./ICounter.sol";

/// @title Counter
/// @author natdoc
contract Counter is ICounter {
    /// @notice Stored value.
    uint256 public count;

    /// @inheritdoc ICounter
    function increment(uint256 step) external {
        count += step;
    }
}
"""


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Start every test with an empty configuration cache."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def counter_sources() -> dict[str, str]:
    """Fixture providing the interface and implementation sources."""
    return {"src/ICounter.sol": ICOUNTER_SOL, "src/Counter.sol": COUNTER_SOL}


@pytest.fixture
def make_documents() -> Callable[[dict[str, str]], list[Document]]:
    """Fixture providing a sources-to-Documents helper."""

    def _make(sources: dict[str, str]) -> list[Document]:
        items: list[ParseItem] = []
        for path in sorted(sources):
            parsed, _ = parse(sources[path], path)
            items.extend(parsed)
        return DocumentBuilder().build(items)

    return _make


@pytest.fixture
def find_item() -> Callable[[list[Document], str], ParseItem]:
    """Fixture providing a lookup of an item by qualified name."""

    def _find(documents: list[Document], qualified_name: str) -> ParseItem:
        for document in documents:
            for item in (document.item, *document.children):
                if item.qualified_name == qualified_name:
                    return item
        raise AssertionError(f"{qualified_name} not found")

    return _find
