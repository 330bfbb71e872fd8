"""Declarations recovered by the parser.

``ParseSource`` is a closed union of declaration variants. Consumers dispatch
on it with ``match`` and finish with ``assert_never`` so that adding a variant
forces every consumer to handle it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from natdoc.parser.comments import Comments


class ItemKind(StrEnum):
    """Declaration kinds, named as they appear in output file names."""

    CONTRACT = "contract"
    FUNCTION = "function"
    MODIFIER = "modifier"
    VARIABLE = "variable"
    STRUCT = "struct"
    ENUM = "enum"
    EVENT = "event"
    ERROR = "error"
    TYPE = "type"


class ContractKind(StrEnum):
    CONTRACT = "contract"
    ABSTRACT = "abstract"
    INTERFACE = "interface"
    LIBRARY = "library"


class FunctionKind(StrEnum):
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    FALLBACK = "fallback"
    RECEIVE = "receive"


class Visibility(StrEnum):
    PRIVATE = "private"
    INTERNAL = "internal"
    PUBLIC = "public"
    EXTERNAL = "external"

    @property
    def rank(self) -> int:
        # public and external are equally visible
        return {"private": 0, "internal": 1, "public": 2, "external": 2}[self.value]


@dataclass(frozen=True, slots=True)
class Param:
    """A parameter, return slot, struct field or event argument."""

    name: str | None
    type: str
    storage: str | None = None
    indexed: bool = False


@dataclass(slots=True)
class ContractSource:
    name: str
    signature: str
    contract_kind: ContractKind = ContractKind.CONTRACT
    bases: list[str] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.CONTRACT


@dataclass(slots=True)
class FunctionSource:
    name: str
    signature: str
    function_kind: FunctionKind = FunctionKind.FUNCTION
    visibility: Visibility | None = None
    mutability: str | None = None
    is_virtual: bool = False
    overrides: list[str] | None = None
    modifiers: list[str] = field(default_factory=list)
    params: list[Param] = field(default_factory=list)
    returns: list[Param] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.FUNCTION


@dataclass(slots=True)
class ModifierSource:
    name: str
    signature: str
    is_virtual: bool = False
    overrides: list[str] | None = None
    params: list[Param] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.MODIFIER


@dataclass(slots=True)
class VariableSource:
    name: str
    signature: str
    type: str = ""
    visibility: Visibility | None = None
    mutability: str | None = None  # "constant" | "immutable"
    overrides: list[str] | None = None

    @property
    def kind(self) -> ItemKind:
        return ItemKind.VARIABLE


@dataclass(slots=True)
class StructSource:
    name: str
    signature: str
    fields: list[Param] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.STRUCT


@dataclass(slots=True)
class EnumSource:
    name: str
    signature: str
    values: list[str] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.ENUM


@dataclass(slots=True)
class EventSource:
    name: str
    signature: str
    params: list[Param] = field(default_factory=list)
    anonymous: bool = False

    @property
    def kind(self) -> ItemKind:
        return ItemKind.EVENT


@dataclass(slots=True)
class ErrorSource:
    name: str
    signature: str
    params: list[Param] = field(default_factory=list)

    @property
    def kind(self) -> ItemKind:
        return ItemKind.ERROR


@dataclass(slots=True)
class TypeSource:
    """A user-defined value type: ``type Price is uint256;``."""

    name: str
    signature: str
    underlying: str = ""

    @property
    def kind(self) -> ItemKind:
        return ItemKind.TYPE


ParseSource = (
    ContractSource
    | FunctionSource
    | ModifierSource
    | VariableSource
    | StructSource
    | EnumSource
    | EventSource
    | ErrorSource
    | TypeSource
)


@dataclass(slots=True)
class ParseItem:
    """One declaration with its documentation.

    Attributes
    ----------
    comments : Comments
        Doc comments attached to the declaration (possibly empty)
    source : ParseSource
        The declaration itself
    source_file : str
        POSIX path of the file, as given to the parser
    span : tuple[int, int]
        Offsets of the declaration in the source text
    line : int
        1-based line of the declaration's first token
    parent : str | None
        Name of the enclosing contract, None for top-level declarations
    """

    comments: Comments
    source: ParseSource
    source_file: str
    span: tuple[int, int]
    line: int = 1
    parent: str | None = None

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def kind(self) -> ItemKind:
        return self.source.kind

    @property
    def qualified_name(self) -> str:
        """``Parent.name`` for members, ``name`` for top-level declarations."""
        if self.parent:
            return f"{self.parent}.{self.source.name}"
        return self.source.name

    @property
    def is_container(self) -> bool:
        return isinstance(self.source, ContractSource)

    @property
    def param_types(self) -> tuple[str, ...]:
        """Parameter types, used to tell overloads apart."""
        if isinstance(self.source, FunctionSource | ModifierSource | EventSource | ErrorSource):
            return tuple(p.type for p in self.source.params)
        return ()

    @property
    def visibility(self) -> Visibility | None:
        if isinstance(self.source, FunctionSource | VariableSource):
            return self.source.visibility
        return None

    def __str__(self) -> str:
        return f"{self.source_file}:{self.line} {self.kind} {self.qualified_name}"


__all__ = [
    "ContractKind",
    "ContractSource",
    "EnumSource",
    "ErrorSource",
    "EventSource",
    "FunctionKind",
    "FunctionSource",
    "ItemKind",
    "ModifierSource",
    "Param",
    "ParseItem",
    "ParseSource",
    "StructSource",
    "TypeSource",
    "VariableSource",
    "Visibility",
]
