"""Source parsing for natdoc.

This package turns source text into ``ParseItem`` declarations with their
typed doc comments attached.
"""

from natdoc.parser.comments import (
    Comment,
    CommentTag,
    CommentTagKind,
    Comments,
    parse_doc_comment,
)
from natdoc.parser.items import (
    ContractKind,
    ContractSource,
    EnumSource,
    ErrorSource,
    EventSource,
    FunctionKind,
    FunctionSource,
    ItemKind,
    ModifierSource,
    Param,
    ParseItem,
    ParseSource,
    StructSource,
    TypeSource,
    VariableSource,
    Visibility,
)
from natdoc.parser.parser import Parser, parse

__all__ = [
    "Comment",
    "CommentTag",
    "CommentTagKind",
    "Comments",
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
    "Parser",
    "StructSource",
    "TypeSource",
    "VariableSource",
    "Visibility",
    "parse",
    "parse_doc_comment",
]
