"""Preprocessors: whole-tree passes run between building and rendering.

Passes always run in the order ``PreprocessorId`` declares them; the
configuration only enables or disables them.
"""

from natdoc.preprocessing.base import Preprocessor, PreprocessorId, build_chain
from natdoc.preprocessing.contract_inheritance import ContractInheritance
from natdoc.preprocessing.deduplication import Deduplication
from natdoc.preprocessing.filtering import Filtering
from natdoc.preprocessing.git_source import GitSource
from natdoc.preprocessing.hyperlinks import InferInlineHyperlinks
from natdoc.preprocessing.inheritdoc import Inheritdoc, NameIndex
from natdoc.preprocessing.ordering import Ordering

__all__ = [
    "ContractInheritance",
    "Deduplication",
    "Filtering",
    "GitSource",
    "InferInlineHyperlinks",
    "Inheritdoc",
    "NameIndex",
    "Ordering",
    "Preprocessor",
    "PreprocessorId",
    "build_chain",
]
