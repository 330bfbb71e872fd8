"""Preprocessor protocol, identifiers and chain assembly."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from natdoc.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from natdoc.core.config.models import DocConfig
    from natdoc.core.diagnostics import DocWarning
    from natdoc.document.document import Document


class PreprocessorId(StrEnum):
    """Preprocessor identifiers, declared in execution order."""

    CONTRACT_INHERITANCE = "contract_inheritance"
    INHERITDOC = "inheritdoc"
    FILTERING = "filtering"
    DEDUPLICATION = "deduplication"
    ORDERING = "ordering"
    HYPERLINKS = "hyperlinks"
    GIT_SOURCE = "git_source"


class Preprocessor(Protocol):
    """A whole-tree rewriting pass run between building and rendering."""

    id: PreprocessorId
    warnings: list[DocWarning]

    def apply(self, documents: list[Document]) -> list[Document]:
        """Return the rewritten tree; ``documents`` itself is left untouched."""
        ...


def build_chain(config: DocConfig) -> list[Preprocessor]:
    """Instantiate the enabled preprocessors in declared order.

    Parameters
    ----------
    config : DocConfig
        Configuration naming the enabled preprocessors and their options

    Returns
    -------
    list[Preprocessor]
        Preprocessors in declared order, whatever order the config lists them

    Raises
    ------
    ConfigurationError
        If the configuration names an unknown preprocessor
    """
    from natdoc.preprocessing.contract_inheritance import ContractInheritance
    from natdoc.preprocessing.deduplication import Deduplication
    from natdoc.preprocessing.filtering import Filtering
    from natdoc.preprocessing.git_source import GitSource
    from natdoc.preprocessing.hyperlinks import InferInlineHyperlinks
    from natdoc.preprocessing.inheritdoc import Inheritdoc
    from natdoc.preprocessing.ordering import Ordering

    known = {member.value for member in PreprocessorId}
    unknown = [name for name in config.preprocessors if name not in known]
    if unknown:
        raise ConfigurationError(
            "preprocessors",
            f"unknown preprocessor(s) {', '.join(map(repr, unknown))}; "
            f"expected any of {', '.join(known)}",
        )

    enabled = set(config.preprocessors)
    chain: list[Preprocessor] = []
    for preprocessor_id in PreprocessorId:
        if preprocessor_id not in enabled:
            continue
        match preprocessor_id:
            case PreprocessorId.CONTRACT_INHERITANCE:
                chain.append(ContractInheritance())
            case PreprocessorId.INHERITDOC:
                chain.append(
                    Inheritdoc(
                        param_policy=config.param_policy,  # type: ignore[arg-type]
                        max_depth=config.max_inheritdoc_depth,
                    )
                )
            case PreprocessorId.FILTERING:
                chain.append(
                    Filtering(
                        min_visibility=config.min_visibility,
                        exclude=config.exclude,
                        custom_tags=config.custom_tags,
                    )
                )
            case PreprocessorId.DEDUPLICATION:
                chain.append(Deduplication())
            case PreprocessorId.ORDERING:
                chain.append(Ordering())
            case PreprocessorId.HYPERLINKS:
                chain.append(InferInlineHyperlinks())
            case PreprocessorId.GIT_SOURCE:
                chain.append(GitSource(repository=config.repository, commit=config.commit))
    return chain


__all__ = ["Preprocessor", "PreprocessorId", "build_chain"]
