"""Diagnostic models returned alongside rendered documentation.

Warnings never abort a run. Every stage appends them to the build result so
nothing is silently dropped, and the CLI can dump them as JSON.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class WarningCode(StrEnum):
    """Machine-readable warning categories."""

    DANGLING_COMMENT = "dangling-comment"
    ORPHAN_MEMBER = "orphan-member"
    UNRESOLVED_INHERITDOC = "unresolved-inheritdoc"
    INHERITDOC_CYCLE = "inheritdoc-cycle"
    FILTER_KEPT = "filter-kept"
    DUPLICATE = "duplicate"
    PARSE_FAILED = "parse-failed"


class DocWarning(BaseModel):
    """A non-fatal problem found while building documentation.

    Attributes
    ----------
    code : WarningCode
        Warning category
    message : str
        Human-readable description
    source_file : str | None
        Source file the warning refers to
    item : str | None
        Qualified name of the declaration involved, if any
    line : int | None
        1-based line number, if known
    """

    code: WarningCode
    message: str
    source_file: str | None = None
    item: str | None = None
    line: int | None = None

    def __str__(self) -> str:
        location = self.source_file or ""
        if location and self.line is not None:
            location = f"{location}:{self.line}"
        prefix = f"{location}: " if location else ""
        return f"{prefix}[{self.code}] {self.message}"


class FileFailure(BaseModel):
    """A source file skipped because it could not be parsed."""

    source_file: str
    reason: str
    line: int | None = None


class BuildResult(BaseModel):
    """Outcome of a successful documentation build.

    Attributes
    ----------
    outputs : dict[str, str]
        Output-relative path to rendered markdown
    warnings : list[DocWarning]
        Non-fatal problems, in the order they were found
    failed_files : list[FileFailure]
        Files skipped after a parse error (non-strict mode only)
    """

    outputs: dict[str, str] = Field(default_factory=dict)
    warnings: list[DocWarning] = Field(default_factory=list)
    failed_files: list[FileFailure] = Field(default_factory=list)


__all__ = ["BuildResult", "DocWarning", "FileFailure", "WarningCode"]
