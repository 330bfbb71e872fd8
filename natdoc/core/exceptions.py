"""Core exception hierarchy for natdoc.

All natdoc exceptions inherit from NatDocError so callers can catch every
pipeline failure in one place. Per-file parse failures are recoverable (the
builder skips the file and reports it); build and preprocess failures abort
the run.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class NatDocError(Exception):
    """Base exception for all natdoc errors.

    Catch this to handle every failure raised by the documentation pipeline.
    """

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(NatDocError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("preprocessors", "unknown preprocessor 'toc'")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the configuration section or key
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(NatDocError):
    """Raised when a configuration value fails validation.

    Examples
    --------
    Example usage::

        raise ValidationError("workers", "must be positive", value=-1)
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


# ============================================================================
# Parse Errors
# ============================================================================


class ParseError(NatDocError):
    """Raised when a source file cannot be parsed.

    Parse errors are scoped to one file. The builder records them and keeps
    going unless strict mode is enabled.
    """

    def __init__(self, source_file: str | None, reason: str, line: int | None = None) -> None:
        """Initialize parse error.

        Args
        ----
            source_file: Path of the file being parsed (None for detached comments)
            reason: What went wrong
            line: 1-based line number of the offending token, if known
        """
        location = source_file or "<comment>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {reason}")
        self.source_file = source_file
        self.reason = reason
        self.line = line


class MalformedTagError(ParseError):
    """Raised in strict mode when a doc comment uses an unknown or incomplete tag."""

    def __init__(self, source_file: str | None, tag: str, line: int | None = None) -> None:
        super().__init__(source_file, f"malformed doc comment tag '@{tag}'", line)
        self.tag = tag


class UnbalancedDelimitersError(ParseError):
    """Raised when brackets, strings or block comments are not closed."""

    def __init__(self, source_file: str | None, delimiter: str, line: int | None = None) -> None:
        super().__init__(source_file, f"unbalanced delimiter '{delimiter}'", line)
        self.delimiter = delimiter


# ============================================================================
# Build Errors
# ============================================================================


class BuildError(NatDocError):
    """Raised when the document tree cannot be assembled."""

    pass


class PathCollisionError(BuildError):
    """Raised when two declarations would be written to the same output path.

    Examples
    --------
    Example usage::

        raise PathCollisionError("src/A.sol/function.f.md", "A.sol:f", "A.sol:f")
    """

    def __init__(
        self, out_path: str, first: str, second: str, hint: str | None = None
    ) -> None:
        """Initialize path collision error.

        Args
        ----
            out_path: The output path both declarations map to
            first: Description of the declaration that claimed the path first
            second: Description of the colliding declaration
            hint: Optional advice appended to the message
        """
        message = f"Output path collision at '{out_path}': {first} and {second}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)
        self.out_path = out_path
        self.first = first
        self.second = second
        self.hint = hint


# ============================================================================
# Preprocess & Write Errors
# ============================================================================


class PreprocessError(NatDocError):
    """Raised when a preprocessor pass fails; the chain stops at the first one."""

    def __init__(self, preprocessor: str, document: str | None, reason: str) -> None:
        """Initialize preprocess error.

        Args
        ----
            preprocessor: Id of the failing pass
            document: Output path of the offending Document, if any
            reason: What went wrong
        """
        where = f" (document '{document}')" if document else ""
        super().__init__(f"Preprocessor '{preprocessor}' failed{where}: {reason}")
        self.preprocessor = preprocessor
        self.document = document
        self.reason = reason


class WriteError(NatDocError):
    """Raised when rendered documentation cannot be written out.

    Rendering itself is total for every declaration kind; only the
    filesystem step in ``natdoc.project`` raises this.
    """

    pass


__all__ = [
    "BuildError",
    "ConfigurationError",
    "MalformedTagError",
    "NatDocError",
    "ParseError",
    "PathCollisionError",
    "PreprocessError",
    "UnbalancedDelimitersError",
    "ValidationError",
    "WriteError",
]
