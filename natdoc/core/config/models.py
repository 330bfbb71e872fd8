"""Configuration data models for natdoc."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from natdoc.core.exceptions import ValidationError

VISIBILITY_LEVELS = ("private", "internal", "public", "external")
PARAM_POLICIES = ("per_name", "replace")

DEFAULT_PREPROCESSORS: tuple[str, ...] = (
    "contract_inheritance",
    "inheritdoc",
    "filtering",
    "deduplication",
    "ordering",
    "hyperlinks",
    "git_source",
)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for natdoc.

    Attributes
    ----------
    level : str, default="INFO"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    use_rich : bool, default=False
        Use Rich for console output
    enable_stdlib_bridge : bool, default=False
        Route stdlib logging from third-party libraries into Loguru

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.natdoc.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export NATDOC_LOG_LEVEL=DEBUG
    export NATDOC_LOG_FORMAT=json
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True
    use_rich: bool = False
    enable_stdlib_bridge: bool = False


@dataclass(frozen=True, slots=True)
class DocConfig:
    """Complete natdoc configuration.

    Attributes
    ----------
    title : str
        Book title; defaults to the project directory name in the CLI
    src : str
        Source directory, relative to the project root
    out : str
        Output directory, relative to the project root
    extensions : tuple[str, ...]
        Source file extensions picked up by discovery
    homepage : str | None
        Path of a markdown file used as the book README
    repository : str | None
        Repository URL used for "Git Source" links
    commit : str | None
        Commit or branch those links point at
    strict : bool
        Treat every parse error (including unknown tags) as fatal
    preprocessors : tuple[str, ...]
        Enabled preprocessor ids; they always run in declared order
    min_visibility : str
        Members below this visibility are dropped
    exclude : tuple[str, ...]
        Glob patterns of source paths whose Documents are dropped
    custom_tags : tuple[str, ...] | None
        Whitelist of ``@custom:<name>`` tags to keep; None keeps all
    param_policy : str
        How inherited ``@param``/``@return`` tags combine with local ones
    max_inheritdoc_depth : int
        Longest ``@inheritdoc`` chain followed before failing
    workers : int | None
        Worker threads for parsing and rendering; None lets the executor decide
    logging : LoggingConfig
        Logging settings
    """

    title: str = ""
    src: str = "src"
    out: str = "docs"
    extensions: tuple[str, ...] = (".sol",)
    homepage: str | None = None
    repository: str | None = None
    commit: str | None = None
    strict: bool = False
    preprocessors: tuple[str, ...] = DEFAULT_PREPROCESSORS
    min_visibility: str = "internal"
    exclude: tuple[str, ...] = ()
    custom_tags: tuple[str, ...] | None = None
    param_policy: str = "per_name"
    max_inheritdoc_depth: int = 32
    workers: int | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate configuration values.

        Raises
        ------
        ValidationError
            If a value is outside its allowed range
        """
        if self.min_visibility not in VISIBILITY_LEVELS:
            raise ValidationError(
                "min_visibility",
                f"must be one of {', '.join(VISIBILITY_LEVELS)}",
                self.min_visibility,
            )
        if self.param_policy not in PARAM_POLICIES:
            raise ValidationError(
                "param_policy", f"must be one of {', '.join(PARAM_POLICIES)}", self.param_policy
            )
        if self.max_inheritdoc_depth < 1:
            raise ValidationError(
                "max_inheritdoc_depth", "must be positive", self.max_inheritdoc_depth
            )
        if self.workers is not None and self.workers < 1:
            raise ValidationError("workers", "must be positive", self.workers)
        for ext in self.extensions:
            if not ext.startswith("."):
                raise ValidationError("extensions", "entries must start with '.'", ext)
