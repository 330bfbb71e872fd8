"""TOML configuration loader for natdoc."""

from __future__ import annotations

import os
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, cast

from natdoc.core.config.models import DocConfig, LoggingConfig
from natdoc.core.exceptions import ConfigurationError
from natdoc.core.logging import get_logger

# Constants for boolean environment variable parsing
_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

_STR_KEYS = ("title", "src", "out", "min_visibility", "param_policy")
_OPTIONAL_STR_KEYS = ("homepage", "repository", "commit")
_LIST_KEYS = ("extensions", "preprocessors", "exclude")

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Parameters
    ----------
    value : str
        Environment variable value

    Returns
    -------
    bool
        Parsed boolean value

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = _TRUTHY_VALUES | _FALSY_VALUES
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> DocConfig:
    """Cached configuration loader."""
    loader = ConfigLoader()
    return loader._load_and_parse(Path(path_str))


class ConfigLoader:
    """Loads and processes natdoc configuration from TOML files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_from_toml(
        self, path: str | Path | None = None, search_dir: str | Path | None = None
    ) -> DocConfig:
        """Load configuration from TOML file.

        Parameters
        ----------
        path : str | Path | None
            Path to TOML file. If None, searches for natdoc.toml or pyproject.toml
        search_dir : str | Path | None
            Directory searched when ``path`` is None; defaults to the working directory

        Returns
        -------
        DocConfig
            Parsed configuration with environment variables substituted
        """
        config_path = self._find_config_file(path, search_dir)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _load_and_parse(self, config_path: Path) -> DocConfig:
        """Load and parse configuration file."""
        logger.info("Loading configuration from {path}", path=config_path)

        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(str(config_path), f"invalid TOML: {e}") from e

        if config_path.name == "pyproject.toml":
            natdoc_data = data.get("tool", {}).get("natdoc", {})
            if not natdoc_data:
                logger.warning("No [tool.natdoc] section found in pyproject.toml, using defaults")
                return get_default_config()
        elif "tool" in data and "natdoc" in data.get("tool", {}):
            natdoc_data = data["tool"]["natdoc"]
        else:
            # Flat format (top-level keys)
            natdoc_data = data

        natdoc_data = self._substitute_env_vars(natdoc_data)
        return self._parse_config(natdoc_data)

    def _find_config_file(
        self, path: str | Path | None, search_dir: str | Path | None = None
    ) -> Path:
        """Find configuration file.

        Parameters
        ----------
        path : str | Path | None
            Explicit path or None to search

        Returns
        -------
        Path
            Path to configuration file

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("NATDOC_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug(f"Using config from NATDOC_CONFIG_PATH: {config_path}")
                return config_path
            logger.warning(f"NATDOC_CONFIG_PATH set but file not found: {config_path}")

        base = Path(search_dir) if search_dir is not None else Path()
        for name in ("natdoc.toml", "pyproject.toml", ".natdoc.toml"):
            search_path = base / name
            if search_path.exists():
                return search_path

        raise FileNotFoundError(
            "No configuration file found. Searched for: natdoc.toml, pyproject.toml, .natdoc.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ``${VAR}`` placeholders with environment values.

        Unknown variables keep their placeholder.
        """
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    logger.debug(
                        f"Environment variable ${{{var_name}}} not found, keeping placeholder"
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> DocConfig:
        """Parse raw TOML data into DocConfig.

        Parameters
        ----------
        data : dict[str, Any]
            Raw configuration data from TOML

        Returns
        -------
        DocConfig
            Parsed configuration object

        Raises
        ------
        ConfigurationError
            If a key has the wrong type
        """
        kwargs: dict[str, Any] = {}

        for key in _STR_KEYS:
            if key in data:
                kwargs[key] = _expect(data, key, str)

        for key in _OPTIONAL_STR_KEYS:
            if data.get(key) is not None:
                kwargs[key] = _expect(data, key, str)

        for key in _LIST_KEYS:
            if key in data:
                kwargs[key] = tuple(_expect_str_list(data, key))

        if "custom_tags" in data:
            kwargs["custom_tags"] = tuple(_expect_str_list(data, "custom_tags"))

        if "strict" in data:
            kwargs["strict"] = _expect(data, "strict", bool)

        if "max_inheritdoc_depth" in data:
            kwargs["max_inheritdoc_depth"] = _expect(data, "max_inheritdoc_depth", int)

        if data.get("workers") is not None:
            kwargs["workers"] = _expect(data, "workers", int)

        kwargs["logging"] = self._parse_logging_config(data.get("logging", {}))

        known = set(_STR_KEYS) | set(_OPTIONAL_STR_KEYS) | set(_LIST_KEYS)
        known |= {"custom_tags", "strict", "max_inheritdoc_depth", "workers", "logging"}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown configuration key {key!r}", key=key)

        return DocConfig(**kwargs)

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over TOML configuration:
        - NATDOC_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - NATDOC_LOG_FORMAT: Output format (console, json, structured, rich)
        - NATDOC_LOG_FILE: Optional file path for log output
        - NATDOC_LOG_COLOR: Use color output (true/false)
        - NATDOC_LOG_RICH: Use Rich for console output (true/false)
        """
        level = logging_data.get("level", "INFO")
        format_type = logging_data.get("format", "structured")
        output_file = logging_data.get("output_file")
        use_color = logging_data.get("use_color", True)
        include_timestamp = logging_data.get("include_timestamp", True)
        use_rich = logging_data.get("use_rich", False)
        enable_stdlib_bridge = logging_data.get("enable_stdlib_bridge", False)

        if env_level := os.getenv("NATDOC_LOG_LEVEL"):
            level = env_level.upper()
            logger.debug(f"Overriding log level from env: {level}")

        if env_format := os.getenv("NATDOC_LOG_FORMAT"):
            format_type = env_format.lower()
            logger.debug(f"Overriding log format from env: {format_type}")

        if env_file := os.getenv("NATDOC_LOG_FILE"):
            output_file = env_file
            logger.debug(f"Overriding log file from env: {output_file}")

        if env_color := os.getenv("NATDOC_LOG_COLOR"):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning(f"Invalid NATDOC_LOG_COLOR value: {e}")

        if env_rich := os.getenv("NATDOC_LOG_RICH"):
            try:
                use_rich = _parse_bool_env(env_rich)
            except ValueError as e:
                logger.warning(f"Invalid NATDOC_LOG_RICH value: {e}")

        return LoggingConfig(
            level=cast("Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']", level),
            format=cast("Literal['console', 'json', 'structured', 'rich']", format_type),
            output_file=output_file,
            use_color=use_color,
            include_timestamp=include_timestamp,
            use_rich=use_rich,
            enable_stdlib_bridge=enable_stdlib_bridge,
        )


def _expect(data: dict[str, Any], key: str, expected: type) -> Any:
    value = data[key]
    # bool is an int subclass; reject it where an int is required
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigurationError(
            key, f"expected {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _expect_str_list(data: dict[str, Any], key: str) -> list[str]:
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(key, "expected a list of strings")
    return value


def load_config(
    path: str | Path | None = None, *, search_dir: str | Path | None = None
) -> DocConfig:
    """Load configuration from TOML file or return defaults.

    Parameters
    ----------
    path : str | Path | None
        Path to configuration file or None to search
    search_dir : str | Path | None
        Directory to search when ``path`` is None

    Returns
    -------
    DocConfig
        Loaded configuration or defaults if no file found
    """
    try:
        loader = ConfigLoader()
        return loader.load_from_toml(path, search_dir)
    except FileNotFoundError:
        if path:
            raise
        logger.info("No configuration file found, using defaults")
        return get_default_config()


def clear_config_cache() -> None:
    """Clear configuration caches.

    Useful for testing or when configuration files have been modified.
    """
    _load_and_parse_cached.cache_clear()


def get_default_config() -> DocConfig:
    """Get default configuration.

    Returns
    -------
    DocConfig
        Default configuration with every preprocessor enabled
    """
    return DocConfig()
