"""Configuration loading and management for natdoc."""

from natdoc.core.config.loader import (
    ConfigLoader,
    clear_config_cache,
    get_default_config,
    load_config,
)
from natdoc.core.config.models import DEFAULT_PREPROCESSORS, DocConfig, LoggingConfig

__all__ = [
    "DEFAULT_PREPROCESSORS",
    "ConfigLoader",
    "DocConfig",
    "LoggingConfig",
    "clear_config_cache",
    "get_default_config",
    "load_config",
]
