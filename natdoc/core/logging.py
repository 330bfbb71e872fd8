"""Centralized logging configuration for natdoc using Loguru.

Provides consistent logging across the pipeline with support for:
- Multiple output formats (console, JSON, structured, rich)
- Environment-based default configuration
- Idempotent configuration

Examples
--------
Basic usage:

>>> from natdoc.core.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Parsed {count} files", count=3)

Configure logging globally::

    from natdoc.core.logging import configure_logging
    configure_logging(level="DEBUG", format="rich")
"""

import logging
import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger
from rich.logging import RichHandler

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_CURRENT_CONFIG: dict | None = None
_HANDLER_IDS: list[int] = []


def configure_logging(
    level: LogLevel = "INFO",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = True,
    force_reconfigure: bool = False,
    use_rich: bool = False,
    enable_stdlib_bridge: bool = False,
) -> None:
    """Configure global logging for natdoc.

    Calling it again with the same configuration is a no-op; handlers are
    never duplicated.

    Parameters
    ----------
    level : LogLevel, default="INFO"
        Minimum log level to output
    format : LogFormat, default="structured"
        Output format:
        - "console": plain single-line output
        - "json": one JSON object per record
        - "structured": colored, with module/function/line
        - "rich": Rich console handler
    output_file : str | Path | None, default=None
        Optional file path that receives JSON records in addition to stderr
    use_color : bool, default=True
        Use ANSI color codes in structured format (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    force_reconfigure : bool, default=False
        Reconfigure even if the settings did not change
    use_rich : bool, default=False
        Use Rich for console output (overrides ``format``)
    enable_stdlib_bridge : bool, default=False
        Route stdlib ``logging`` records into Loguru

    Examples
    --------
    CLI verbose mode::

        configure_logging(level="DEBUG", use_rich=True)

    Testing setup::

        configure_logging(level="WARNING", format="console")
    """
    global _CURRENT_CONFIG

    current_config = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
        "include_timestamp": include_timestamp,
        "use_rich": use_rich,
        "enable_stdlib_bridge": enable_stdlib_bridge,
    }

    if not force_reconfigure and current_config == _CURRENT_CONFIG:
        return

    if _CURRENT_CONFIG is None:
        # Loguru's built-in stderr handler (id 0) would duplicate every record
        with suppress(ValueError):
            logger.remove(0)

    # Remove only handlers we added so pytest's capture sinks survive
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()

    if use_rich or format == "rich":
        rich_handler = RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_time=include_timestamp,
            show_level=True,
            show_path=False,
        )
        handler_id = logger.add(sink=rich_handler, level=level, format="{message}")
        _HANDLER_IDS.append(handler_id)

    elif format == "json":
        handler_id = logger.add(sink=sys.stderr, level=level, serialize=True)
        _HANDLER_IDS.append(handler_id)

    elif format == "structured":
        timestamp_fmt = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> " if include_timestamp else ""
        colorize = use_color and sys.stderr.isatty()
        color_level = "<level>{level: <8}</level>" if colorize else "{level: <8}"
        structured_format = (
            f"{timestamp_fmt}[{color_level}]"
            "<cyan>{name}:{function}:{line}</cyan> | <level>{message}</level>"
        )
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            format=structured_format,
            colorize=colorize,
        )
        _HANDLER_IDS.append(handler_id)

    else:  # console
        timestamp_fmt = "{time:YYYY-MM-DD HH:mm:ss} " if include_timestamp else ""
        console_format = f"{timestamp_fmt}{{level: <8}} | {{name}} | {{message}}"
        handler_id = logger.add(
            sink=sys.stderr, level=level, format=console_format, colorize=False
        )
        _HANDLER_IDS.append(handler_id)

    if output_file:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        handler_id = logger.add(sink=output_path, level=level, serialize=True)
        _HANDLER_IDS.append(handler_id)

    if enable_stdlib_bridge:
        enable_stdlib_logging_bridge()

    _CURRENT_CONFIG = current_config


@lru_cache(maxsize=256)
def get_logger(name: str) -> "Logger":
    """Get a logger bound with the given module name (cached).

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__`` of the calling module

    Returns
    -------
    loguru.Logger
        Logger instance bound with ``module=name``

    Notes
    -----
    If configure_logging() has not been called yet, defaults are applied
    from ``NATDOC_LOG_LEVEL`` and ``NATDOC_LOG_FORMAT``.
    """
    _ensure_configured()
    return logger.bind(module=name)


def enable_stdlib_logging_bridge() -> None:
    """Route stdlib ``logging`` records from third-party libraries into Loguru."""

    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            level: str | int
            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

            frame = sys._getframe(6)
            depth = 6
            while frame and frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1

            logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def _ensure_configured() -> None:
    """Apply environment-driven defaults if logging was never configured."""
    if _CURRENT_CONFIG is None:
        level = os.getenv("NATDOC_LOG_LEVEL", "INFO").upper()
        format_type = os.getenv("NATDOC_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]
