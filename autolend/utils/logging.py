"""Logging setup for autolend.

Every module logs through a named logger from get_logger(). Decisions of the
strategy and the investor are logged with log_with_context(), which appends
key=value pairs; money is rendered as plain decimals and ratings by name, so
a log line reads the same as the marketplace shows it.
"""

import logging
import sys
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, TextIO

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: str | int) -> int:
    """Translate a level name or number to a logging level.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        return logging.INFO
    return numeric_level


def setup_logging(
    level: str | int = "INFO",
    log_format: str | None = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, ...) or number
        log_format: Custom format string. If None, uses DEFAULT_FORMAT.
        stream: Where to write, stdout if None. Command line tools pass
            stderr so their own output stays clean.

    Example:
        >>> from autolend.utils.logging import setup_logging
        >>> setup_logging(level="DEBUG")
    """
    logging.basicConfig(
        level=resolve_level(level),
        format=log_format or DEFAULT_FORMAT,
        stream=stream or sys.stdout,
        force=True,  # Override any existing configuration
    )


def setup_logging_from_config(
    config: Any,
    level: str | int | None = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure logging from the ``logging`` section of a Config.

    Args:
        config: Config with optional ``logging.level`` and ``logging.format``
        level: Overrides ``logging.level`` when given
        stream: Passed on to setup_logging
    """
    setup_logging(
        level=level or config.get("logging.level", "INFO"),
        log_format=config.get("logging.format"),
        stream=stream,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)


def _format_value(value: Any) -> str:
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, Enum):
        return value.name
    return str(value)


def log_with_context(
    logger: logging.Logger,
    level: str | int,
    message: str,
    **context: Any,
) -> None:
    """Log a message with structured context.

    Context is appended to the message in key=value format. Nothing is
    formatted when the level is disabled.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **context: Additional context fields

    Example:
        >>> logger = get_logger(__name__)
        >>> log_with_context(
        ...     logger, "info", "Investment submitted",
        ...     loan_id=1234, amount=Decimal("400.00"), rating=Rating.A
        ... )
        # Logs: "Investment submitted | loan_id=1234 amount=400 rating=A"
    """
    numeric_level = resolve_level(level)
    if not logger.isEnabledFor(numeric_level):
        return

    if context:
        context_str = " ".join(f"{k}={_format_value(v)}" for k, v in context.items())
        message = f"{message} | {context_str}"

    logger.log(numeric_level, message)
