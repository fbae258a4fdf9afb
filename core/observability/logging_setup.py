"""
Loyalty setup logging

Structured logging through loguru:
- Library modules log with ``logger.bind(...)`` context and never add sinks
- Applications call ``setup_logging`` once to choose level and format
- JSON lines when ``serialize=True`` (log shippers), plain text otherwise
"""
from __future__ import annotations
from typing import Any, TextIO
import sys

from loguru import logger

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level> | {extra}"
)


def setup_logging(
    level: str = "INFO",
    serialize: bool = False,
    sink: TextIO | Any = None,
) -> int:
    """Replace loguru's handlers with a single configured sink.

    Returns the handler id so callers (and tests) can remove it again.
    """
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        serialize=serialize,
        format=PLAIN_FORMAT,
        backtrace=False,
        diagnose=False,
    )


def setup_logging_from_settings(settings) -> int:
    """Apply the log level and format from a ``WizardSettings``."""
    return setup_logging(level=settings.log_level, serialize=settings.log_json)
