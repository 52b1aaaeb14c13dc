"""Opt-in structlog configuration for applications embedding schemacraft.

The library only calls ``structlog.get_logger``; nothing here runs at import time.
"""

from __future__ import annotations

import logging
from typing import Final

import structlog

_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level: str = "INFO", *, json_format: bool = True) -> None:
    """Configure structlog with timestamped, level-filtered output."""

    normalized = level.strip().upper()
    if normalized not in _LEVELS:
        expected = ", ".join(_LEVELS)
        raise ValueError(f"invalid log level {level!r}; expected one of: {expected}")

    renderer: structlog.typing.Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS[normalized]),
        cache_logger_on_first_use=False,
    )


__all__ = ["configure_logging"]
