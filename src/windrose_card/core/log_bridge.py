"""Structured logging configuration driven by the card's log_level."""

from __future__ import annotations

import logging
from typing import Any

import structlog

from .checks import is_present
from .defaults import LOG_LEVELS
from .errors import InvalidEnumValueError

LOGGER_NAME = "windrose.config"

_STDLIB_LEVELS = {
    "none": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


def check_log_level(value: Any, default: str) -> str:
    if not is_present(value):
        return default
    level = str(value).strip().lower()
    if level == "warning":
        level = "warn"
    if level not in LOG_LEVELS:
        raise InvalidEnumValueError(
            f"Invalid log_level {value}. Valid options: {', '.join(LOG_LEVELS)}",
            "log_level",
            LOG_LEVELS,
        )
    return level


def resolve_log_level(level: str | None) -> int:
    return _STDLIB_LEVELS.get((level or "warn").lower(), logging.WARNING)


def get_logger(name: str = LOGGER_NAME) -> Any:
    return structlog.get_logger(name)


def configure_logging(level: str = "warn", stdout_format: str = "json") -> None:
    min_level = resolve_log_level(level)

    # structlog only filters on the stdlib level numbers; "none" is enforced by the handler.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(min(min_level, logging.CRITICAL)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
    )

    renderer: Any
    if stdout_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    handler = logging.StreamHandler()
    handler.setLevel(min_level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))

    windrose_logger = logging.getLogger("windrose")
    for existing in windrose_logger.handlers[:]:
        windrose_logger.removeHandler(existing)
    windrose_logger.setLevel(min_level)
    windrose_logger.propagate = False
    windrose_logger.addHandler(handler)
