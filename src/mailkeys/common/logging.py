"""Structured logging setup."""

import logging
import sys
from typing import Any

import structlog

TRACE = 5

LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _resolve_level(level: str) -> int:
    try:
        return LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # resolved per call so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(level: str = "info", json_logs: bool = False) -> None:
    """
    Configure structlog for console or JSON output on stderr.

    Args:
        level: One of trace, debug, info, warn, error
        json_logs: Render each event as a JSON object
    """
    threshold = _resolve_level(level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # structlog only filters on the standard levels; trace lets everything through
    filter_level = logging.NOTSET if threshold == TRACE else threshold

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(filter_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def level_enabled(threshold: str, level: str) -> bool:
    """Whether messages at ``level`` pass a ``threshold`` such as Settings.log_level."""
    return _resolve_level(level) >= _resolve_level(threshold)


def get_logger(name: str) -> Any:
    """Get a bound logger for a module."""
    return structlog.get_logger(name)
