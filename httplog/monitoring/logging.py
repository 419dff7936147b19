"""Structured logger construction using structlog.

Two entry points:
- new_logger() builds a standalone logger from an Options value. It never
  touches global structlog configuration, so loggers with different formats
  and levels can coexist (one per middleware instance).
- configure_logging() sets up process-wide structlog for a host application,
  for loggers obtained through get_logger().

Usage:
    from httplog.config import Options
    from httplog.monitoring import new_logger

    log = new_logger(Options(service_name="hello", format="json"))
    log.info("started", port=8080)
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, WrappedLogger

from httplog.config import Options, get_options

# Labels written in the "level" field
LEVEL_LABELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARN",
    "warn": "WARN",
    "error": "ERROR",
    "critical": "FATAL",
    "fatal": "FATAL",
}

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
}


def relabel_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rewrite the "level" field to upper-case labels (WARN, FATAL)."""
    level = event_dict.get("level")
    if isinstance(level, str):
        event_dict["level"] = LEVEL_LABELS.get(level, level.upper())
    return event_dict


def build_processors(fmt: str) -> list[Any]:
    """Processor chain for the given output format ("json" or "text")."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        relabel_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if fmt == "json":
        # Production: one JSON object per line for log aggregators
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Development: colored key=value output
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def new_logger(options: Options | None = None, stream: TextIO | None = None) -> FilteringBoundLogger:
    """Build a logger from options.

    Args:
        options: Logger options (environment defaults when omitted)
        stream: Output stream (defaults to stdout)

    Returns:
        Bound logger carrying "service" and "tags" when configured
    """
    if options is None:
        options = get_options()

    log: FilteringBoundLogger = structlog.wrap_logger(
        structlog.PrintLogger(stream or sys.stdout),
        processors=build_processors(options.format),
        wrapper_class=structlog.make_filtering_bound_logger(LEVELS[options.level]),
    )

    if options.service_name:
        log = log.bind(service=options.service_name)
    if options.tags:
        log = log.bind(tags=dict(options.tags))

    return log


def configure_logging(mode: str = "development") -> None:
    """Configure process-wide structlog for the host application.

    Args:
        mode: Either "production" (JSON output) or "development" (colored console)
    """
    fmt = "json" if mode == "production" else "text"

    structlog.configure(
        processors=build_processors(fmt),
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )

    # stdlib loggers (uvicorn, starlette) share stdout
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.INFO,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a logger from the process-wide structlog configuration.

    Usage:
        log = get_logger(__name__)
        log.info("event_name", key1="value1", key2=123)
    """
    return structlog.get_logger(name)
