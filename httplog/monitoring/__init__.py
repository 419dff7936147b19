"""Structured logging backend for httplog.

Builds structlog loggers that render JSON lines for production and colored
console output for development.
"""

from httplog.monitoring.logging import (
    configure_logging,
    get_logger,
    new_logger,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "new_logger",
]
