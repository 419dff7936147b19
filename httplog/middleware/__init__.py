"""Middleware package for request logging."""

from .logging import (
    RequestLogger,
    RequestLoggingMiddleware,
    current_logger,
    get_log_entry,
    request_logger,
    set_attr,
    set_message,
)
from .recoverer import RecovererMiddleware
from .request_id import RequestIDMiddleware, get_request_id

__all__ = [
    "RecovererMiddleware",
    "RequestIDMiddleware",
    "RequestLogger",
    "RequestLoggingMiddleware",
    "current_logger",
    "get_log_entry",
    "get_request_id",
    "request_logger",
    "set_attr",
    "set_message",
]
