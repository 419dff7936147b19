"""httplog: structured HTTP request logging for ASGI applications.

One structlog record per request, with request/response groups, sensitive
header redaction and status-derived severity.
"""

__version__ = "0.1.0"

from httplog.config import Options, get_options
from httplog.entry import LogEntry
from httplog.headers import redact_headers
from httplog.middleware import (
    RecovererMiddleware,
    RequestIDMiddleware,
    RequestLogger,
    RequestLoggingMiddleware,
    current_logger,
    get_log_entry,
    get_request_id,
    request_logger,
    set_attr,
    set_message,
)
from httplog.monitoring import new_logger
from httplog.severity import Severity, severity_of, status_text

__all__ = [
    "__version__",
    "LogEntry",
    "Options",
    "RecovererMiddleware",
    "RequestIDMiddleware",
    "RequestLogger",
    "RequestLoggingMiddleware",
    "Severity",
    "current_logger",
    "get_log_entry",
    "get_options",
    "get_request_id",
    "new_logger",
    "redact_headers",
    "request_logger",
    "set_attr",
    "set_message",
    "severity_of",
    "status_text",
]
