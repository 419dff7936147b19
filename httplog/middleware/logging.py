"""Request logging middleware.

Emits one structured record per HTTP request, with request and response
groups, header redaction and severity derived from the status code.

Implemented as pure ASGI middleware (not BaseHTTPMiddleware) so it can see
the response headers and count body bytes as they are sent.

Application code reaches the active entry through the request:

    from httplog.middleware import current_logger, set_attr

    @app.get("/attr")
    async def attr(request: Request):
        set_attr(request, new="attr")
        current_logger(request).debug("handling attr")
"""

from collections.abc import Callable
import logging
import time
import traceback
from typing import Any

import structlog
from starlette.datastructures import Headers
from starlette.middleware import Middleware
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from httplog.config import Options, get_options
from httplog.entry import LogEntry
from httplog.middleware.request_id import get_request_id
from httplog.monitoring import new_logger

LOG_ENTRY_KEY = "log_entry"


def _drop(logger: Any, method_name: str, event_dict: Any) -> Any:
    raise structlog.DropEvent


# Returned by current_logger() when no entry is active
NOOP_LOGGER = structlog.wrap_logger(
    structlog.ReturnLogger(),
    processors=[_drop],
    wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
)


class RequestLogger:
    """Creates one LogEntry per request from a fixed configuration.

    The configuration is captured at construction and shared read-only by
    every entry; entries are never reused across requests.
    """

    def __init__(
        self,
        logger: Any = None,
        options: Options | None = None,
        get_request_id: Callable[[HTTPConnection], str] = get_request_id,
    ):
        self.options = options if options is not None else get_options()
        self.logger = logger if logger is not None else new_logger(self.options)
        self.get_request_id = get_request_id

    def new_entry(self, request: HTTPConnection) -> LogEntry:
        return LogEntry(
            self.logger,
            request,
            concise=self.options.concise,
            leak=self.options.leak_sensitive_values,
            sensitive=self.options.sensitive_headers,
            request_id=self.get_request_id(request),
            pretty_stack=self.options.format == "text",
        )


class RequestLoggingMiddleware:
    """Log every HTTP request once it completes.

    The entry is stored in the request state before the wrapped app runs and
    written exactly once afterwards. If the app raises, the exception is
    recorded on the entry, the record is written with status 500 (when no
    response was started) and the exception is re-raised.

    ``size`` counts the body bytes the app sent. For HEAD requests that is
    whatever the app wrote, even though the server discards the body.
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: Any = None,
        options: Options | None = None,
        get_request_id: Callable[[HTTPConnection], str] = get_request_id,
    ):
        self.app = app
        self.request_logger = RequestLogger(logger, options, get_request_id)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        entry = self.request_logger.new_entry(HTTPConnection(scope))
        scope.setdefault("state", {})[LOG_ENTRY_KEY] = entry

        status = 0
        size = 0
        response_headers: Headers | None = None
        start = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            nonlocal status, size, response_headers
            if message["type"] == "http.response.start":
                status = message["status"]
                response_headers = Headers(raw=list(message.get("headers", [])))
            elif message["type"] == "http.response.body":
                size += len(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            entry.panic(exc, traceback.format_exc())
            if response_headers is None:
                status = 500
            raise
        finally:
            entry.write(status, size, response_headers, time.perf_counter() - start)


def request_logger(logger: Any = None, options: Options | None = None) -> Middleware:
    """Middleware entry for ``Starlette(middleware=[...])``."""
    return Middleware(RequestLoggingMiddleware, logger=logger, options=options)


def get_log_entry(request: HTTPConnection) -> LogEntry | None:
    """Return the request's active LogEntry, or None if not installed."""
    state = request.scope.get("state")
    if not state:
        return None
    entry = state.get(LOG_ENTRY_KEY)
    return entry if isinstance(entry, LogEntry) else None


def current_logger(request: HTTPConnection) -> Any:
    """Logger carrying the request's accumulated context.

    Falls back to a logger that discards everything when the request logging
    middleware is not installed.
    """
    entry = get_log_entry(request)
    if entry is None:
        return NOOP_LOGGER
    return entry.logger


def set_attr(request: HTTPConnection, **attrs: Any) -> None:
    """Add fields to the request's eventual log record, if any."""
    entry = get_log_entry(request)
    if entry is not None:
        entry.set_attrs(**attrs)


def set_message(request: HTTPConnection, message: str) -> None:
    """Append ``" - <message>"`` to the request's record message, if any."""
    entry = get_log_entry(request)
    if entry is not None:
        entry.set_message(message)
