"""Exception recovery middleware.

Install inside the request logger. Unhandled exceptions from the wrapped app
are recorded on the active log entry and turned into a plain 500 response,
so the request logger writes a complete record instead of seeing the raw
exception.
"""

import traceback

import structlog
from starlette.requests import HTTPConnection
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from httplog.middleware.logging import get_log_entry

log = structlog.get_logger(__name__)


class RecovererMiddleware:
    """Convert unhandled exceptions into 500 responses."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            entry = get_log_entry(HTTPConnection(scope))
            if entry is not None:
                entry.panic(exc, traceback.format_exc())
            else:
                log.exception("unhandled_exception", path=scope.get("path", ""))

            # Too late to change the status; let the server drop the connection
            if response_started:
                raise

            response = PlainTextResponse("Internal Server Error", status_code=500)
            await response(scope, receive, send)
