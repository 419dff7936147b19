"""Correlation ID middleware.

Assigns every HTTP request an identifier, taken from the incoming
``X-Request-Id`` header when present, otherwise generated. The id is stored
in the request state for the request logger and echoed on the response.
"""

import uuid

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-Id"
REQUEST_ID_KEY = "request_id"


class RequestIDMiddleware:
    """Attach a request id to the scope state and the response headers."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = HTTPConnection(scope)
        request_id = request.headers.get(self.header_name) or uuid.uuid4().hex
        scope.setdefault("state", {})[REQUEST_ID_KEY] = request_id

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                if self.header_name not in headers:
                    headers.append(self.header_name, request_id)
            await send(message)

        await self.app(scope, receive, send_wrapper)


def get_request_id(request: HTTPConnection) -> str:
    """Return the request's correlation id, or "" if none was assigned."""
    state = request.scope.get("state") or {}
    request_id = state.get(REQUEST_ID_KEY, "")
    return request_id if isinstance(request_id, str) else ""
