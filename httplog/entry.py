"""Per-request log entry.

A LogEntry is created when a request arrives and carries a structlog bound
logger that accumulates context as the request moves through the handler
chain. Every attach goes through ``bind()``, which returns a new logger; the
entry swaps its reference so later operations see the union.

Lifecycle:
    created  -> request group (and id) bound
    set_attrs / set_message  -> any number of times
    panic    -> at most once, binds "panic" and "stacktrace", never logs
    write    -> exactly once, binds "response" and emits the record

An entry belongs to a single request flow. Attaching attributes from
concurrent tasks of the same request is not synchronized; callers that need
it must serialize access themselves.
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from rich.console import Console
from rich.traceback import Traceback
from starlette.requests import HTTPConnection

from httplog.config import DEFAULT_SENSITIVE_HEADERS
from httplog.headers import HEADERS_KEY, HeaderSource, redact_headers
from httplog.severity import severity_of, status_text


def request_attrs(
    request: HTTPConnection,
    concise: bool,
    leak: bool,
    sensitive: frozenset[str],
) -> dict[str, Any]:
    """Build the "request" attribute group.

    Always holds ``uri`` (target as received, query included) and ``method``.
    Verbose mode adds host, scheme, path, proto, remote and headers.
    """
    scope = request.scope

    raw_path = scope.get("raw_path")
    if raw_path:
        uri = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        uri = scope.get("root_path", "") + scope.get("path", "")
    query = scope.get("query_string", b"")
    if query:
        uri = f"{uri}?{query.decode('latin-1')}"

    attrs: dict[str, Any] = {
        "uri": uri,
        "method": scope.get("method", ""),
    }
    if concise:
        return attrs

    client = scope.get("client")
    attrs.update(
        host=request.headers.get("host", ""),
        scheme=scope.get("scheme", "http"),
        path=scope.get("path", ""),
        proto=f"HTTP/{scope.get('http_version', '1.1')}",
        remote=f"{client[0]}:{client[1]}" if client else "",
    )
    attrs[HEADERS_KEY] = redact_headers(request.headers, leak, sensitive)
    return attrs


def format_panic(value: Any) -> str:
    """Render a panic value without ever raising."""
    try:
        if isinstance(value, str):
            return value
        if isinstance(value, BaseException):
            return f"{type(value).__name__}: {value}"
        return repr(value)
    except Exception:
        return f"<unprintable {type(value).__name__} object>"


def _elapsed_ms(elapsed: float | timedelta) -> float:
    if isinstance(elapsed, timedelta):
        return elapsed.total_seconds() * 1000.0
    return float(elapsed) * 1000.0


class LogEntry:
    """Logging context for one request.

    Attributes:
        logger: Accumulated bound logger (request group, id, ad-hoc attrs)
        message: Suffix appended to the status message
        concise: Reduced attribute set
        leak: Log sensitive headers anyway
        sensitive: Header names to redact, lower-cased on construction
        panicked: Whether panic() already ran
        written: Whether write() already ran
    """

    def __init__(
        self,
        logger: Any,
        request: HTTPConnection,
        *,
        concise: bool = False,
        leak: bool = False,
        sensitive: frozenset[str] = DEFAULT_SENSITIVE_HEADERS,
        request_id: str = "",
        pretty_stack: bool = False,
    ):
        self.concise = concise
        self.leak = leak
        self.sensitive = (
            frozenset(name.strip().lower() for name in sensitive) | DEFAULT_SENSITIVE_HEADERS
        )
        self.pretty_stack = pretty_stack
        self.message = ""
        self.panicked = False
        self.written = False

        if request_id:
            logger = logger.bind(id=request_id)
        self.logger = logger.bind(
            request=request_attrs(request, concise, leak, self.sensitive)
        )

    def set_attrs(self, **attrs: Any) -> None:
        """Attach attributes to the eventual record."""
        self.logger = self.logger.bind(**attrs)

    def set_message(self, message: str) -> None:
        self.message = message

    def panic(self, value: Any, stack: str | bytes | None) -> None:
        """Record an unhandled exception on the entry.

        Binds ``stacktrace`` and ``panic``. Does not log and does not
        re-raise; the record still goes out through write().
        """
        if self.panicked:
            return
        self.panicked = True

        if isinstance(stack, bytes):
            stack = stack.decode("utf-8", errors="replace")
        self.logger = self.logger.bind(stacktrace=stack or "", panic=format_panic(value))

        if self.pretty_stack and isinstance(value, BaseException):
            Console(stderr=True).print(
                Traceback.from_exception(type(value), value, value.__traceback__)
            )

    def write(
        self,
        status: int,
        size: int,
        headers: HeaderSource | None,
        elapsed: float | timedelta,
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit the request record.

        Args:
            status: Response status code (0 when no response was sent)
            size: Response body bytes written
            headers: Response headers
            elapsed: Handling time, in seconds or as a timedelta
            extra: Additional response attributes (verbose mode only)
        """
        if self.written:
            return
        self.written = True

        response: dict[str, Any] = {
            "size": size,
            "status": {"code": status, "msg": status_text(status)},
        }
        if not self.concise:
            response["elapsed"] = _elapsed_ms(elapsed)
            response[HEADERS_KEY] = redact_headers(headers or {}, self.leak, self.sensitive)
            if extra:
                response["extra"] = dict(extra)

        self.logger = self.logger.bind(response=response)

        msg = f"{status} {status_text(status)}".rstrip()
        if self.message:
            msg = f"{msg} - {self.message}"

        self.logger.log(int(severity_of(status)), msg)
