"""Example FastAPI application wired with the request logger."""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response

from httplog import __version__
from httplog.config import Options, get_options
from httplog.middleware import (
    RecovererMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    set_attr,
)
from httplog.monitoring import configure_logging


def create_app(options: Options | None = None, logger: Any = None) -> FastAPI:
    """Create the example application.

    Args:
        options: Request logger options (environment defaults when omitted)
        logger: Base logger for request records (built from options when omitted)
    """
    options = options if options is not None else get_options()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: configure logging for non-request logs."""
        configure_logging("production" if options.format == "json" else "development")
        yield

    app = FastAPI(
        title="httplog example",
        description="Request logging demo routes",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware stack (runs in REVERSE order of registration)
    # Last added = first executed

    # 3. Recoverer (executes last, turns exceptions into 500s for the logger)
    app.add_middleware(RecovererMiddleware)

    # 2. Request logging (reads the request id, owns the log entry)
    app.add_middleware(RequestLoggingMiddleware, logger=logger, options=options)

    # 1. Request id (executes first)
    app.add_middleware(RequestIDMiddleware)

    # New headers are logged under response.headers
    @app.get("/")
    async def index(response: Response):
        response.headers["new"] = "header"
        return {"status": "ok"}

    # Exception details are logged under "panic" and "stacktrace"
    @app.get("/panic")
    async def panic():
        raise RuntimeError("panic")

    # Extra attribute on the request record
    @app.get("/attr")
    async def attr(request: Request):
        set_attr(request, new="attr")
        return {"status": "ok"}

    # For trying graceful shutdown
    @app.get("/wait")
    async def wait(seconds: float = 5.0):
        await asyncio.sleep(seconds)
        return {"waited": seconds}

    return app
