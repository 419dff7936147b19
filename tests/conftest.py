"""Shared pytest fixtures for httplog tests."""

import logging

import pytest
import structlog
from starlette.requests import HTTPConnection
from structlog.testing import LogCapture

from httplog.config import get_options
from httplog.monitoring import configure_logging


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Configure structlog for test output."""
    configure_logging("development")


@pytest.fixture(autouse=True)
def clean_options(monkeypatch):
    """Keep HTTPLOG_* variables from the host out of the tests."""
    for name in ("SERVICE_NAME", "LEVEL", "FORMAT", "CONCISE", "TAGS",
                 "SENSITIVE_HEADERS", "LEAK_SENSITIVE_VALUES"):
        monkeypatch.delenv(f"HTTPLOG_{name}", raising=False)
    get_options.cache_clear()
    yield
    get_options.cache_clear()


@pytest.fixture
def log_capture():
    """Collects every record as an event dict instead of rendering it."""
    return LogCapture()


@pytest.fixture
def capture_logger(log_capture):
    """Base logger whose records end up in log_capture.entries."""
    return structlog.wrap_logger(
        structlog.ReturnLogger(),
        processors=[log_capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
    )


@pytest.fixture
def make_request():
    """Build an HTTPConnection from plain values.

    Headers are given as (name, value) pairs so repeated names are possible.
    """

    def _make(
        path="/hello",
        method="GET",
        headers=(),
        query=b"",
        client=("10.0.0.1", 5000),
        http_version="1.1",
    ):
        scope = {
            "type": "http",
            "method": method,
            "path": path,
            "raw_path": path.encode(),
            "query_string": query,
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers
            ],
            "http_version": http_version,
            "scheme": "http",
            "client": client,
            "server": ("testserver", 80),
        }
        return HTTPConnection(scope)

    return _make
