"""Uvicorn entry point for the example server."""

import os

import uvicorn

from httplog.config import Options


def run(options: Options | None = None, host: str = "127.0.0.1", port: int = 8080) -> None:
    """Serve the example app until interrupted.

    Uvicorn handles SIGINT/SIGTERM and drains in-flight requests.
    """
    from httplog.example import create_app

    uvicorn.run(
        create_app(options),
        host=host,
        port=port,
        timeout_graceful_shutdown=10,
        log_level="warning",
    )


def main():
    """Start the example server from environment settings."""
    host = os.getenv("HTTPLOG_HOST", "127.0.0.1")
    port = int(os.getenv("HTTPLOG_PORT", "8080"))
    run(host=host, port=port)


if __name__ == "__main__":
    main()
