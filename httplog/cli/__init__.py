"""CLI package for httplog."""

from httplog.cli.main import cli

__all__ = ["cli"]
