"""Example application demonstrating the request logger."""

from httplog.example.app import create_app

__all__ = ["create_app"]
