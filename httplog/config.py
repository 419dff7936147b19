"""Configuration for the request logger.

Options are loaded from explicit keyword arguments or from environment
variables using pydantic-settings. Each middleware instance receives its own
frozen Options value, so loggers with different settings can coexist in one
process.

All environment variables are prefixed with ``HTTPLOG_``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from httplog.exceptions import InvalidOptionError

# Always redacted unless leak_sensitive_values is set
DEFAULT_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})

LEVEL_NAMES = ("DEBUG", "INFO", "WARN", "WARNING", "ERROR", "FATAL", "CRITICAL")


class Options(BaseSettings):
    """Request logger options.

    Attributes:
        service_name: Value of the root "service" key. Omitted when empty.
        level: Minimum severity to emit (DEBUG, INFO, WARN, ERROR, FATAL).
        format: "json" for log aggregators, "text" for local development.
        concise: Only log uri/method and size/status.
        tags: Extra fields bound at the root of every record (commit hash, env).
        sensitive_headers: Header names to drop from request/response groups.
        leak_sensitive_values: Log sensitive headers anyway.
    """

    service_name: str = Field(default="", description="Service name bound as 'service'")
    level: str = Field(default="INFO", description="Minimum log level")
    format: Literal["json", "text"] = Field(default="json", description="Output format")
    concise: bool = Field(default=False, description="Reduced attribute set")
    tags: dict[str, str] = Field(default_factory=dict, description="Root-level tags")
    sensitive_headers: frozenset[str] = Field(
        default=DEFAULT_SENSITIVE_HEADERS,
        description="Header names never logged unless leaking is enabled",
    )
    leak_sensitive_values: bool = Field(
        default=False,
        description="Log sensitive header values in full",
    )

    model_config = SettingsConfigDict(
        env_prefix="HTTPLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LEVEL_NAMES:
            raise InvalidOptionError("level", value, list(LEVEL_NAMES))
        return level

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, value):
        # anything other than json falls back to text
        if isinstance(value, str) and value.strip().lower() == "json":
            return "json"
        return "text"

    @field_validator("sensitive_headers", mode="after")
    @classmethod
    def _normalize_sensitive(cls, value: frozenset[str]) -> frozenset[str]:
        return frozenset(name.strip().lower() for name in value) | DEFAULT_SENSITIVE_HEADERS


@lru_cache
def get_options() -> Options:
    """Get cached options loaded from the environment.

    Returns:
        Options instance built from ``HTTPLOG_*`` variables and ``.env``

    Raises:
        ValidationError: If a variable holds an invalid value
    """
    return Options()
