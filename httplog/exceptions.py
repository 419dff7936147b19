"""Exception hierarchy for httplog.

Logging never fails a request, so these are only raised while building
configuration, before any request is served.
"""


class HttplogError(Exception):
    """Base exception for httplog errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n{self.details}"
        return self.message


class InvalidOptionError(HttplogError, ValueError):
    """An option holds a value outside its allowed set."""

    def __init__(self, key: str, value: str, valid_values: list[str] | None = None):
        details = f"Invalid value for '{key}': {value}"
        if valid_values:
            details += f"\nValid values: {', '.join(valid_values)}"
        super().__init__("Configuration error", details)
        self.key = key
        self.value = value
