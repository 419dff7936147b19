"""HTTP status classification.

Maps response status codes onto log severities and reason phrases.
Both functions are total: any int gives a result, nothing raises.
"""

from enum import IntEnum
from http import HTTPStatus
import logging


class Severity(IntEnum):
    """Log severities, valued as stdlib logging levels.

    DEBUG is the level floor for application logs attached to a request;
    severity_of() never returns it. FATAL labels critical records.
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL


def severity_of(status: int) -> Severity:
    """Classify a status code.

    A missing or invalid status (<= 0) is flagged as WARN rather than
    passing silently as INFO.
    """
    if status <= 0:
        return Severity.WARN
    if status < 400:  # 1xx, 2xx, 3xx
        return Severity.INFO
    if status < 500:
        return Severity.WARN
    return Severity.ERROR


def status_text(status: int) -> str:
    """Standard reason phrase for a status code, or "" when unknown."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""
