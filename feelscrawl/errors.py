"""Crawler error taxonomy and classification."""

from __future__ import annotations

import sqlite3
from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of error categories recorded in run logs and ``api_errors``."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    API_CHANGE = "api_change"
    CONFIGURATION = "configuration"
    STORE = "store"
    OTHER = "other"


class CrawlerError(Exception):
    """Base class for all crawler errors."""

    kind: ErrorKind = ErrorKind.OTHER


class AuthenticationError(CrawlerError):
    """The remote API rejected the bearer credential (HTTP 401)."""

    kind = ErrorKind.AUTH


class RateLimitExceededError(CrawlerError):
    """The remote API reported its own rate limit was hit (HTTP 429)."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str = "Rate limit exceeded", endpoint: str | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class NetworkError(CrawlerError):
    """DNS, connection, or timeout failure before a response was received."""

    kind = ErrorKind.NETWORK


class ApiError(CrawlerError):
    """Unexpected status or response shape; usually means the remote schema changed."""

    kind = ErrorKind.API_CHANGE

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint


class ConfigurationError(CrawlerError):
    """Invalid configuration or malformed request payload."""

    kind = ErrorKind.CONFIGURATION


class StoreError(CrawlerError):
    """Persistence failure."""

    kind = ErrorKind.STORE


def classify_error(error: BaseException) -> ErrorKind:
    """Map any exception to an ``ErrorKind``."""
    if isinstance(error, CrawlerError):
        return error.kind
    if isinstance(error, sqlite3.Error):
        return ErrorKind.STORE
    return ErrorKind.OTHER


def should_abort(error: BaseException) -> bool:
    """Return True when the error means every subsequent call would also fail."""
    return classify_error(error) in (ErrorKind.AUTH, ErrorKind.RATE_LIMIT)
