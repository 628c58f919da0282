from __future__ import annotations

from typing import Any, Optional

import httpx

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"
TIMEOUT_STATUS = 408
RATE_LIMIT_STATUS = 429
DEFAULT_RETRY_AFTER_SECONDS = 60


class EroldClientError(Exception):
    """Base error for client failures."""


class ApiError(EroldClientError):
    """
    Raised for non-2xx responses and for locally synthesized transport
    failures (timeouts, rate limits, connection errors). Always carries a
    status code.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        details: Any = None,
        *,
        timed_out: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.timed_out = timed_out

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "ApiError":
        return cls(message, 401)

    @classmethod
    def not_found(cls, message: str = "Not found") -> "ApiError":
        return cls(message, 404)

    @classmethod
    def bad_request(
        cls, message: str = "Bad request", details: Any = None
    ) -> "ApiError":
        return cls(message, 400, details)

    @classmethod
    def server_error(cls, message: str = "Server error") -> "ApiError":
        return cls(message, 500)

    @classmethod
    def rate_limited(cls, retry_after: Optional[int] = None) -> "ApiError":
        # 0 and missing both fall back to the default hint
        seconds = retry_after or DEFAULT_RETRY_AFTER_SECONDS
        return cls(f"Rate limited. Try again in {seconds} seconds.", RATE_LIMIT_STATUS)

    @classmethod
    def timeout(cls) -> "ApiError":
        return cls("Request timed out", TIMEOUT_STATUS, timed_out=True)


class ConfigurationError(EroldClientError):
    """Missing or invalid configuration. Never retried."""


class EroldParseError(EroldClientError):
    pass


def format_error(error: Any) -> str:
    """Render any raised value as a single line for tool responses."""
    if isinstance(error, ApiError):
        return f"API Error ({error.status_code}): {error.message}"
    if isinstance(error, BaseException):
        return str(error)
    return GENERIC_ERROR_MESSAGE


def is_retryable(error: Any) -> bool:
    """
    True for server errors (>= 500), rate limits (429) and timeouts.
    Every other client error, and any non-transport error, is final.
    """
    if isinstance(error, ApiError):
        return (
            error.timed_out
            or error.status_code >= 500
            or error.status_code == RATE_LIMIT_STATUS
        )
    if isinstance(error, httpx.TimeoutException):
        return True
    return False


__all__ = [
    "EroldClientError",
    "ApiError",
    "ConfigurationError",
    "EroldParseError",
    "format_error",
    "is_retryable",
    "GENERIC_ERROR_MESSAGE",
    "TIMEOUT_STATUS",
    "RATE_LIMIT_STATUS",
]
