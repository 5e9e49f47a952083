from __future__ import annotations

from typing import Optional


class SkolverketError(Exception):
    """Base error for the Skolverket MCP server."""


class ValidationError(SkolverketError):
    """Raised when user input is invalid."""


class NotFoundError(SkolverketError):
    """Raised when a requested resource is not found."""


class ExternalServiceError(SkolverketError):
    """Raised when a Skolverket API call fails."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ExternalServiceError):
    """Raised on 401/403 responses."""


class RateLimitError(ExternalServiceError):
    """Raised when the API keeps answering 429 after all retries."""

    def __init__(self, message: str, *, retry_after: Optional[int] = None) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class TransientError(ExternalServiceError):
    """Raised on 5xx responses and network failures; safe to retry later."""


class CacheError(SkolverketError):
    """Raised when the fetch behind a cache miss fails. Nothing is cached."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"Failed to fetch data for key '{key}': {cause}")
        self.key = key
        self.cause = cause
