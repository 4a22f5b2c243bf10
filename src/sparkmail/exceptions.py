"""SparkMail SDK exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ErrorDetail


class SparkMailError(Exception):
    """Base exception for SparkMail SDK."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(SparkMailError):
    """Raised when the client is missing or given invalid configuration."""


class InvalidArgumentError(SparkMailError, ValueError):
    """Raised when a request fails local validation.

    Never reaches the network.
    """


class TransportError(SparkMailError):
    """Raised when the HTTP request itself fails (connection, DNS, timeout)."""


class FormatError(SparkMailError):
    """Raised when a response is not JSON or does not have the expected shape."""


class UnexpectedResponseError(SparkMailError):
    """Raised when a successful response is missing expected fields."""


class APIError(SparkMailError):
    """Raised when the API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[ErrorDetail] | None = None,
        body: str = "",
    ):
        super().__init__(message, status_code=status_code)
        self.errors = errors or []
        self.body = body


class AuthenticationError(APIError):
    """Raised when authentication fails (401)."""


class ForbiddenError(APIError):
    """Raised when access is denied (403)."""


class NotFoundError(APIError):
    """Raised when a resource is not found (404)."""


class SubaccountInUseError(APIError):
    """Raised when a subaccount update conflicts with message generation (409)."""
