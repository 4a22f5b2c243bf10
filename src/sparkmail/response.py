"""Response wrapper and common error classification."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .exceptions import (
    APIError,
    AuthenticationError,
    ForbiddenError,
    FormatError,
    NotFoundError,
)
from .models import ErrorDetail

logger = logging.getLogger(__name__)


class Response:
    """An HTTP response from the API.

    Wraps the ``httpx.Response`` and lazily decodes the standard
    ``{"results": ..., "errors": [...]}`` envelope. ``errors`` is filled
    in best-effort at construction so callers can always inspect it.
    """

    def __init__(self, http: httpx.Response):
        self.http = http
        self.results: Any = None
        self.errors: list[ErrorDetail] = []
        self._parsed = False
        self._decoded: Any = None

        try:
            self.parse()
        except FormatError as e:
            # Envelope stays empty; an explicit parse() raises again.
            logger.debug("Could not parse response envelope: %s", e.message)

    @property
    def status_code(self) -> int:
        return self.http.status_code

    @property
    def body(self) -> bytes:
        return self.http.content

    @property
    def text(self) -> str:
        return self.http.text

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

    def assert_json(self) -> None:
        """Make sure the response declares a JSON content type.

        Raises:
            FormatError: If the media type is not ``application/json``.
        """
        content_type = self.http.headers.get("Content-Type", "")
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type != "application/json":
            raise FormatError(
                f"Expected json, got [{media_type or 'no content type'}] with code {self.status_code}",
                status_code=self.status_code,
            )

    def json(self) -> Any:
        """Decode the raw body as JSON.

        Raises:
            FormatError: If the body is not valid JSON.
        """
        if self._decoded is None:
            try:
                self._decoded = self.http.json()
            except ValueError as e:
                raise FormatError(f"Invalid JSON response: {e}", status_code=self.status_code) from e
        return self._decoded

    def parse(self) -> None:
        """Decode the result/error envelope into ``results`` and ``errors``.

        Raises:
            FormatError: If the body is not JSON or the envelope has the wrong shape.
        """
        if self._parsed:
            return
        if not self.body:
            self._parsed = True
            return

        data = self.json()
        if not isinstance(data, dict):
            raise FormatError("Expected a JSON object in response", status_code=self.status_code)

        errors = data.get("errors") or []
        if not isinstance(errors, list):
            raise FormatError("Field 'errors' must be a list", status_code=self.status_code)

        self.results = data.get("results")
        self.errors = [ErrorDetail.from_dict(e) for e in errors]
        self._parsed = True

    def pretty_error(self, resource: str, operation: str) -> APIError | None:
        """Classify errors common to every endpoint.

        Args:
            resource: Resource name used in the message, e.g. ``"Subaccount"``.
            operation: Operation name, e.g. ``"create"``.

        Returns:
            An error for the common cases, or None when the caller should
            apply its own handling.
        """
        code = self.status_code
        if code == 404:
            cls: type[APIError] = NotFoundError
            message = f"{resource} does not exist, {operation} failed."
        elif code == 401:
            cls = AuthenticationError
            message = f"{resource} {operation} failed, permission denied. Check your API key."
        elif code == 403:
            # Usually a typo in the endpoint URL.
            cls = ForbiddenError
            message = f"{resource} {operation} failed. Are you using the right API path?"
        else:
            return None
        return cls(message, status_code=code, errors=self.errors, body=self.text)

    def raw_error(self) -> APIError:
        """Fallback error carrying the status code and raw body."""
        return APIError(
            f"{self.status_code}: {self.text}",
            status_code=self.status_code,
            errors=self.errors,
            body=self.text,
        )

    def classify_error(self, resource: str, operation: str) -> APIError:
        """Common classification when structured errors are present, else the raw fallback."""
        error = None
        if self.errors:
            error = self.pretty_error(resource, operation)
        if error is None:
            error = self.raw_error()
        logger.debug("%s %s failed: %s", resource, operation, error.message)
        return error

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"
