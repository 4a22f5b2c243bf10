"""SparkMail API client."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping

import httpx

from .exceptions import ConfigurationError, TransportError
from .response import Response
from .subaccounts import SubaccountsResource
from .suppression import SuppressionResource

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.sparkpost.com"
DEFAULT_API_VERSION = 1


class SparkMailClient:
    """Client for the suppression list and subaccount endpoints.

    Example:
        ```python
        from sparkmail import SparkMailClient, Subaccount, SuppressionEntry

        client = SparkMailClient(api_key="your-api-key")

        # Suppress an address for transactional mail
        client.suppression.upsert(
            [SuppressionEntry(email="user@example.com", transactional=True)]
        )

        # Look it up again
        wrapper = client.suppression.retrieve("user@example.com")

        # Create a subaccount with the default grants
        created = client.subaccounts.create(
            Subaccount(name="Tenant A", key_label="tenant-a")
        )
        print(created.id, created.short_key)
        ```
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: int = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the SparkMail client.

        Args:
            api_key: Your API key.
            base_url: Base URL for the API.
            api_version: API version substituted into every path.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
        """
        if not api_key:
            raise ConfigurationError("API key is required")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout

        from . import __version__

        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": self.api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": f"sparkmail-python/{__version__}",
            },
            timeout=timeout,
            transport=transport,
        )

        # Resource endpoints
        self.suppression = SuppressionResource(self)
        self.subaccounts = SubaccountsResource(self)

    @classmethod
    def from_environment(cls, env_prefix: str = "SPARKMAIL_", **kwargs: Any) -> SparkMailClient:
        """Create a client from environment variables.

        Reads ``{prefix}API_KEY`` (required), ``{prefix}BASE_URL`` and
        ``{prefix}API_VERSION``. Extra keyword arguments go to the constructor.
        """
        api_key = os.getenv(f"{env_prefix}API_KEY")
        if not api_key:
            raise ConfigurationError(
                f"Environment variable {env_prefix}API_KEY is not set. "
                "Please set it to your API key."
            )

        base_url = os.getenv(f"{env_prefix}BASE_URL") or DEFAULT_BASE_URL
        raw_version = os.getenv(f"{env_prefix}API_VERSION")
        api_version = DEFAULT_API_VERSION
        if raw_version:
            try:
                api_version = int(raw_version)
            except ValueError as e:
                raise ConfigurationError(
                    f"Environment variable {env_prefix}API_VERSION must be an integer, "
                    f"got {raw_version!r}"
                ) from e

        return cls(api_key=api_key, base_url=base_url, api_version=api_version, **kwargs)

    def path(self, resource: str, *segments: str | int) -> str:
        """Build a versioned API path, e.g. ``/api/v1/subaccounts/123``."""
        path = f"/api/v{self.api_version}/{resource}"
        for segment in segments:
            path = f"{path}/{segment}"
        return path

    def get(
        self,
        path: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Response:
        return self._request("GET", path, headers=headers, params=params)

    def post(self, path: str, body: Any, headers: Mapping[str, str] | None = None) -> Response:
        return self._request("POST", path, body=body, headers=headers)

    def put(self, path: str, body: Any, headers: Mapping[str, str] | None = None) -> Response:
        return self._request("PUT", path, body=body, headers=headers)

    def delete(self, path: str, headers: Mapping[str, str] | None = None) -> Response:
        return self._request("DELETE", path, headers=headers)

    def _request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Response:
        """Make an API request."""
        logger.debug("%s %s", method, path)
        try:
            http_response = self._client.request(
                method=method,
                url=path,
                json=body,
                params=params,
                headers=dict(headers) if headers else None,
            )
        except httpx.RequestError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.debug("%s %s -> %d", method, path, http_response.status_code)
        return Response(http_response)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> SparkMailClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
