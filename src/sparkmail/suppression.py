"""Suppression list API resource."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Sequence

from .exceptions import FormatError, InvalidArgumentError
from .models import SuppressionEntry, SuppressionListWrapper
from .response import Response

if TYPE_CHECKING:
    from .client import SparkMailClient

logger = logging.getLogger(__name__)

RESOURCE = "suppression-list"


class SuppressionResource:
    """Suppression list API resource.

    Every method takes an optional ``headers`` mapping that is merged into
    the outbound request as-is.
    """

    def __init__(self, client: SparkMailClient):
        self._client = client

    def list(self, headers: Mapping[str, str] | None = None) -> SuppressionListWrapper:
        """List every entry in the suppression list.

        Returns:
            Wrapper with ``results`` populated.
        """
        return self._get(self._client.path(RESOURCE), headers)

    def retrieve(
        self, email: str, headers: Mapping[str, str] | None = None
    ) -> SuppressionListWrapper:
        """Get the entry for one address.

        The address is joined onto the path unchanged, so it must be safe to
        use as a path segment.

        Args:
            email: Recipient address.

        Returns:
            Wrapper whose ``results`` hold the matching entries.
        """
        return self._get(self._client.path(RESOURCE, email), headers)

    def search(
        self,
        parameters: Mapping[str, str | Sequence[str]] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> SuppressionListWrapper:
        """Search the suppression list.

        Args:
            parameters: Query parameters, e.g. ``{"types": "transactional"}``.
                A sequence value is sent as a repeated key. An empty mapping
                is the same as ``list()``.

        Returns:
            Wrapper with ``results`` populated.
        """
        params = None
        if parameters:
            params = {k: v if isinstance(v, str) else list(v) for k, v in parameters.items()}
        return self._get(self._client.path(RESOURCE), headers, params)

    def delete(self, email: str, headers: Mapping[str, str] | None = None) -> Response:
        """Remove an address from the suppression list.

        There is no way to choose between the transactional and
        non-transactional lists here; the server removes the entry.

        Args:
            email: Recipient address.

        Returns:
            The response, on any 2xx status.

        Raises:
            APIError: On any other status.
        """
        response = self._client.delete(self._client.path(RESOURCE, email), headers)
        if response.is_success:
            return response
        raise response.classify_error("SuppressionEntry", "delete")

    def upsert(
        self,
        entries: Sequence[SuppressionEntry] | None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Add entries to the list, or overwrite them if they already exist.

        Args:
            entries: Entries to write. May be empty, but not None.

        Returns:
            The response, on status 200.

        Raises:
            InvalidArgumentError: If ``entries`` is None.
            FormatError: If the response is not JSON.
            APIError: On any other status.
        """
        if entries is None:
            raise InvalidArgumentError("`entries` cannot be None")

        wrapper = SuppressionListWrapper(recipients=list(entries))
        response = self._client.put(self._client.path(RESOURCE), wrapper.to_dict(), headers)
        response.assert_json()
        response.parse()

        if response.status_code == 200:
            return response
        raise response.classify_error("SuppressionEntry", "upsert")

    def _get(
        self,
        path: str,
        headers: Mapping[str, str] | None,
        params: Mapping[str, str | list[str]] | None = None,
    ) -> SuppressionListWrapper:
        response = self._client.get(path, headers, params)
        response.assert_json()
        try:
            return SuppressionListWrapper.from_dict(response.json())
        except FormatError:
            logger.debug("Could not decode suppression list from %s", path)
            raise
