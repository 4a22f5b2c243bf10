"""Subaccounts API resource."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Mapping

from .exceptions import (
    APIError,
    FormatError,
    InvalidArgumentError,
    SubaccountInUseError,
    UnexpectedResponseError,
)
from .models import Subaccount, default_grants, is_valid_grant, is_valid_status
from .response import Response

if TYPE_CHECKING:
    from .client import SparkMailClient

logger = logging.getLogger(__name__)

RESOURCE = "subaccounts"
MAX_FIELD_BYTES = 1024


def _too_long(value: str) -> bool:
    return len(value.encode("utf-8")) > MAX_FIELD_BYTES


def _as_id(value: Any) -> int | None:
    # JSON numbers may arrive as integral floats
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def validate_for_create(subaccount: Subaccount | None) -> None:
    """Check a subaccount before creating it.

    Checks run in order and the first failure is raised.

    Raises:
        InvalidArgumentError: If the subaccount can't be created as given.
    """
    if subaccount is None:
        raise InvalidArgumentError("Create called with no Subaccount")
    if not subaccount.name:
        raise InvalidArgumentError("Subaccount requires a non-empty Name")
    if not subaccount.key_label:
        raise InvalidArgumentError("Subaccount requires a non-empty Key Label")
    if _too_long(subaccount.name):
        raise InvalidArgumentError(
            f"Subaccount name may not be longer than {MAX_FIELD_BYTES} bytes"
        )
    if _too_long(subaccount.key_label):
        raise InvalidArgumentError(
            f"Subaccount key label may not be longer than {MAX_FIELD_BYTES} bytes"
        )
    unknown = [g for g in subaccount.grants if not is_valid_grant(g)]
    if unknown:
        raise InvalidArgumentError(f"Unknown subaccount grants: {', '.join(unknown)}")


def validate_for_update(subaccount: Subaccount | None) -> None:
    """Check a subaccount before updating it.

    Raises:
        InvalidArgumentError: If the subaccount can't be updated as given.
    """
    if subaccount is None:
        raise InvalidArgumentError("Update called with no Subaccount")
    if not subaccount.id:
        raise InvalidArgumentError("Subaccount Update called with zero id")
    if _too_long(subaccount.name):
        raise InvalidArgumentError(
            f"Subaccount name may not be longer than {MAX_FIELD_BYTES} bytes"
        )
    if subaccount.status and not is_valid_status(subaccount.status):
        raise InvalidArgumentError(f"Not a valid subaccount status: {subaccount.status}")


class SubaccountsResource:
    """Subaccounts API resource."""

    def __init__(self, client: SparkMailClient):
        self._client = client

    def create(
        self, subaccount: Subaccount | None, headers: Mapping[str, str] | None = None
    ) -> Subaccount:
        """Create a subaccount.

        The given object is left untouched. When it has no grants, the full
        default grant set is requested.

        Args:
            subaccount: Subaccount with at least ``name`` and ``key_label``.
            headers: Extra headers, merged over ``subaccount.headers``.

        Returns:
            A copy of the subaccount with ``id``, ``short_key``, ``key`` and
            the effective ``grants`` filled in.

        Raises:
            InvalidArgumentError: If validation fails. No request is sent.
            FormatError: If the response is not JSON.
            UnexpectedResponseError: If a 200 response lacks the new id or short key.
            APIError: On any other status.
        """
        validate_for_create(subaccount)

        grants = list(subaccount.grants) or default_grants()
        payload = dataclasses.replace(subaccount, grants=grants).to_dict()

        response = self._client.post(
            self._client.path(RESOURCE), payload, self._merge_headers(subaccount, headers)
        )
        response.assert_json()
        response.parse()

        if response.status_code != 200:
            raise self._create_error(response)

        results = response.results
        if not isinstance(results, dict):
            raise UnexpectedResponseError("Unexpected response to Subaccount creation")
        subaccount_id = _as_id(results.get("subaccount_id"))
        short_key = results.get("short_key")
        if subaccount_id is None:
            raise UnexpectedResponseError("Unexpected response to Subaccount creation")
        if not isinstance(short_key, str):
            raise UnexpectedResponseError("Unexpected response to Subaccount creation")
        key = results.get("key")

        logger.debug("Created subaccount %d", subaccount_id)
        return dataclasses.replace(
            subaccount,
            id=subaccount_id,
            short_key=short_key,
            key=key if isinstance(key, str) else subaccount.key,
            grants=grants,
            headers=dict(subaccount.headers),
        )

    def update(
        self, subaccount: Subaccount | None, headers: Mapping[str, str] | None = None
    ) -> Response:
        """Update a subaccount.

        All fields are sent; the server ignores the read-only ones.

        Args:
            subaccount: Subaccount with a non-zero ``id``.
            headers: Extra headers, merged over ``subaccount.headers``.

        Returns:
            The response, on status 200.

        Raises:
            InvalidArgumentError: If validation fails. No request is sent.
            FormatError: If the response is not JSON.
            SubaccountInUseError: On status 409.
            APIError: On any other status.
        """
        validate_for_update(subaccount)

        response = self._client.put(
            self._client.path(RESOURCE, subaccount.id),
            subaccount.to_dict(),
            self._merge_headers(subaccount, headers),
        )
        response.assert_json()
        response.parse()

        if response.status_code == 200:
            return response

        error = response.pretty_error("Subaccount", "update") if response.errors else None
        if error is not None:
            raise error
        if response.errors and response.status_code == 409:
            raise SubaccountInUseError(
                f"Subaccount with id [{subaccount.id}] is in use by msg generation",
                status_code=409,
                errors=response.errors,
                body=response.text,
            )
        raise response.raw_error()

    def list(self, headers: Mapping[str, str] | None = None) -> list[Subaccount]:
        """List all subaccounts.

        Returns:
            Subaccounts in the order the server returns them.
        """
        response = self._client.get(self._client.path(RESOURCE), headers)
        results = self._read_results(response, "list")
        if results is None:
            return []
        if not isinstance(results, list):
            raise FormatError("Expected a list of subaccounts in 'results'")
        return [Subaccount.from_dict(item) for item in results]

    def retrieve(
        self, subaccount_id: int, headers: Mapping[str, str] | None = None
    ) -> Subaccount:
        """Get a subaccount by ID.

        Args:
            subaccount_id: Subaccount ID.

        Returns:
            Subaccount details.
        """
        response = self._client.get(self._client.path(RESOURCE, subaccount_id), headers)
        results = self._read_results(response, "retrieve")
        return Subaccount.from_dict(results)

    def _read_results(self, response: Response, operation: str) -> Any:
        # Content type is checked before looking at the status.
        response.assert_json()

        if response.status_code != 200:
            response.parse()
            raise response.classify_error("Subaccount", operation)

        data = response.json()
        if not isinstance(data, dict):
            raise FormatError("Expected a JSON object in response")
        if "results" not in data:
            raise UnexpectedResponseError(f"Unexpected response to Subaccount {operation}")
        return data["results"]

    def _create_error(self, response: Response) -> APIError:
        if response.errors:
            error = response.pretty_error("Subaccount", "create")
            if error is not None:
                return error
            if response.status_code == 422:
                detail = response.errors[0]
                return APIError(
                    f"{detail.code}: {detail.message}\n{detail.description}",
                    status_code=422,
                    errors=response.errors,
                    body=response.text,
                )
        return response.raw_error()

    @staticmethod
    def _merge_headers(
        subaccount: Subaccount, headers: Mapping[str, str] | None
    ) -> dict[str, str]:
        merged = dict(subaccount.headers)
        if headers:
            merged.update(headers)
        return merged
