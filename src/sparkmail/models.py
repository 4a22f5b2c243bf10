"""Typed wire models for suppression list and subaccount endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import FormatError


AVAILABLE_GRANTS = frozenset(
    {
        "smtp/inject",
        "sending_domains/manage",
        "message_events/view",
        "suppression_lists/manage",
        "transmissions/view",
        "transmissions/modify",
    }
)

VALID_STATUSES = frozenset({"active", "suspended", "terminated"})


def is_valid_grant(grant: str) -> bool:
    """Check whether a grant is one the API knows about."""
    return grant in AVAILABLE_GRANTS


def is_valid_status(status: str) -> bool:
    """Check whether a subaccount status is one the API accepts."""
    return status in VALID_STATUSES


def default_grants() -> list[str]:
    """Full grant set, used when a subaccount is created without grants."""
    return sorted(AVAILABLE_GRANTS)


def _get(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    # bool is an int subclass
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise FormatError(f"Field '{key}' has unexpected type {type(value).__name__}")
    return value


def _require_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise FormatError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


@dataclass
class ErrorDetail:
    """One entry of an API error envelope."""

    code: str = ""
    message: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ErrorDetail:
        data = _require_object(data, "error entry")
        code = data.get("code", "")
        return cls(
            code="" if code is None else str(code),
            message=_get(data, "message", str, ""),
            description=_get(data, "description", str, ""),
        )


@dataclass
class SuppressionEntry:
    """A recipient's suppression status.

    ``email`` is what the API accepts on write, ``recipient`` is what it
    returns on read. ``created`` and ``updated`` are server assigned.
    """

    email: str = ""
    recipient: str = ""
    transactional: bool = False
    non_transactional: bool = False
    source: str = ""
    description: str = ""
    updated: str = ""
    created: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out empty fields."""
        data: dict[str, Any] = {}
        if self.email:
            data["email"] = self.email
        if self.recipient:
            data["recipient"] = self.recipient
        if self.transactional:
            data["transactional"] = True
        if self.non_transactional:
            data["non_transactional"] = True
        if self.source:
            data["source"] = self.source
        if self.description:
            data["description"] = self.description
        if self.updated:
            data["updated"] = self.updated
        if self.created:
            data["created"] = self.created
        return data

    @classmethod
    def from_dict(cls, data: Any) -> SuppressionEntry:
        data = _require_object(data, "suppression entry")
        return cls(
            email=_get(data, "email", str, ""),
            recipient=_get(data, "recipient", str, ""),
            transactional=_get(data, "transactional", bool, False),
            non_transactional=_get(data, "non_transactional", bool, False),
            source=_get(data, "source", str, ""),
            description=_get(data, "description", str, ""),
            updated=_get(data, "updated", str, ""),
            created=_get(data, "created", str, ""),
        )


@dataclass
class SuppressionListWrapper:
    """Envelope for suppression entries.

    Read responses use ``results``, write bodies use ``recipients``.
    """

    results: list[SuppressionEntry] | None = None
    recipients: list[SuppressionEntry] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.results is not None:
            data["results"] = [entry.to_dict() for entry in self.results]
        if self.recipients is not None:
            data["recipients"] = [entry.to_dict() for entry in self.recipients]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> SuppressionListWrapper:
        data = _require_object(data, "suppression list")
        results = _get(data, "results", list, None)
        recipients = _get(data, "recipients", list, None)
        return cls(
            results=None if results is None else [SuppressionEntry.from_dict(r) for r in results],
            recipients=(
                None if recipients is None else [SuppressionEntry.from_dict(r) for r in recipients]
            ),
        )


@dataclass
class Subaccount:
    """A subaccount and its API key scope.

    ``id`` of 0 means the subaccount has not been created yet. ``key``,
    ``short_key`` and ``compliance_status`` are assigned by the server.
    ``headers`` is sent with create/update calls and never serialized.
    """

    name: str = ""
    key_label: str = ""
    grants: list[str] = field(default_factory=list)
    id: int = 0
    key: str = ""
    short_key: str = ""
    status: str = ""
    compliance_status: str = ""
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format, leaving out empty fields."""
        data: dict[str, Any] = {}
        if self.id:
            data["subaccount_id"] = self.id
        if self.name:
            data["name"] = self.name
        if self.key:
            data["key"] = self.key
        if self.key_label:
            data["key_label"] = self.key_label
        if self.grants:
            data["key_grants"] = list(self.grants)
        if self.short_key:
            data["short_key"] = self.short_key
        if self.status:
            data["status"] = self.status
        if self.compliance_status:
            data["compliance_status"] = self.compliance_status
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Subaccount:
        data = _require_object(data, "subaccount")
        grants = _get(data, "key_grants", list, [])
        if not all(isinstance(g, str) for g in grants):
            raise FormatError("Field 'key_grants' must be a list of strings")
        return cls(
            id=_get(data, "subaccount_id", int, 0),
            name=_get(data, "name", str, ""),
            key=_get(data, "key", str, ""),
            key_label=_get(data, "key_label", str, ""),
            grants=list(grants),
            short_key=_get(data, "short_key", str, ""),
            status=_get(data, "status", str, ""),
            compliance_status=_get(data, "compliance_status", str, ""),
        )
