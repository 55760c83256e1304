"""
Typed records for the PagerDuty REST API and the connector activities.

Wire records (``Incident`` and friends) name their JSON fields explicitly in
``from_dict``/``to_dict``. Missing fields decode to empty values; fields of the
wrong type raise ``PagerDutyDecodeError``.

Activity records (``Fetch*Input``/``Fetch*Output``) are the contracts between
the orchestration layer and the activities. Their ``to_dict``/``from_dict``
forms are what travels through Celery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from apps.documents.dtos import DataRef, Document
from apps.pagerduty.exceptions import PagerDutyDecodeError

# --- wire helpers ---


def parse_timestamp(value: Any, name: str = "timestamp") -> datetime | None:
    """Parse an RFC 3339 timestamp; ``None``/empty decodes to ``None``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise PagerDutyDecodeError(f"{name}: expected RFC 3339 string, got {type(value).__name__}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise PagerDutyDecodeError(f"{name}: invalid timestamp {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    """Format a datetime as RFC 3339 with second precision (``Z`` for UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _field(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if kind is int and isinstance(value, bool):
        raise PagerDutyDecodeError(f"{key}: expected int, got bool")
    if not isinstance(value, kind):
        raise PagerDutyDecodeError(
            f"{key}: expected {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _object(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    return _field(data, key, dict, None)


def _require_object(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise PagerDutyDecodeError(f"{name}: expected object, got {type(value).__name__}")
    return value


# --- wire records ---


@dataclass(frozen=True)
class Reference:
    """An id/name/summary reference to another PagerDuty object."""

    id: str = ""
    name: str = ""
    summary: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        return cls(
            id=_field(data, "id", str, ""),
            name=_field(data, "name", str, ""),
            summary=_field(data, "summary", str, ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "summary": self.summary}


class Priority(Reference):
    """Incident priority (e.g., P1)."""


class Service(Reference):
    """The service an incident belongs to."""


class Assignee(Reference):
    """A user an incident is assigned to."""


class EscalationPolicy(Reference):
    """The escalation policy attached to an incident."""


@dataclass(frozen=True)
class Assignment:
    """One assignment of an incident to a user."""

    at: datetime | None = None
    assignee: Assignee = field(default_factory=Assignee)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Assignment:
        data = _require_object(data, "assignment")
        assignee = _object(data, "assignee")
        return cls(
            at=parse_timestamp(data.get("at"), "at"),
            assignee=Assignee.from_dict(assignee) if assignee else Assignee(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"at": format_timestamp(self.at), "assignee": self.assignee.to_dict()}


@dataclass(frozen=True)
class Incident:
    """A PagerDuty incident as returned by the REST API."""

    id: str
    type: str = ""
    summary: str = ""
    description: str = ""
    status: str = ""
    urgency: str = ""
    priority: Priority | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    resolved_at: datetime | None = None
    service: Service = field(default_factory=Service)
    assignments: tuple[Assignment, ...] = ()
    escalation_policy: EscalationPolicy = field(default_factory=EscalationPolicy)
    html_url: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Incident:
        data = _require_object(data, "incident")
        priority = _object(data, "priority")
        service = _object(data, "service")
        policy = _object(data, "escalation_policy")
        assignments = _field(data, "assignments", list, [])
        return cls(
            id=_field(data, "id", str, ""),
            type=_field(data, "type", str, ""),
            summary=_field(data, "summary", str, ""),
            description=_field(data, "description", str, ""),
            status=_field(data, "status", str, ""),
            urgency=_field(data, "urgency", str, ""),
            priority=Priority.from_dict(priority) if priority is not None else None,
            created_at=parse_timestamp(data.get("created_at"), "created_at"),
            updated_at=parse_timestamp(data.get("updated_at"), "updated_at"),
            resolved_at=parse_timestamp(data.get("resolved_at"), "resolved_at"),
            service=Service.from_dict(service) if service else Service(),
            assignments=tuple(Assignment.from_dict(a) for a in assignments),
            escalation_policy=EscalationPolicy.from_dict(policy) if policy else EscalationPolicy(),
            html_url=_field(data, "html_url", str, ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "summary": self.summary,
            "description": self.description,
            "status": self.status,
            "urgency": self.urgency,
            "priority": self.priority.to_dict() if self.priority else None,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
            "resolved_at": format_timestamp(self.resolved_at),
            "service": self.service.to_dict(),
            "assignments": [a.to_dict() for a in self.assignments],
            "escalation_policy": self.escalation_policy.to_dict(),
            "html_url": self.html_url,
        }


@dataclass(frozen=True)
class IncidentListResponse:
    """One page of ``GET /incidents``."""

    incidents: tuple[Incident, ...] = ()
    limit: int = 0
    offset: int = 0
    total: int = 0
    more: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IncidentListResponse:
        data = _require_object(data, "response")
        incidents = _field(data, "incidents", list, [])
        return cls(
            incidents=tuple(Incident.from_dict(i) for i in incidents),
            limit=_field(data, "limit", int, 0),
            offset=_field(data, "offset", int, 0),
            total=_field(data, "total", int, 0),
            more=_field(data, "more", bool, False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "incidents": [i.to_dict() for i in self.incidents],
            "limit": self.limit,
            "offset": self.offset,
            "total": self.total,
            "more": self.more,
        }


# --- activity records ---


def _input_timestamp(data: dict[str, Any], key: str) -> datetime | None:
    try:
        return parse_timestamp(data.get(key), key)
    except PagerDutyDecodeError as e:
        raise ValueError(str(e)) from e


@dataclass
class FetchIncidentsInput:
    """Input for the ``pagerduty.FetchIncidents`` activity."""

    api_key: str
    since: datetime | None = None
    until: datetime | None = None
    limit: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FetchIncidentsInput:
        return cls(
            api_key=data["api_key"],
            since=_input_timestamp(data, "since"),
            until=_input_timestamp(data, "until"),
            limit=int(data.get("limit") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "api_key": self.api_key,
            "since": format_timestamp(self.since),
            "until": format_timestamp(self.until),
            "limit": self.limit,
        }


@dataclass
class FetchIncidentsOutput:
    """Output of the ``pagerduty.FetchIncidents`` activity."""

    ref: DataRef
    count: int
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {"ref": self.ref.to_dict(), "count": self.count, "total": self.total}


@dataclass
class FetchIncidentInput:
    """Input for the ``pagerduty.FetchIncident`` activity."""

    api_key: str
    incident_id: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FetchIncidentInput:
        return cls(api_key=data["api_key"], incident_id=data["incident_id"])

    def to_dict(self) -> dict[str, Any]:
        return {"api_key": self.api_key, "incident_id": self.incident_id}


@dataclass
class FetchIncidentOutput:
    """Output of the ``pagerduty.FetchIncident`` activity."""

    document: Document
    found: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"document": self.document.to_dict(), "found": self.found}


@dataclass
class FetchPostmortemsInput:
    """Input for the ``pagerduty.FetchPostmortems`` activity."""

    api_key: str
    since: datetime | None = None
    limit: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FetchPostmortemsInput:
        return cls(
            api_key=data["api_key"],
            since=_input_timestamp(data, "since"),
            limit=int(data.get("limit") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "api_key": self.api_key,
            "since": format_timestamp(self.since),
            "limit": self.limit,
        }


@dataclass
class FetchPostmortemsOutput:
    """Output of the ``pagerduty.FetchPostmortems`` activity."""

    ref: DataRef
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"ref": self.ref.to_dict(), "count": self.count}
