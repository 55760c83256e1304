"""
Activity registration table for the PagerDuty connector.

The table maps stable activity names to callables. The names are a contract
with existing workflow definitions, so they must not change:

- ``pagerduty.FetchIncidents``
- ``pagerduty.FetchIncident``
- ``pagerduty.FetchPostmortems``

``run_activity`` is the single entry point used by the Celery tasks and the
management commands: dict in, dict out.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from apps.pagerduty import activities
from apps.pagerduty.dtos import FetchIncidentInput, FetchIncidentsInput, FetchPostmortemsInput

PROVIDER_NAME = "pagerduty-connector"
PROVIDER_VERSION = "1.0.0"

FETCH_INCIDENTS = "pagerduty.FetchIncidents"
FETCH_INCIDENT = "pagerduty.FetchIncident"
FETCH_POSTMORTEMS = "pagerduty.FetchPostmortems"


@dataclass(frozen=True)
class ActivityDefinition:
    """A registered activity: stable name, callable, and its input record type."""

    name: str
    func: Callable[[Any], Any]
    input_type: type
    description: str = ""


@dataclass
class Provider:
    """Ordered set of activities published under one provider name."""

    name: str
    version: str
    activities: list[ActivityDefinition] = field(default_factory=list)

    def add_activity(
        self,
        name: str,
        func: Callable[[Any], Any],
        input_type: type,
        description: str = "",
    ) -> Provider:
        if any(a.name == name for a in self.activities):
            raise ValueError(f"Activity already registered: {name}")
        self.activities.append(ActivityDefinition(name, func, input_type, description))
        return self

    def names(self) -> list[str]:
        return [a.name for a in self.activities]


def _build_provider() -> Provider:
    return (
        Provider(PROVIDER_NAME, PROVIDER_VERSION)
        .add_activity(
            FETCH_INCIDENTS,
            activities.fetch_incidents,
            FetchIncidentsInput,
            "Fetch a page of incidents and store them as documents",
        )
        .add_activity(
            FETCH_INCIDENT,
            activities.fetch_incident,
            FetchIncidentInput,
            "Fetch a single incident by ID",
        )
        .add_activity(
            FETCH_POSTMORTEMS,
            activities.fetch_postmortems,
            FetchPostmortemsInput,
            "Fetch resolved incidents and store them as postmortem documents",
        )
    )


_PROVIDER = _build_provider()


def get_provider() -> Provider:
    """Return the PagerDuty provider and its activity table."""
    return _PROVIDER


def get_activity(name: str) -> ActivityDefinition:
    """
    Get a registered activity by name.

    Raises:
        ValueError: If the activity name is not registered.
    """
    for activity in _PROVIDER.activities:
        if activity.name == name:
            return activity
    raise ValueError(f"Unknown activity: {name}. Available: {', '.join(_PROVIDER.names())}")


def run_activity(name: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Decode ``payload`` into the activity's input, run it, and encode the output."""
    activity = get_activity(name)
    result = activity.func(activity.input_type.from_dict(payload))
    return result.to_dict()
