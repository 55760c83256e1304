"""Celery tasks for the PagerDuty activities.

Each task is registered under the activity's stable name, so a workflow can
dispatch it without importing this module:

    app.send_task("pagerduty.FetchIncidents", args=[{"api_key": "...", "limit": 50}])

Tasks take and return plain dicts. They declare no automatic retries: the
calling workflow owns the retry policy for the whole activity.
"""

from __future__ import annotations

from typing import Any

from celery import shared_task

from apps.pagerduty.provider import (
    FETCH_INCIDENT,
    FETCH_INCIDENTS,
    FETCH_POSTMORTEMS,
    run_activity,
)


@shared_task(name=FETCH_INCIDENTS)
def fetch_incidents(payload: dict[str, Any]) -> dict[str, Any]:
    """Fetch a page of incidents and store them. Returns ref, count and total."""
    return run_activity(FETCH_INCIDENTS, payload)


@shared_task(name=FETCH_INCIDENT)
def fetch_incident(payload: dict[str, Any]) -> dict[str, Any]:
    """Fetch one incident. Returns the document and the found flag."""
    return run_activity(FETCH_INCIDENT, payload)


@shared_task(name=FETCH_POSTMORTEMS)
def fetch_postmortems(payload: dict[str, Any]) -> dict[str, Any]:
    """Fetch resolved incidents and store them as postmortems. Returns ref and count."""
    return run_activity(FETCH_POSTMORTEMS, payload)
