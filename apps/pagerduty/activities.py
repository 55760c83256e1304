"""
PagerDuty activities.

Each activity is one synchronous unit of work: build a client, make one API
call, map the result to documents, and (for the batch activities) persist the
documents through the document store.

Activities never retry. Errors are labelled with the step that failed and
re-raised; retry/backoff belongs to whatever orchestrates the activity.
"""

from __future__ import annotations

import logging

from django.conf import settings

from apps.documents.storage import store_documents
from apps.pagerduty.client import BASE_URL, ClientConfig, PagerDutyClient
from apps.pagerduty.dtos import (
    FetchIncidentInput,
    FetchIncidentOutput,
    FetchIncidentsInput,
    FetchIncidentsOutput,
    FetchPostmortemsInput,
    FetchPostmortemsOutput,
)
from apps.pagerduty.exceptions import PagerDutyError, StoreDocumentsError
from apps.pagerduty.mapper import incident_to_document, incidents_to_postmortems

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_LIMIT = 100


def build_client(api_key: str) -> PagerDutyClient:
    """Build a client for one activity call from project settings."""
    return PagerDutyClient(
        ClientConfig(
            api_key=api_key,
            timeout=getattr(settings, "PAGERDUTY_TIMEOUT_SECONDS", None),
            base_url=getattr(settings, "PAGERDUTY_API_URL", BASE_URL),
        )
    )


def _effective_limit(limit: int) -> int:
    return limit if limit > 0 else DEFAULT_ACTIVITY_LIMIT


def _store(documents):
    try:
        return store_documents(documents)
    except PagerDutyError as e:
        raise e.with_stage("store documents")
    except Exception as e:
        raise StoreDocumentsError(str(e)).with_stage("store documents") from e


def fetch_incidents(input: FetchIncidentsInput) -> FetchIncidentsOutput:
    """Fetch a page of incidents and store them as documents."""
    client = build_client(input.api_key)

    try:
        result = client.list_incidents(input.since, input.until, _effective_limit(input.limit))
    except PagerDutyError as e:
        raise e.with_stage("list incidents")

    documents = [incident_to_document(incident) for incident in result.incidents]
    ref = _store(documents)

    logger.info(
        f"Stored {len(documents)} PagerDuty incidents as {ref} (server total: {result.total})"
    )
    return FetchIncidentsOutput(ref=ref, count=len(documents), total=result.total)


def fetch_incident(input: FetchIncidentInput) -> FetchIncidentOutput:
    """Fetch a single incident and return it as a document.

    ``found`` is always True on success: a missing incident comes back from the
    API as a 404 and is raised like any other API error.
    """
    client = build_client(input.api_key)

    try:
        incident = client.get_incident(input.incident_id)
    except PagerDutyError as e:
        raise e.with_stage("get incident")

    return FetchIncidentOutput(document=incident_to_document(incident), found=True)


def fetch_postmortems(input: FetchPostmortemsInput) -> FetchPostmortemsOutput:
    """Fetch a page of incidents and store the resolved ones as postmortems."""
    client = build_client(input.api_key)

    try:
        result = client.list_incidents(input.since, None, _effective_limit(input.limit))
    except PagerDutyError as e:
        raise e.with_stage("list incidents")

    documents = incidents_to_postmortems(result.incidents)
    ref = _store(documents)

    logger.info(
        f"Stored {len(documents)} PagerDuty postmortems as {ref} "
        f"(from {len(result.incidents)} incidents)"
    )
    return FetchPostmortemsOutput(ref=ref, count=len(documents))
