"""Sample PagerDuty REST API payloads for tests."""

import copy
import io
import json
import urllib.error
from unittest.mock import MagicMock


def make_incident(incident_id="PABC123", status="triggered", **overrides):
    """Return an incident payload shaped like ``GET /incidents`` items."""
    incident = {
        "id": incident_id,
        "type": "incident",
        "summary": f"[#{incident_id}] Database connection timeout",
        "description": "Connections to the primary database are timing out",
        "status": status,
        "urgency": "high",
        "priority": {"id": "PPRI1", "name": "P1", "summary": "P1"},
        "created_at": "2025-08-23T10:00:00Z",
        "updated_at": "2025-08-23T11:30:00Z",
        "resolved_at": "2025-08-23T11:30:00Z" if status == "resolved" else None,
        "service": {
            "id": "PSVC1",
            "name": "Production Database",
            "summary": "Production Database",
        },
        "assignments": [
            {
                "at": "2025-08-23T10:01:00Z",
                "assignee": {"id": "PUSER1", "name": "Jordan Lee", "summary": "Jordan Lee"},
            },
            {
                "at": "2025-08-23T10:20:00Z",
                "assignee": {"id": "PUSER2", "name": "Sam Park", "summary": "Sam Park"},
            },
        ],
        "escalation_policy": {
            "id": "PPOL1",
            "name": "Database Team",
            "summary": "Database Team",
        },
        "html_url": f"https://acme.pagerduty.com/incidents/{incident_id}",
    }
    incident.update(overrides)
    return incident


def make_list_response(incidents, total=None, more=False, limit=25):
    return {
        "incidents": [copy.deepcopy(i) for i in incidents],
        "limit": limit,
        "offset": 0,
        "total": len(incidents) if total is None else total,
        "more": more,
    }


SAMPLE_LIST_RESPONSE = make_list_response(
    [
        make_incident("PABC123", status="triggered"),
        make_incident(
            "PDEF456",
            status="acknowledged",
            description="",
            priority=None,
            assignments=[],
        ),
        make_incident("PGHI789", status="resolved", urgency="low"),
    ],
    total=42,
    more=True,
)

SAMPLE_GET_RESPONSE = {"incident": make_incident("PABC123", status="resolved")}


def mock_urlopen_response(body, status=200):
    """Create a mock context manager for urllib.request.urlopen."""
    if not isinstance(body, (str, bytes)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    mock_resp = MagicMock()
    mock_resp.read.return_value = body
    mock_resp.status = status
    mock_resp.__enter__ = MagicMock(return_value=mock_resp)
    mock_resp.__exit__ = MagicMock(return_value=False)
    return mock_resp


def http_error(status, body, url="https://api.pagerduty.com/incidents"):
    """Create the urllib.error.HTTPError urlopen raises for a non-2xx answer."""
    return urllib.error.HTTPError(url, status, "error", {}, io.BytesIO(body.encode("utf-8")))


def failing_store(documents):
    """Document store backend that always fails."""
    raise OSError("disk full")
