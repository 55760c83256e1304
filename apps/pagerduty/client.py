"""
PagerDuty REST API client.

Two read-only calls, one page each:
- ``GET /incidents?limit=&since=&until=`` → ``IncidentListResponse``
- ``GET /incidents/{id}`` → ``Incident``

See: https://developer.pagerduty.com/api-reference/

Every request authenticates with ``Authorization: Token token=<api key>``.
There is no retry, pagination or token refresh: any non-200 answer is raised
as ``PagerDutyAPIError`` and the caller decides what to do next.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from apps.pagerduty.dtos import Incident, IncidentListResponse, format_timestamp
from apps.pagerduty.exceptions import (
    PagerDutyAPIError,
    PagerDutyDecodeError,
    PagerDutyTransportError,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://api.pagerduty.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LIST_LIMIT = 25


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for a PagerDuty client.

    A timeout of ``None`` or <= 0 falls back to 30 seconds.
    """

    api_key: str
    timeout: float | None = None
    base_url: str = BASE_URL


class PagerDutyClient:
    """Minimal PagerDuty REST API client."""

    def __init__(self, config: ClientConfig):
        self._api_key = config.api_key
        self.timeout = (
            config.timeout if config.timeout and config.timeout > 0 else DEFAULT_TIMEOUT_SECONDS
        )
        self.base_url = (config.base_url or BASE_URL).rstrip("/")

    def list_incidents(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 0,
    ) -> IncidentListResponse:
        """Fetch one page of incidents.

        Args:
            since: Only incidents created at or after this time.
            until: Only incidents created before this time.
            limit: Page size; values <= 0 fall back to 25.

        Returns:
            The decoded page, including the server-reported ``total`` and ``more``.
        """
        if limit <= 0:
            limit = DEFAULT_LIST_LIMIT

        params = {"limit": str(limit)}
        if since is not None:
            params["since"] = format_timestamp(since)
        if until is not None:
            params["until"] = format_timestamp(until)

        data = self._get_json(f"/incidents?{urllib.parse.urlencode(params)}")
        return IncidentListResponse.from_dict(data)

    def get_incident(self, incident_id: str) -> Incident:
        """Fetch a single incident by ID."""
        path = f"/incidents/{urllib.parse.quote(incident_id, safe='')}"
        data = self._get_json(path)

        if not isinstance(data, dict):
            raise PagerDutyDecodeError(f"decode response: expected object, got {type(data).__name__}")
        return Incident.from_dict(data.get("incident") or {})

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Token token={self._api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _get_json(self, path: str) -> Any:
        """Issue a GET and return the decoded JSON body.

        Raises:
            PagerDutyTransportError: The request could not be sent or completed.
            PagerDutyAPIError: The response status was not 200.
            PagerDutyDecodeError: The body was not valid JSON.
        """
        url = f"{self.base_url}{path}"
        request = urllib.request.Request(url, headers=self._headers(), method="GET")
        logger.debug(f"PagerDuty GET {url}")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = response.status
                body = response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else str(e)
            logger.error(f"PagerDuty HTTP error {e.code}: {error_body}")
            raise PagerDutyAPIError(e.code, error_body) from e
        except urllib.error.URLError as e:
            logger.warning(f"PagerDuty URL error: {e.reason}")
            raise PagerDutyTransportError(f"execute request: {e.reason}") from e
        except (OSError, http.client.HTTPException) as e:
            logger.warning(f"PagerDuty request failed: {e}")
            raise PagerDutyTransportError(f"execute request: {e}") from e

        if status != 200:
            logger.error(f"PagerDuty HTTP error {status}: {body}")
            raise PagerDutyAPIError(status, body)

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise PagerDutyDecodeError(f"decode response: {e}") from e
