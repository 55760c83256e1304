"""Tests for the PagerDuty activities."""

import urllib.error
import urllib.parse
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from apps.documents.dtos import DataRef
from apps.documents.models import DocumentBatch
from apps.documents.storage import load_documents
from apps.pagerduty import activities
from apps.pagerduty._tests.fixtures import (
    SAMPLE_GET_RESPONSE,
    SAMPLE_LIST_RESPONSE,
    http_error,
    make_incident,
    make_list_response,
    mock_urlopen_response,
)
from apps.pagerduty.dtos import (
    FetchIncidentInput,
    FetchIncidentsInput,
    FetchIncidentsOutput,
    FetchPostmortemsInput,
    FetchPostmortemsOutput,
)
from apps.pagerduty.exceptions import (
    PagerDutyAPIError,
    PagerDutyDecodeError,
    PagerDutyTransportError,
    StoreDocumentsError,
)


def _sent_query(mock_urlopen):
    request = mock_urlopen.call_args[0][0]
    return urllib.parse.parse_qs(urllib.parse.urlsplit(request.full_url).query)


class TestFetchIncidents:
    @patch("urllib.request.urlopen")
    def test_stores_every_incident(self, mock_urlopen, locmem_store):
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_LIST_RESPONSE)

        result = activities.fetch_incidents(FetchIncidentsInput(api_key="key"))

        assert result.count == 3
        assert result.total == 42
        assert result.ref.backend == "locmem"
        stored = locmem_store[result.ref.key]
        assert [d.id for d in stored] == ["PABC123", "PDEF456", "PGHI789"]
        assert all(d.source == "pagerduty" for d in stored)

    @pytest.mark.parametrize("limit", [0, -1])
    @patch("urllib.request.urlopen")
    def test_non_positive_limit_defaults_to_100(self, mock_urlopen, limit, locmem_store):
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_LIST_RESPONSE)

        activities.fetch_incidents(FetchIncidentsInput(api_key="key", limit=limit))

        assert _sent_query(mock_urlopen)["limit"] == ["100"]

    @patch("urllib.request.urlopen")
    def test_passes_since_and_until(self, mock_urlopen, locmem_store):
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_LIST_RESPONSE)

        activities.fetch_incidents(
            FetchIncidentsInput(
                api_key="key",
                since=datetime(2025, 1, 1, tzinfo=timezone.utc),
                until=datetime(2025, 2, 1, tzinfo=timezone.utc),
                limit=10,
            )
        )

        query = _sent_query(mock_urlopen)
        assert query["since"] == ["2025-01-01T00:00:00Z"]
        assert query["until"] == ["2025-02-01T00:00:00Z"]
        assert query["limit"] == ["10"]

    @patch("urllib.request.urlopen")
    def test_uses_configured_api_url_and_timeout(self, mock_urlopen, locmem_store, settings):
        settings.PAGERDUTY_API_URL = "http://pagerduty.test"
        settings.PAGERDUTY_TIMEOUT_SECONDS = 7
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_LIST_RESPONSE)

        activities.fetch_incidents(FetchIncidentsInput(api_key="key"))

        request = mock_urlopen.call_args[0][0]
        assert request.full_url.startswith("http://pagerduty.test/incidents?")
        assert mock_urlopen.call_args[1]["timeout"] == 7

    @patch("urllib.request.urlopen")
    def test_empty_page_stores_empty_batch(self, mock_urlopen, locmem_store):
        mock_urlopen.return_value = mock_urlopen_response(make_list_response([]))

        result = activities.fetch_incidents(FetchIncidentsInput(api_key="key"))

        assert result.count == 0
        assert locmem_store[result.ref.key] == []

    @patch("apps.pagerduty.activities.incident_to_document")
    @patch("urllib.request.urlopen")
    def test_api_error_is_labelled_and_mapper_not_called(
        self, mock_urlopen, mock_mapper, locmem_store
    ):
        mock_urlopen.side_effect = http_error(404, '{"error":"not found"}')

        with pytest.raises(PagerDutyAPIError) as exc_info:
            activities.fetch_incidents(FetchIncidentsInput(api_key="key"))

        assert exc_info.value.stage == "list incidents"
        message = str(exc_info.value)
        assert message.startswith("list incidents: ")
        assert "404" in message
        assert '{"error":"not found"}' in message
        mock_mapper.assert_not_called()
        assert locmem_store == {}

    @patch("urllib.request.urlopen")
    def test_transport_error_keeps_its_kind(self, mock_urlopen, locmem_store):
        mock_urlopen.side_effect = urllib.error.URLError("no route to host")

        with pytest.raises(PagerDutyTransportError) as exc_info:
            activities.fetch_incidents(FetchIncidentsInput(api_key="key"))

        assert exc_info.value.stage == "list incidents"

    @patch("urllib.request.urlopen")
    def test_store_failure_is_labelled(self, mock_urlopen, settings):
        settings.DOCUMENT_STORE_BACKEND = "apps.pagerduty._tests.fixtures.failing_store"
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_LIST_RESPONSE)

        with pytest.raises(StoreDocumentsError) as exc_info:
            activities.fetch_incidents(FetchIncidentsInput(api_key="key"))

        assert exc_info.value.stage == "store documents"
        assert str(exc_info.value) == "store documents: disk full"
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.django_db
    @patch("urllib.request.urlopen")
    def test_database_store_round_trip(self, mock_urlopen, settings):
        settings.DOCUMENT_STORE_BACKEND = "apps.documents.storage.database_store"
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_LIST_RESPONSE)

        result = activities.fetch_incidents(FetchIncidentsInput(api_key="key"))

        assert result.ref.backend == "database"
        batch = DocumentBatch.objects.get(ref_key=result.ref.key)
        assert batch.source == "pagerduty"
        assert batch.document_count == 3
        assert [d.id for d in load_documents(result.ref)] == ["PABC123", "PDEF456", "PGHI789"]


class TestFetchIncident:
    @patch("urllib.request.urlopen")
    def test_returns_document_and_found(self, mock_urlopen):
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_GET_RESPONSE)

        result = activities.fetch_incident(
            FetchIncidentInput(api_key="key", incident_id="PABC123")
        )

        assert result.found is True
        assert result.document.id == "PABC123"
        assert result.document.metadata["status"] == "resolved"
        assert "document_type" not in result.document.metadata

    @patch("apps.pagerduty.activities.incident_to_document")
    @patch("urllib.request.urlopen")
    def test_not_found_propagates_as_api_error(self, mock_urlopen, mock_mapper):
        mock_urlopen.side_effect = http_error(404, '{"error":"not found"}')

        with pytest.raises(PagerDutyAPIError) as exc_info:
            activities.fetch_incident(FetchIncidentInput(api_key="key", incident_id="PNOPE"))

        assert exc_info.value.stage == "get incident"
        assert exc_info.value.status_code == 404
        assert "404" in str(exc_info.value)
        assert '{"error":"not found"}' in str(exc_info.value)
        mock_mapper.assert_not_called()

    @patch("urllib.request.urlopen")
    def test_decode_error_is_labelled(self, mock_urlopen):
        mock_urlopen.return_value = mock_urlopen_response("not json")

        with pytest.raises(PagerDutyDecodeError) as exc_info:
            activities.fetch_incident(FetchIncidentInput(api_key="key", incident_id="PABC123"))

        assert str(exc_info.value).startswith("get incident: ")


class TestFetchPostmortems:
    @patch("urllib.request.urlopen")
    def test_stores_only_resolved_incidents(self, mock_urlopen, locmem_store):
        body = make_list_response(
            [
                make_incident("P1", status="triggered"),
                make_incident("P2", status="acknowledged"),
                make_incident("P3", status="resolved"),
                make_incident("P4", status="resolved"),
            ]
        )
        mock_urlopen.return_value = mock_urlopen_response(body)

        result = activities.fetch_postmortems(FetchPostmortemsInput(api_key="key"))

        assert result.count == 2
        stored = locmem_store[result.ref.key]
        assert [d.id for d in stored] == ["P3", "P4"]
        assert all(d.metadata["document_type"] == "postmortem" for d in stored)

    @patch("urllib.request.urlopen")
    def test_sends_since_but_never_until(self, mock_urlopen, locmem_store):
        mock_urlopen.return_value = mock_urlopen_response(SAMPLE_LIST_RESPONSE)

        activities.fetch_postmortems(
            FetchPostmortemsInput(api_key="key", since=datetime(2025, 1, 1, tzinfo=timezone.utc))
        )

        query = _sent_query(mock_urlopen)
        assert query["since"] == ["2025-01-01T00:00:00Z"]
        assert "until" not in query
        assert query["limit"] == ["100"]

    @patch("urllib.request.urlopen")
    def test_list_error_is_labelled(self, mock_urlopen, locmem_store):
        mock_urlopen.side_effect = http_error(500, "internal error")

        with pytest.raises(PagerDutyAPIError) as exc_info:
            activities.fetch_postmortems(FetchPostmortemsInput(api_key="key"))

        assert str(exc_info.value) == (
            "list incidents: pagerduty API error: status=500 body=internal error"
        )


def test_output_to_dict_shapes():
    ref = DataRef(backend="locmem", key="abc")

    assert FetchIncidentsOutput(ref=ref, count=2, total=9).to_dict() == {
        "ref": {"backend": "locmem", "key": "abc"},
        "count": 2,
        "total": 9,
    }
    assert FetchPostmortemsOutput(ref=ref, count=1).to_dict() == {
        "ref": {"backend": "locmem", "key": "abc"},
        "count": 1,
    }
