"""Errors raised by the PagerDuty client and activities.

Every error can carry a ``stage`` label naming the activity step that failed
("list incidents", "get incident", "store documents"). The label prefixes the
message but never changes the error's class.
"""

from __future__ import annotations


class PagerDutyError(Exception):
    """Base class for connector errors."""

    stage: str | None = None

    def with_stage(self, stage: str) -> PagerDutyError:
        self.stage = stage
        return self

    def describe(self) -> str:
        return super().__str__()

    def __str__(self) -> str:
        message = self.describe()
        if self.stage:
            return f"{self.stage}: {message}"
        return message


class PagerDutyTransportError(PagerDutyError):
    """The request could not be sent or completed (network failure, timeout)."""


class PagerDutyAPIError(PagerDutyError):
    """PagerDuty answered with a non-200 status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(status_code, body)

    def describe(self) -> str:
        return f"pagerduty API error: status={self.status_code} body={self.body}"


class PagerDutyDecodeError(PagerDutyError):
    """The response body did not decode into the expected shape."""


class StoreDocumentsError(PagerDutyError):
    """The document store failed to persist a batch."""
