"""Shared test fixtures for the PagerDuty app."""

import pytest

from apps.documents import storage


@pytest.fixture
def locmem_store(settings):
    """Route document storage to the in-memory backend."""
    settings.DOCUMENT_STORE_BACKEND = "apps.documents.storage.locmem_store"
    storage.outbox.clear()
    yield storage.outbox
    storage.outbox.clear()
