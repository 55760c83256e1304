"""Tests for the document store seam."""

from datetime import datetime, timezone

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, TestCase, override_settings

from apps.documents import storage
from apps.documents.dtos import DataRef, Document
from apps.documents.models import DocumentBatch


def _doc(doc_id="P1", **overrides):
    data = {
        "id": doc_id,
        "content": "Disk full\n\n/var at 100%",
        "title": "Disk full",
        "source": "pagerduty",
        "url": f"https://acme.pagerduty.com/incidents/{doc_id}",
        "metadata": {"incident_id": doc_id, "status": "resolved"},
        "updated_at": datetime(2025, 8, 23, 11, 30, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return Document(**data)


class DocumentDTOTests(SimpleTestCase):
    """Tests for Document and DataRef serialization."""

    def test_document_to_dict(self):
        data = _doc().to_dict()

        self.assertEqual(data["id"], "P1")
        self.assertEqual(data["updated_at"], "2025-08-23T11:30:00+00:00")
        self.assertEqual(data["metadata"], {"incident_id": "P1", "status": "resolved"})

    def test_document_from_dict_restores_document(self):
        doc = _doc()
        self.assertEqual(Document.from_dict(doc.to_dict()), doc)

    def test_document_without_timestamp(self):
        data = _doc(updated_at=None).to_dict()

        self.assertIsNone(data["updated_at"])
        self.assertIsNone(Document.from_dict(data).updated_at)

    def test_data_ref_str_and_dict(self):
        ref = DataRef(backend="database", key="abc")

        self.assertEqual(str(ref), "database:abc")
        self.assertEqual(DataRef.from_dict(ref.to_dict()), ref)


class LocmemStoreTests(SimpleTestCase):
    """Tests for the in-memory backend."""

    def setUp(self):
        storage.outbox.clear()

    def tearDown(self):
        storage.outbox.clear()

    @override_settings(DOCUMENT_STORE_BACKEND="apps.documents.storage.locmem_store")
    def test_store_documents_uses_configured_backend(self):
        ref = storage.store_documents([_doc("P1"), _doc("P2")])

        self.assertEqual(ref.backend, "locmem")
        self.assertEqual([d.id for d in storage.outbox[ref.key]], ["P1", "P2"])

    def test_each_call_gets_its_own_ref(self):
        first = storage.locmem_store([_doc()])
        second = storage.locmem_store([_doc()])

        self.assertNotEqual(first.key, second.key)

    def test_load_documents(self):
        ref = storage.locmem_store([_doc("P9")])
        self.assertEqual([d.id for d in storage.load_documents(ref)], ["P9"])

    def test_load_missing_batch(self):
        with self.assertRaises(LookupError):
            storage.load_documents(DataRef(backend="locmem", key="missing"))

    def test_load_unknown_backend(self):
        with self.assertRaises(LookupError):
            storage.load_documents(DataRef(backend="s3", key="x"))


class DocumentStoreConfigTests(SimpleTestCase):
    """Tests for resolving DOCUMENT_STORE_BACKEND."""

    @override_settings(DOCUMENT_STORE_BACKEND="apps.documents.storage.nope")
    def test_bad_path_is_improperly_configured(self):
        with self.assertRaises(ImproperlyConfigured):
            storage.get_document_store()

    @override_settings(DOCUMENT_STORE_BACKEND="apps.documents.storage.DEFAULT_DOCUMENT_STORE_BACKEND")
    def test_non_callable_is_improperly_configured(self):
        with self.assertRaises(ImproperlyConfigured):
            storage.get_document_store()

    @override_settings(DOCUMENT_STORE_BACKEND="apps.documents.storage.database_store")
    def test_database_backend_resolves(self):
        self.assertIs(storage.get_document_store(), storage.database_store)


class DatabaseStoreTests(TestCase):
    """Tests for the database backend."""

    def test_persists_batch(self):
        ref = storage.database_store([_doc("P1"), _doc("P2")])

        self.assertEqual(ref.backend, "database")
        batch = DocumentBatch.objects.get(ref_key=ref.key)
        self.assertEqual(batch.source, "pagerduty")
        self.assertEqual(batch.document_count, 2)
        self.assertEqual(batch.documents[0]["id"], "P1")

    def test_empty_batch(self):
        ref = storage.database_store([])

        batch = DocumentBatch.objects.get(ref_key=ref.key)
        self.assertEqual(batch.source, "")
        self.assertEqual(batch.document_count, 0)
        self.assertEqual(storage.load_documents(ref), [])

    def test_load_documents_round_trip(self):
        docs = [_doc("P1"), _doc("P2", metadata={"incident_id": "P2", "priority": "P1"})]
        ref = storage.database_store(docs)

        self.assertEqual(storage.load_documents(ref), docs)

    def test_load_missing_batch(self):
        with self.assertRaises(LookupError):
            storage.load_documents(
                DataRef(backend="database", key="00000000-0000-0000-0000-000000000000")
            )

    def test_str(self):
        ref = storage.database_store([_doc()])
        batch = DocumentBatch.objects.get(ref_key=ref.key)

        self.assertIn("pagerduty batch", str(batch))
        self.assertIn("(1 docs)", str(batch))


def test_admin_registers_document_batch():
    from django.contrib import admin

    assert DocumentBatch in admin.site._registry
