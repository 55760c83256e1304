"""Document store seam.

Connectors persist batches through ``store_documents``; which backend does the
work is chosen by ``settings.DOCUMENT_STORE_BACKEND`` (a dotted path to a
callable taking a list of documents and returning a ``DataRef``).

Shipped backends:
- ``apps.documents.storage.database_store`` (default): one ``DocumentBatch`` row per call.
- ``apps.documents.storage.locmem_store``: keeps batches in ``outbox`` for tests
  and local runs, the same way Django's locmem email backend does.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from apps.documents.dtos import DataRef, Document

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_STORE_BACKEND = "apps.documents.storage.database_store"

DocumentStore = Callable[[Sequence[Document]], DataRef]

# Batches written by locmem_store, keyed by DataRef key.
outbox: dict[str, list[Document]] = {}


def _batch_source(documents: Sequence[Document]) -> str:
    return documents[0].source if documents else ""


def database_store(documents: Sequence[Document]) -> DataRef:
    """Persist a batch as a ``DocumentBatch`` row."""
    from apps.documents.models import DocumentBatch

    batch = DocumentBatch.objects.create(
        source=_batch_source(documents),
        document_count=len(documents),
        documents=[doc.to_dict() for doc in documents],
    )
    logger.debug("database_store: stored %d documents as %s", len(documents), batch.ref_key)
    return DataRef(backend="database", key=str(batch.ref_key))


def locmem_store(documents: Sequence[Document]) -> DataRef:
    """Keep a batch in the module-level ``outbox``."""
    key = str(uuid.uuid4())
    outbox[key] = list(documents)
    logger.debug("locmem_store: stored %d documents as %s", len(documents), key)
    return DataRef(backend="locmem", key=key)


def get_document_store() -> DocumentStore:
    """Return the document store callable configured in settings."""
    from django.conf import settings

    path = getattr(settings, "DOCUMENT_STORE_BACKEND", DEFAULT_DOCUMENT_STORE_BACKEND)
    try:
        store = import_string(path)
    except ImportError as e:
        raise ImproperlyConfigured(f"Could not import DOCUMENT_STORE_BACKEND '{path}': {e}") from e
    if not callable(store):
        raise ImproperlyConfigured(f"DOCUMENT_STORE_BACKEND '{path}' is not callable")
    return store


def store_documents(documents: Sequence[Document]) -> DataRef:
    """Persist a batch of documents with the configured backend."""
    return get_document_store()(list(documents))


def load_documents(ref: DataRef) -> list[Document]:
    """Read a stored batch back.

    Only the shipped backends are readable here; custom backends own their own
    read path.

    Raises:
        LookupError: If the batch does not exist or the backend is unknown.
    """
    if ref.backend == "locmem":
        if ref.key not in outbox:
            raise LookupError(f"No locmem batch for {ref}")
        return list(outbox[ref.key])

    if ref.backend == "database":
        from apps.documents.models import DocumentBatch

        batch = DocumentBatch.objects.filter(ref_key=ref.key).first()
        if batch is None:
            raise LookupError(f"No document batch for {ref}")
        return [Document.from_dict(item) for item in batch.documents]

    raise LookupError(f"Unknown document store backend: {ref.backend}")
