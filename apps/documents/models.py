"""
Models for persisted document batches.

Used by the database document store backend. Each row holds one batch exactly
as a connector handed it over; the row's ``ref_key`` is what goes back to the
caller inside a ``DataRef``.
"""

import uuid

from django.db import models


class DocumentBatch(models.Model):
    """A batch of normalized documents persisted in one store call."""

    ref_key = models.UUIDField(
        default=uuid.uuid4,
        unique=True,
        editable=False,
        help_text="Key returned to the caller inside the DataRef.",
    )
    source = models.CharField(
        max_length=50,
        blank=True,
        default="",
        db_index=True,
        help_text="Source tag of the documents (e.g., 'pagerduty').",
    )
    document_count = models.PositiveIntegerField(default=0)
    documents = models.JSONField(
        default=list,
        blank=True,
        help_text="Serialized documents in the order they were stored.",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Document batch"
        verbose_name_plural = "Document batches"

    def __str__(self):
        return f"{self.source or 'unknown'} batch {self.ref_key} ({self.document_count} docs)"
