"""Admin configuration for documents models."""

from django.contrib import admin
from django.db import models as db_models
from django_json_widget.widgets import JSONEditorWidget

from apps.documents.models import DocumentBatch


@admin.register(DocumentBatch)
class DocumentBatchAdmin(admin.ModelAdmin):
    """Read-only admin for persisted document batches."""

    list_display = [
        "ref_key",
        "source",
        "document_count",
        "created_at",
    ]
    formfield_overrides = {db_models.JSONField: {"widget": JSONEditorWidget}}
    list_filter = ["source"]
    search_fields = ["ref_key"]
    readonly_fields = ["ref_key", "source", "document_count", "created_at"]

    fieldsets = [
        (
            None,
            {
                "fields": ["ref_key", "source", "document_count", "created_at"],
            },
        ),
        (
            "Documents",
            {
                "fields": ["documents"],
                "classes": ["collapse"],
            },
        ),
    ]

    def has_add_permission(self, request):
        return False
