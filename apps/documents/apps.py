"""Django app configuration for the documents app."""

from django.apps import AppConfig


class DocumentsConfig(AppConfig):
    """Configuration for the normalized documents app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.documents"
    verbose_name = "Documents"
