"""Custom Django admin app configuration."""

from django.contrib.admin.apps import AdminConfig


class ConnectorAdminConfig(AdminConfig):
    default_site = "config.admin.ConnectorAdminSite"
