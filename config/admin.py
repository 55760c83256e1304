"""Custom admin site for the connector console."""

from django.contrib.admin import AdminSite


class ConnectorAdminSite(AdminSite):
    site_header = "PagerDuty Connector"
    site_title = "PagerDuty Connector"
    index_title = "Stored documents"
