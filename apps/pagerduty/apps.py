"""Django app configuration for the PagerDuty connector app."""

from django.apps import AppConfig


class PagerDutyConfig(AppConfig):
    """Configuration for the PagerDuty connector app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.pagerduty"
    verbose_name = "PagerDuty Connector"
