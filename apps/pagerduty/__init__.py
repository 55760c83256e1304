"""
PagerDuty connector app.

Pulls incidents from the PagerDuty REST API and turns them into normalized
documents for the document store.

Flow for every activity:
HTTP response → Incident → Document → document store → DataRef returned to caller

Activities are registered under stable names (``pagerduty.FetchIncidents``,
``pagerduty.FetchIncident``, ``pagerduty.FetchPostmortems``) so Celery workers
and existing workflow definitions can call them by name.
"""

default_app_config = "apps.pagerduty.apps.PagerDutyConfig"
