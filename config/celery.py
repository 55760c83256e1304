"""Celery application bootstrap for this Django project.

Workers run the connector activities registered in apps/*/tasks.py under their
stable names (e.g. ``pagerduty.FetchIncidents``).

Run workers with something like:
- celery -A config worker -l info

Broker/result backend are configured via Django settings (see config/settings.py).
"""

from __future__ import annotations

import os

from celery import Celery

from config.env import load_env

load_env()

# Ensure Django settings are loaded when Celery starts.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("pagerduty-connector")

# Load Celery config from Django settings using CELERY_* namespace.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Autodiscover tasks.py in Django apps.
app.autodiscover_tasks()
