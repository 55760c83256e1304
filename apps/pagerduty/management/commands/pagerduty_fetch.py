"""
Management command to run a PagerDuty activity by hand.

Usage:
    python manage.py pagerduty_fetch incidents --since 2025-01-01T00:00:00Z --limit 50
    python manage.py pagerduty_fetch incident --id PABC123 --json
    python manage.py pagerduty_fetch postmortems --since 2025-01-01T00:00:00Z
    python manage.py pagerduty_fetch incidents --async

The API key defaults to the PAGERDUTY_API_KEY setting.
"""

import json

from celery import current_app
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.pagerduty.exceptions import PagerDutyError
from apps.pagerduty.provider import (
    FETCH_INCIDENT,
    FETCH_INCIDENTS,
    FETCH_POSTMORTEMS,
    run_activity,
)

ACTIVITY_CHOICES = {
    "incidents": FETCH_INCIDENTS,
    "incident": FETCH_INCIDENT,
    "postmortems": FETCH_POSTMORTEMS,
}


class Command(BaseCommand):
    help = "Fetch PagerDuty incidents or postmortems and store them as documents"

    def add_arguments(self, parser):
        parser.add_argument(
            "activity",
            choices=list(ACTIVITY_CHOICES.keys()),
            help="What to fetch.",
        )
        parser.add_argument(
            "--api-key",
            type=str,
            help="PagerDuty REST API key (default: PAGERDUTY_API_KEY setting).",
        )
        parser.add_argument(
            "--id",
            type=str,
            dest="incident_id",
            help="Incident ID (incident only).",
        )
        parser.add_argument(
            "--since",
            type=str,
            help="RFC 3339 lower bound on incident creation time.",
        )
        parser.add_argument(
            "--until",
            type=str,
            help="RFC 3339 upper bound on incident creation time (incidents only).",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=0,
            help="Page size (default: 100).",
        )
        parser.add_argument(
            "--async",
            action="store_true",
            dest="run_async",
            help="Dispatch the activity to a Celery worker instead of running it inline.",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            dest="json_output",
            help="Output result as JSON.",
        )

    def handle(self, *args, **options):
        activity_name = ACTIVITY_CHOICES[options["activity"]]
        payload = self._build_payload(options)

        if options["run_async"]:
            async_result = current_app.send_task(activity_name, args=[payload])
            self.stdout.write(
                self.style.SUCCESS(f"Queued {activity_name} (task id: {async_result.id})")
            )
            return

        try:
            result = run_activity(activity_name, payload)
        except (PagerDutyError, ValueError) as e:
            raise CommandError(f"{activity_name} failed: {e}") from e

        if options["json_output"]:
            self.stdout.write(json.dumps(result, indent=2))
        else:
            self._output_text(activity_name, result)

    def _build_payload(self, options):
        api_key = options.get("api_key") or getattr(settings, "PAGERDUTY_API_KEY", "")
        if not api_key:
            raise CommandError("No API key: pass --api-key or set PAGERDUTY_API_KEY.")

        activity = options["activity"]
        if activity == "incident":
            if not options.get("incident_id"):
                raise CommandError("--id is required for 'incident'.")
            return {"api_key": api_key, "incident_id": options["incident_id"]}

        payload = {
            "api_key": api_key,
            "since": options.get("since"),
            "limit": options.get("limit") or 0,
        }
        if activity == "incidents":
            payload["until"] = options.get("until")
        elif options.get("until"):
            raise CommandError("--until is only supported for 'incidents'.")
        return payload

    def _output_text(self, activity_name, result):
        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS(f"[OK] {activity_name}"))

        if "document" in result:
            document = result["document"]
            self.stdout.write(f"  {document['id']}: {document['title']}")
            self.stdout.write(f"  URL: {document['url']}")
            for key, value in document["metadata"].items():
                self.stdout.write(f"    {key}: {value}")
        else:
            ref = result["ref"]
            self.stdout.write(f"  Stored: {result['count']} documents")
            if "total" in result:
                self.stdout.write(f"  Total on server: {result['total']}")
            self.stdout.write(f"  Ref: {ref['backend']}:{ref['key']}")

        self.stdout.write("")
