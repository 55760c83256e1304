"""
Management command to list the registered PagerDuty activities.

Usage:
    python manage.py list_activities
    python manage.py list_activities --verbose
"""

import dataclasses

from django.core.management.base import BaseCommand

from apps.pagerduty.provider import get_provider


class Command(BaseCommand):
    help = "List registered activities and their input fields"

    def add_arguments(self, parser):
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show input fields for each activity",
        )

    def handle(self, *args, **options):
        verbose = options.get("verbose", False)
        provider = get_provider()

        self.stdout.write(self.style.SUCCESS(f"{provider.name} {provider.version}"))
        self.stdout.write("-" * 60)

        for activity in provider.activities:
            self.stdout.write(f"\n{self.style.WARNING(activity.name)}")
            self.stdout.write(f"  {activity.description}")

            if verbose:
                self.stdout.write("  Input:")
                for f in dataclasses.fields(activity.input_type):
                    self.stdout.write(f"    - {f.name}")

        self.stdout.write("\n" + "-" * 60)
