"""
Django management command to run the license expiry sweep.

The same sweep runs periodically through Celery beat; this command runs it
on demand (e.g. from cron).
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from core.infrastructure.clock import system_clock
from licenses.application.services.expiry_sweeper import ExpirySweeper
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 10


class Command(BaseCommand):
    """Command to expire overdue licenses."""

    help = "Mark active licenses past their expiry date as expired"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the licenses that would expire without changing them",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        sweeper = ExpirySweeper(DjangoLicenseRepository())

        if options["dry_run"]:
            pending = async_to_sync(sweeper.pending)()
            self.stdout.write(f"Found {len(pending)} overdue license(s)")
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license in pending[:PREVIEW_LIMIT]:
                self.stdout.write(
                    f"  - {license.license_key} expired on "
                    f"{system_clock.format_date(license.expires_at)}"
                )
            return

        count = async_to_sync(sweeper.run)()
        self.stdout.write(self.style.SUCCESS(f"Expired {count} license(s)"))
