"""
Django management command to purge long-deactivated devices.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from activations.domain.services import DeviceSlotManager
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.domain.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to hard-delete deactivated device activations."""

    help = "Delete devices deactivated at least --days days ago"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--days",
            type=int,
            default=90,
            help="Age threshold in days (default: 90)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        manager = DeviceSlotManager(DjangoActivationRepository())
        try:
            removed = async_to_sync(manager.cleanup)(options["days"])
        except InvalidInputError as e:
            raise CommandError(e.message) from e
        self.stdout.write(self.style.SUCCESS(f"Deleted {removed} inactive device(s)"))
