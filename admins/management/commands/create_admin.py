"""
Django management command to create an admin account and API token.
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from admins.infrastructure.models import Admin, AdminApiToken


class Command(BaseCommand):
    """Command to create an admin and print a fresh API token."""

    help = "Create an admin account and print an API token for it"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("username")
        parser.add_argument("--email", default="")
        parser.add_argument("--password", default=None)
        parser.add_argument(
            "--super",
            action="store_true",
            dest="super_admin",
            help="Create a super admin",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        username = options["username"].strip()
        if Admin.objects.filter(username=username).exists():
            raise CommandError(f"Admin '{username}' already exists")

        with transaction.atomic():
            admin = Admin(
                username=username,
                email=options["email"],
                role="super_admin" if options["super_admin"] else "admin",
            )
            admin.set_password(options["password"])
            admin.save()
            token = AdminApiToken.issue(admin, ttl_days=settings.ADMIN_TOKEN_TTL_DAYS)

        self.stdout.write(self.style.SUCCESS(f"Created {admin.role} '{admin.username}' ({admin.id})"))
        self.stdout.write(f"API token: {token.raw_key}")
