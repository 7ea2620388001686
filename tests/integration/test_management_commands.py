"""
Integration tests for management commands.
"""

from datetime import date, timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from activations.infrastructure.models import DeviceActivation
from admins.infrastructure.models import Admin, AdminApiToken


def run(*args, **options) -> str:
    out = StringIO()
    call_command(*args, stdout=out, **options)
    return out.getvalue()


@pytest.mark.django_db
@pytest.mark.integration
class TestCreateAdminCommand:
    """Tests for create_admin."""

    def test_creates_admin_and_token(self):
        output = run("create_admin", "ops", "--email", "ops@example.com", "--super")

        admin = Admin.objects.get(username="ops")
        assert admin.role == "super_admin"
        assert "API token:" in output
        raw_key = output.split("API token:")[1].strip()
        token = AdminApiToken.objects.get(admin=admin)
        assert token.key_hash == AdminApiToken.hash_key(raw_key)

    def test_duplicate_username(self):
        run("create_admin", "ops")

        with pytest.raises(CommandError):
            run("create_admin", "ops")


@pytest.mark.django_db
@pytest.mark.integration
class TestExpireLicensesCommand:
    """Tests for expire_licenses."""

    def test_dry_run_changes_nothing(self, license_factory):
        overdue = license_factory(expires_at=date(2000, 1, 1))

        output = run("expire_licenses", "--dry-run")

        assert "DRY RUN - No changes will be made" in output
        assert overdue.license_key in output
        overdue.refresh_from_db()
        assert overdue.status == "active"

    def test_expires_overdue(self, license_factory):
        overdue = license_factory(expires_at=date(2000, 1, 1))
        license_factory(expires_at=date.today() + timedelta(days=10))

        output = run("expire_licenses")

        assert "Expired 1 license(s)" in output
        overdue.refresh_from_db()
        assert overdue.status == "expired"


@pytest.mark.django_db
@pytest.mark.integration
class TestCleanupDevicesCommand:
    """Tests for cleanup_devices."""

    def test_deletes_old_deactivated_devices(self, license_model):
        now = timezone.now()
        DeviceActivation.objects.create(
            license=license_model,
            device_fingerprint="a" * 64,
            status="deactivated",
            activated_at=now - timedelta(days=60),
            deactivated_at=now - timedelta(days=31),
        )

        output = run("cleanup_devices", "--days", "30")

        assert "Deleted 1 inactive device(s)" in output
        assert DeviceActivation.objects.count() == 0

    def test_negative_days(self):
        with pytest.raises(CommandError):
            run("cleanup_devices", days=-1)
