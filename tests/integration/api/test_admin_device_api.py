"""
Integration tests for the admin device API.
"""

import uuid
from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from activations.infrastructure.models import DeviceActivation
from admins.infrastructure.models import AdminResourceScope
from core.infrastructure.models import AuditLog


def add_device(license, seed: str, status: str = "active", deactivated_days_ago: int = None):
    now = timezone.now()
    return DeviceActivation.objects.create(
        license=license,
        device_fingerprint=seed * 64,
        status=status,
        activated_at=now - timedelta(days=400),
        deactivated_at=(
            now - timedelta(days=deactivated_days_ago) if deactivated_days_ago is not None else None
        ),
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceAdminAPI:
    """Integration tests for deactivate, reactivate and delete."""

    def test_deactivate(self, admin_client, license_model):
        device = add_device(license_model, "a")

        response = admin_client.post(
            reverse("admin_api:deactivate-device", kwargs={"device_id": device.id})
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "deactivated"
        assert data["deactivated_at"] is not None
        assert AuditLog.objects.filter(action="deactivate_device", entity_id=str(device.id)).exists()

    def test_reactivate(self, admin_client, license_model):
        device = add_device(license_model, "a", status="deactivated", deactivated_days_ago=1)

        response = admin_client.post(
            reverse("admin_api:reactivate-device", kwargs={"device_id": device.id})
        )

        assert response.status_code == 200
        assert response.json()["status"] == "active"
        device.refresh_from_db()
        assert device.deactivated_at is None

    def test_reactivate_when_full(self, admin_client, license_model):
        add_device(license_model, "a")
        add_device(license_model, "b")
        parked = add_device(license_model, "c", status="deactivated", deactivated_days_ago=1)

        response = admin_client.post(
            reverse("admin_api:reactivate-device", kwargs={"device_id": parked.id})
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DEVICE_LIMIT_REACHED"

    def test_reactivate_active_device(self, admin_client, license_model):
        device = add_device(license_model, "a")

        response = admin_client.post(
            reverse("admin_api:reactivate-device", kwargs={"device_id": device.id})
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DEVICE_ALREADY_ACTIVE"

    def test_delete(self, admin_client, license_model):
        device = add_device(license_model, "a")

        response = admin_client.delete(
            reverse("admin_api:device-detail", kwargs={"device_id": device.id})
        )

        assert response.status_code == 204
        assert not DeviceActivation.objects.filter(id=device.id).exists()

    def test_unknown_device(self, admin_client):
        response = admin_client.post(
            reverse("admin_api:deactivate-device", kwargs={"device_id": uuid.uuid4()})
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DEVICE_NOT_FOUND"


@pytest.mark.django_db
@pytest.mark.integration
class TestCleanupDevicesAPI:
    """Integration tests for purging deactivated devices."""

    def test_requires_super_admin(self, admin_client):
        response = admin_client.post(reverse("admin_api:cleanup-devices"), {"days": 30}, format="json")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"

    def test_cleanup(self, super_client, license_model):
        old = add_device(license_model, "a", status="deactivated", deactivated_days_ago=40)
        recent = add_device(license_model, "b", status="deactivated", deactivated_days_ago=5)
        active = add_device(license_model, "c")

        response = super_client.post(
            reverse("admin_api:cleanup-devices"), {"days": 30}, format="json"
        )

        assert response.status_code == 200
        assert response.json() == {"deleted": 1, "days": 30}
        remaining = set(DeviceActivation.objects.values_list("id", flat=True))
        assert remaining == {recent.id, active.id}
        assert old.id not in remaining

    def test_default_days(self, super_client, license_model):
        add_device(license_model, "a", status="deactivated", deactivated_days_ago=100)

        response = super_client.post(reverse("admin_api:cleanup-devices"), {}, format="json")

        assert response.json() == {"deleted": 1, "days": 90}

    def test_negative_days(self, super_client):
        response = super_client.post(
            reverse("admin_api:cleanup-devices"), {"days": -1}, format="json"
        )

        assert response.status_code == 400


def log_entry(device, action: str, minutes_ago: int):
    entry = AuditLog.objects.create(
        entity_type="device",
        entity_id=str(device.id),
        action=action,
        details={"license_id": str(device.license_id)},
    )
    AuditLog.objects.filter(id=entry.id).update(
        created_at=timezone.now() - timedelta(minutes=minutes_ago)
    )
    return entry


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceLogsAPI:
    """Integration tests for reading device activity."""

    def test_records_admin_changes(self, admin_client, admin_model, license_model):
        device = add_device(license_model, "a")
        admin_client.post(reverse("admin_api:deactivate-device", kwargs={"device_id": device.id}))

        response = admin_client.get(
            reverse("admin_api:device-logs", kwargs={"device_id": device.id})
        )

        assert response.status_code == 200
        [entry] = response.json()
        assert entry["action"] == "deactivate_device"
        assert entry["entity_id"] == str(device.id)
        assert entry["actor"] == str(admin_model.id)
        assert entry["details"]["license_id"] == str(license_model.id)

    def test_newest_first_and_only_this_device(self, admin_client, license_model):
        device = add_device(license_model, "a")
        other = add_device(license_model, "b")
        log_entry(device, "activate_device", minutes_ago=30)
        log_entry(device, "deactivate_device", minutes_ago=10)
        log_entry(other, "activate_device", minutes_ago=5)

        response = admin_client.get(
            reverse("admin_api:device-logs", kwargs={"device_id": device.id})
        )

        assert [entry["action"] for entry in response.json()] == [
            "deactivate_device",
            "activate_device",
        ]

    def test_at_most_fifty_entries(self, admin_client, license_model):
        device = add_device(license_model, "a")
        for minutes in range(55):
            log_entry(device, "activate_device", minutes_ago=minutes)

        response = admin_client.get(
            reverse("admin_api:device-logs", kwargs={"device_id": device.id})
        )

        assert len(response.json()) == 50

    def test_outside_scope(self, admin_client, admin_model, other_admin_model, license_factory):
        theirs = license_factory(owner=other_admin_model)
        device = add_device(theirs, "a")
        AdminResourceScope.objects.create(
            admin=admin_model, resource_type="licenses", mode="own", selected_ids=[]
        )

        response = admin_client.get(
            reverse("admin_api:device-logs", kwargs={"device_id": device.id})
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "RESOURCE_ACCESS_DENIED"

    def test_unknown_device(self, admin_client):
        response = admin_client.get(
            reverse("admin_api:device-logs", kwargs={"device_id": uuid.uuid4()})
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DEVICE_NOT_FOUND"
