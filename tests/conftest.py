"""
Pytest configuration and shared fixtures.
"""

import uuid
from datetime import date, datetime, timedelta, timezone as dt_timezone
from pathlib import Path

import pytest
from django.conf import settings
from django.utils import timezone

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from admins.infrastructure.models import Admin, AdminApiToken
from admins.infrastructure.repositories.django_admin_permission_repository import (
    DjangoAdminPermissionRepository,
)
from admins.infrastructure.repositories.django_admin_repository import DjangoAdminRepository
from core.domain.events import EventBus
from core.domain.value_objects import DeviceInfo
from core.infrastructure.clock import Clock
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.infrastructure.models import FileAsset, Policy, Product, ProductFile
from products.infrastructure.repositories.django_catalog_repository import (
    DjangoCatalogRepository,
)

# 12:00 on 2025-06-15 in Asia/Seoul
FIXED_NOW = datetime(2025, 6, 15, 3, 0, 0, tzinfo=dt_timezone.utc)


class FakeTime:
    """Settable time source for Clock(now_func=...)."""

    def __init__(self, value: datetime):
        self.value = value

    def __call__(self) -> datetime:
        return self.value

    def advance(self, **kwargs) -> None:
        self.value = self.value + timedelta(**kwargs)


class RecordingEventBus(EventBus):
    """Event bus that only remembers what was published."""

    def __init__(self):
        self.events = []

    async def publish(self, event) -> None:
        self.events.append(event)

    def subscribe(self, event_type, handler) -> None:
        pass

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


@pytest.fixture
def fake_time():
    """Fixture for a settable time source starting at FIXED_NOW."""
    return FakeTime(FIXED_NOW)


@pytest.fixture
def clock(fake_time):
    """Fixture for a Clock pinned to the fake time source."""
    return Clock(time_zone="Asia/Seoul", now_func=fake_time)


@pytest.fixture
def today(clock) -> date:
    return clock.today()


@pytest.fixture
def recording_bus():
    """Fixture for RecordingEventBus."""
    return RecordingEventBus()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def catalog_repository():
    """Fixture for CatalogRepository."""
    return DjangoCatalogRepository()


@pytest.fixture
def admin_repository():
    """Fixture for AdminRepository."""
    return DjangoAdminRepository()


@pytest.fixture
def permission_repository():
    """Fixture for AdminPermissionRepository."""
    return DjangoAdminPermissionRepository()


def make_device_info(seed: str = "a", hostname: str = "") -> DeviceInfo:
    """Device info with every hardware identifier derived from ``seed``."""
    return DeviceInfo(
        client_id=f"client-{seed}",
        cpu_id=f"cpu-{seed}",
        motherboard_sn=f"mb-{seed}",
        mac_address=f"00:11:22:33:44:{seed[:2]}",
        disk_serial=f"disk-{seed}",
        machine_id=f"machine-{seed}",
        hostname=hostname or f"host-{seed}",
        os="Windows",
        os_version="11",
    )


def device_payload(seed: str = "a", hostname: str = "") -> dict:
    """JSON body fragment for the client API."""
    return make_device_info(seed, hostname).to_dict()


def create_admin(username: str, role: str = "admin") -> Admin:
    admin = Admin(username=username, email=f"{username}@example.com", role=role)
    admin.set_password("password")
    admin.save()
    return admin


def create_license(
    owner=None,
    max_devices: int = 2,
    expires_at: date = None,
    status: str = "active",
    product=None,
    policy=None,
    **extra,
) -> LicenseModel:
    """Insert a license row directly."""
    now = timezone.now()
    return LicenseModel.objects.create(
        license_key=extra.pop("license_key", uuid.uuid4().hex[:16].upper()),
        owner=owner,
        max_devices=max_devices,
        expires_at=expires_at or (date.today() + timedelta(days=365)),
        status=status,
        product=product,
        product_name=product.name if product else "",
        policy=policy,
        created_at=now,
        updated_at=now,
        **extra,
    )


@pytest.fixture
def admin_model(db):
    """Fixture for a regular admin saved in database."""
    return create_admin(f"admin-{uuid.uuid4().hex[:8]}")


@pytest.fixture
def other_admin_model(db):
    """Fixture for a second regular admin."""
    return create_admin(f"other-{uuid.uuid4().hex[:8]}")


@pytest.fixture
def super_admin_model(db):
    """Fixture for a super admin saved in database."""
    return create_admin(f"root-{uuid.uuid4().hex[:8]}", role="super_admin")


@pytest.fixture
def actor(admin_model):
    """AdminAccount of the regular admin."""
    return DjangoAdminRepository.to_domain(admin_model)


@pytest.fixture
def other_actor(other_admin_model):
    return DjangoAdminRepository.to_domain(other_admin_model)


@pytest.fixture
def super_actor(super_admin_model):
    """AdminAccount of the super admin."""
    return DjangoAdminRepository.to_domain(super_admin_model)


@pytest.fixture
def product(db, admin_model):
    """Fixture for a Product saved in database."""
    return Product.objects.create(name=f"Product {uuid.uuid4().hex[:6]}", owner=admin_model)


@pytest.fixture
def policy(db, product, admin_model):
    """Fixture for a Policy saved in database."""
    return Policy.objects.create(
        policy_name=f"Policy {uuid.uuid4().hex[:6]}",
        policy_data={"offline_days": 7, "features": ["export"]},
        product=product,
        owner=admin_model,
    )


@pytest.fixture
def stored_file(db):
    """Fixture for a FileAsset with content on disk."""
    root = Path(settings.FILE_STORAGE_ROOT)
    relative = f"{uuid.uuid4().hex}.bin"
    root.mkdir(parents=True, exist_ok=True)
    (root / relative).write_bytes(b"installer-bytes")
    asset = FileAsset.objects.create(
        original_name="setup.exe",
        storage_path=relative,
        mime_type="application/octet-stream",
        file_size=15,
    )
    yield asset
    (root / relative).unlink(missing_ok=True)


@pytest.fixture
def product_file(db, product, stored_file):
    """Fixture for an active ProductFile linking stored_file to product."""
    return ProductFile.objects.create(
        product=product, file=stored_file, label="Installer", sort_order=1
    )


@pytest.fixture
def license_model(db, admin_model, product, policy):
    """Fixture for an active two-device license owned by admin_model."""
    return create_license(owner=admin_model, max_devices=2, product=product, policy=policy)


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


def token_client(admin: Admin):
    """APIClient carrying a fresh admin API token."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.credentials(HTTP_X_ADMIN_TOKEN=AdminApiToken.issue(admin, ttl_days=1).raw_key)
    return client


@pytest.fixture
def admin_client(admin_model):
    """Fixture for an APIClient authenticated as the regular admin."""
    return token_client(admin_model)


@pytest.fixture
def super_client(super_admin_model):
    """Fixture for an APIClient authenticated as the super admin."""
    return token_client(super_admin_model)


@pytest.fixture
def device_info():
    """Factory fixture for DeviceInfo values."""
    return make_device_info


@pytest.fixture
def device_body():
    """Factory fixture for device_info request bodies."""
    return device_payload


@pytest.fixture
def license_factory(db):
    """Factory fixture inserting license rows."""
    return create_license


@pytest.fixture
def admin_factory(db):
    """Factory fixture inserting admins."""
    return create_admin


@pytest.fixture
def client_factory(db):
    """Factory fixture for token-authenticated API clients."""
    return token_client
