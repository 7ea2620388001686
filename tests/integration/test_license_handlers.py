"""
Integration tests for license administration handlers.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import sync_to_async

from activations.domain.fingerprint import generate_device_fingerprint
from activations.domain.services import DeviceSlotManager
from admins.domain.scope import AdminResourcePermissions, normalize_scope
from core.domain.exceptions import (
    InvalidDateError,
    InvalidInputError,
    LicenseNotFoundError,
    MaxDevicesBelowActiveCountError,
    PolicyNotFoundError,
    ProductNotFoundError,
    ResourceAccessDeniedError,
)
from core.domain.value_objects import LicenseStatus
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.create_license_handler import CreateLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RevokeLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    GetLicenseHandler,
    ListLicensesHandler,
)
from licenses.application.queries.get_license import GetLicenseQuery
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.domain.events import (
    LicenseCreated,
    LicenseRevoked,
    LicenseStatusChanged,
    LicenseUpdated,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository


@pytest.fixture
def create_handler(license_repository, catalog_repository, clock, recording_bus):
    return CreateLicenseHandler(license_repository, catalog_repository, clock, recording_bus)


@pytest.fixture
def update_handler(license_repository, catalog_repository, clock, recording_bus):
    return UpdateLicenseHandler(
        license_repository,
        catalog_repository,
        clock=clock,
        bus=recording_bus,
    )


@pytest.fixture
def revoke_handler(license_repository, clock, recording_bus):
    return RevokeLicenseHandler(license_repository, clock=clock, bus=recording_bus)


async def restrict(permission_repository, admin_id, mode, selected_ids=None):
    permissions = AdminResourcePermissions(licenses=normalize_scope(mode, selected_ids))
    await permission_repository.replace_permissions(admin_id, permissions)


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestCreateLicenseHandler:
    """Tests for CreateLicenseHandler."""

    async def test_create(self, create_handler, actor, product, policy, recording_bus, clock):
        license = await create_handler.handle(
            CreateLicenseCommand(
                actor=actor,
                expires_at="2026-01-31",
                max_devices=3,
                product_id=product.id,
                policy_id=policy.id,
                customer_name="Kim",
                customer_email="kim@example.com",
            )
        )

        assert license.status == LicenseStatus.ACTIVE
        assert license.max_devices == 3
        assert license.product_name == product.name
        assert license.owner_id == actor.id
        assert license.created_at == clock.now()
        assert str(license.expires_at) == "2026-01-31"

        events = recording_bus.of_type(LicenseCreated)
        assert len(events) == 1
        assert events[0].license_key == license.license_key
        assert events[0].actor_id == str(actor.id)

    async def test_create_with_rfc3339_expiry(self, create_handler, actor):
        license = await create_handler.handle(
            CreateLicenseCommand(actor=actor, expires_at="2026-01-31T20:00:00Z")
        )

        assert str(license.expires_at) == "2026-02-01"

    async def test_invalid_date(self, create_handler, actor):
        with pytest.raises(InvalidDateError):
            await create_handler.handle(CreateLicenseCommand(actor=actor, expires_at="soon"))

    async def test_zero_devices(self, create_handler, actor):
        with pytest.raises(InvalidInputError):
            await create_handler.handle(
                CreateLicenseCommand(actor=actor, expires_at="2026-01-31", max_devices=0)
            )

    async def test_unknown_product_and_policy(self, create_handler, actor):
        with pytest.raises(ProductNotFoundError):
            await create_handler.handle(
                CreateLicenseCommand(actor=actor, expires_at="2026-01-31", product_id=uuid.uuid4())
            )
        with pytest.raises(PolicyNotFoundError):
            await create_handler.handle(
                CreateLicenseCommand(actor=actor, expires_at="2026-01-31", policy_id=uuid.uuid4())
            )

    async def test_key_collision_is_retried(
        self, create_handler, actor, license_factory, monkeypatch
    ):
        taken = await sync_to_async(license_factory)(license_key="AAAA-AAAA-AAAA-AAAA")
        keys = iter([taken.license_key, "BBBB-BBBB-BBBB-BBBB"])
        monkeypatch.setattr(
            "licenses.application.handlers.create_license_handler.generate_license_key",
            lambda: next(keys),
        )

        license = await create_handler.handle(
            CreateLicenseCommand(actor=actor, expires_at="2026-01-31")
        )

        assert license.license_key == "BBBB-BBBB-BBBB-BBBB"


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestUpdateLicenseHandler:
    """Tests for UpdateLicenseHandler."""

    async def test_only_provided_fields_change(self, update_handler, actor, license_model):
        license = await update_handler.handle(
            UpdateLicenseCommand(actor=actor, license_id=license_model.id, notes="")
        )

        assert license.notes == ""
        assert license.customer_name == license_model.customer_name
        assert license.max_devices == license_model.max_devices
        assert license.expires_at == license_model.expires_at

    async def test_expiry_into_past_expires(
        self, update_handler, actor, license_model, today, recording_bus
    ):
        yesterday = today - timedelta(days=1)

        license = await update_handler.handle(
            UpdateLicenseCommand(
                actor=actor, license_id=license_model.id, expires_at=yesterday.isoformat()
            )
        )

        assert license.status == LicenseStatus.EXPIRED
        changed = recording_bus.of_type(LicenseStatusChanged)
        assert [(e.old_status, e.new_status) for e in changed] == [("active", "expired")]
        assert recording_bus.of_type(LicenseUpdated)[0].changes == {
            "expires_at": yesterday.isoformat()
        }

    async def test_extending_expired_license_reactivates(
        self, update_handler, actor, license_factory, admin_model, today
    ):
        expired = await sync_to_async(license_factory)(
            owner=admin_model, status="expired", expires_at=today - timedelta(days=3)
        )

        license = await update_handler.handle(
            UpdateLicenseCommand(
                actor=actor, license_id=expired.id, expires_at=today.isoformat()
            )
        )

        assert license.status == LicenseStatus.ACTIVE

    async def test_extending_revoked_license_keeps_revoked(
        self, update_handler, actor, license_factory, admin_model, today
    ):
        revoked = await sync_to_async(license_factory)(owner=admin_model, status="revoked")

        license = await update_handler.handle(
            UpdateLicenseCommand(
                actor=actor,
                license_id=revoked.id,
                expires_at=(today + timedelta(days=30)).isoformat(),
            )
        )

        assert license.status == LicenseStatus.REVOKED

    async def test_max_devices_below_active_count(
        self, update_handler, actor, license_model, activation_repository, clock
    ):
        from activations.domain.activation import DeviceActivation

        now = clock.now()
        for seed in ("a", "b"):
            await activation_repository.save(
                DeviceActivation.create(license_model.id, seed * 64, now)
            )

        with pytest.raises(MaxDevicesBelowActiveCountError):
            await update_handler.handle(
                UpdateLicenseCommand(actor=actor, license_id=license_model.id, max_devices=1)
            )

        license = await update_handler.handle(
            UpdateLicenseCommand(actor=actor, license_id=license_model.id, max_devices=2)
        )
        assert license.max_devices == 2

    async def test_unknown_policy(self, update_handler, actor, license_model):
        with pytest.raises(PolicyNotFoundError):
            await update_handler.handle(
                UpdateLicenseCommand(actor=actor, license_id=license_model.id, policy_id=uuid.uuid4())
            )

    async def test_clear_policy(self, update_handler, actor, license_model):
        license = await update_handler.handle(
            UpdateLicenseCommand(actor=actor, license_id=license_model.id, policy_id=None)
        )

        assert license.policy_id is None

    async def test_out_of_scope(
        self, update_handler, actor, license_model, permission_repository
    ):
        await restrict(permission_repository, actor.id, "custom", [uuid.uuid4()])

        with pytest.raises(ResourceAccessDeniedError):
            await update_handler.handle(
                UpdateLicenseCommand(actor=actor, license_id=license_model.id, notes="x")
            )

    async def test_missing_license(self, update_handler, actor):
        with pytest.raises(LicenseNotFoundError):
            await update_handler.handle(
                UpdateLicenseCommand(actor=actor, license_id=uuid.uuid4(), notes="x")
            )


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestRevokeLicenseHandler:
    """Tests for RevokeLicenseHandler."""

    async def test_revoke_is_idempotent(
        self, revoke_handler, actor, license_model, recording_bus
    ):
        first = await revoke_handler.handle(RevokeLicenseCommand(actor=actor, license_id=license_model.id))
        second = await revoke_handler.handle(RevokeLicenseCommand(actor=actor, license_id=license_model.id))

        assert first.status == LicenseStatus.REVOKED
        assert second.status == LicenseStatus.REVOKED
        assert len(recording_bus.of_type(LicenseRevoked)) == 1

    async def test_super_admin_ignores_stored_scope(
        self, revoke_handler, super_actor, license_model, permission_repository
    ):
        await restrict(permission_repository, super_actor.id, "none")

        license = await revoke_handler.handle(
            RevokeLicenseCommand(actor=super_actor, license_id=license_model.id)
        )

        assert license.status == LicenseStatus.REVOKED


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestLicenseQueries:
    """Tests for license listing and detail reads."""

    @pytest.fixture
    def licenses(self, admin_model, other_admin_model, license_factory):
        return {
            "mine": license_factory(owner=admin_model, customer_name="Alice Corp"),
            "theirs": license_factory(owner=other_admin_model, customer_name="Bob Ltd"),
            "revoked": license_factory(owner=admin_model, status="revoked"),
        }

    async def test_list_by_scope(
        self, licenses, actor, license_repository, activation_repository, permission_repository
    ):
        handler = ListLicensesHandler(license_repository, activation_repository)

        everything = await handler.handle(ListLicensesQuery(actor=actor))
        await restrict(permission_repository, actor.id, "own")
        own = await handler.handle(ListLicensesQuery(actor=actor))
        await restrict(permission_repository, actor.id, "none")
        nothing = await handler.handle(ListLicensesQuery(actor=actor))

        assert {dto.id for dto in everything} == {lic.id for lic in licenses.values()}
        assert {dto.id for dto in own} == {licenses["mine"].id, licenses["revoked"].id}
        assert nothing == []

    async def test_list_filters(self, licenses, actor, license_repository, activation_repository):
        handler = ListLicensesHandler(license_repository, activation_repository)

        revoked = await handler.handle(ListLicensesQuery(actor=actor, status="REVOKED"))
        searched = await handler.handle(ListLicensesQuery(actor=actor, search="alice"))
        unknown_status = await handler.handle(ListLicensesQuery(actor=actor, status="bogus"))

        assert [dto.id for dto in revoked] == [licenses["revoked"].id]
        assert [dto.id for dto in searched] == [licenses["mine"].id]
        assert len(unknown_status) == 3

    async def test_get_outside_scope(
        self, licenses, actor, license_repository, activation_repository, permission_repository
    ):
        handler = GetLicenseHandler(license_repository, activation_repository)
        await restrict(permission_repository, actor.id, "own")

        mine = await handler.handle(GetLicenseQuery(actor=actor, license_id=licenses["mine"].id))
        assert mine.active_devices == 0

        with pytest.raises(ResourceAccessDeniedError):
            await handler.handle(GetLicenseQuery(actor=actor, license_id=licenses["theirs"].id))



class HookedLicenseRepository(DjangoLicenseRepository):
    """Runs ``after_load`` once, right after find_by_id returns."""

    def __init__(self, after_load):
        self.after_load = after_load

    async def find_by_id(self, license_id):
        found = await super().find_by_id(license_id)
        hook, self.after_load = self.after_load, None
        if hook is not None:
            await hook(found)
        return found


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestUpdateMaxDevicesUnderActivation:
    """An activation landing between the scope check and the write."""

    @pytest.fixture
    def slot_manager(self, activation_repository, clock):
        return DeviceSlotManager(activation_repository, clock)

    @pytest.fixture
    def activate(self, slot_manager, device_info):
        async def _activate(license, seed):
            info = device_info(seed)
            return await slot_manager.activate(license, generate_device_fingerprint(info), info)

        return _activate

    def handler_with(self, after_load, catalog_repository, clock, recording_bus):
        return UpdateLicenseHandler(
            HookedLicenseRepository(after_load), catalog_repository, clock=clock, bus=recording_bus
        )

    async def test_lower_below_new_count_is_refused(
        self,
        actor,
        admin_model,
        license_factory,
        license_repository,
        activation_repository,
        catalog_repository,
        clock,
        recording_bus,
        activate,
    ):
        license_model = await sync_to_async(license_factory)(owner=admin_model, max_devices=3)
        await activate(await license_repository.find_by_id(license_model.id), "a")

        async def activate_second(found):
            await activate(found, "b")

        handler = self.handler_with(activate_second, catalog_repository, clock, recording_bus)

        with pytest.raises(MaxDevicesBelowActiveCountError) as excinfo:
            await handler.handle(
                UpdateLicenseCommand(actor=actor, license_id=license_model.id, max_devices=1)
            )

        assert excinfo.value.active_count == 2
        stored = await license_repository.find_by_id(license_model.id)
        assert stored.max_devices == 3
        assert await activation_repository.count_active(license_model.id) == 2
        assert recording_bus.of_type(LicenseUpdated) == []

    async def test_lower_to_new_count_succeeds(
        self,
        actor,
        admin_model,
        license_factory,
        license_repository,
        activation_repository,
        catalog_repository,
        clock,
        recording_bus,
        activate,
    ):
        license_model = await sync_to_async(license_factory)(owner=admin_model, max_devices=3)
        await activate(await license_repository.find_by_id(license_model.id), "a")

        async def activate_second(found):
            await activate(found, "b")

        handler = self.handler_with(activate_second, catalog_repository, clock, recording_bus)

        license = await handler.handle(
            UpdateLicenseCommand(actor=actor, license_id=license_model.id, max_devices=2)
        )

        assert license.max_devices == 2
        assert await activation_repository.count_active(license_model.id) == 2
