"""
Integration tests for the admin permission handlers.
"""

import pytest
from asgiref.sync import sync_to_async

from admins.application.commands.set_admin_permissions import (
    SetAdminPermissionsCommand,
    SetAdminScopeCommand,
)
from admins.application.handlers.set_admin_permissions_handler import (
    SetAdminPermissionsHandler,
    SetAdminScopeHandler,
)
from admins.domain.events import AdminPermissionsUpdated
from admins.domain.scope import ResourceScope
from admins.infrastructure.models import AdminResourceScope
from admins.infrastructure.repositories.django_admin_permission_repository import (
    DjangoAdminPermissionRepository,
)
from core.domain.value_objects import ResourceMode, ResourceType


class HookedPermissionRepository(DjangoAdminPermissionRepository):
    """Runs ``before_write`` once, just before a single scope is written."""

    def __init__(self, before_write):
        self.before_write = before_write

    async def replace_scope(self, admin_id, resource_type, scope):
        hook, self.before_write = self.before_write, None
        if hook is not None:
            await hook()
        return await super().replace_scope(admin_id, resource_type, scope)


def scope_command(actor, target, resource_type, mode):
    return SetAdminScopeCommand(
        actor=actor, target_admin_id=target.id, resource_type=resource_type, mode=mode
    )


@pytest.fixture
def scope_handler(admin_repository, permission_repository, recording_bus):
    return SetAdminScopeHandler(admin_repository, permission_repository, recording_bus)


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestSetAdminScopeHandler:
    """Tests for SetAdminScopeHandler."""

    async def test_writes_only_its_row(
        self, scope_handler, super_actor, admin_model, permission_repository
    ):
        await sync_to_async(AdminResourceScope.objects.create)(
            admin=admin_model, resource_type="policies", mode="none", selected_ids=[]
        )
        command = scope_command(super_actor, admin_model, "products", "own")

        stored = await scope_handler.handle(command)

        assert stored.mode == ResourceMode.OWN
        permissions = await permission_repository.get_permissions(admin_model.id)
        assert permissions.policies.mode == ResourceMode.NONE
        assert permissions.licenses.mode == ResourceMode.ALL
        rows = await sync_to_async(
            lambda: sorted(
                AdminResourceScope.objects.filter(admin=admin_model).values_list(
                    "resource_type", flat=True
                )
            )
        )()
        assert rows == ["policies", "products"]

    async def test_event_carries_full_record(
        self, scope_handler, super_actor, admin_model, recording_bus
    ):
        await scope_handler.handle(scope_command(super_actor, admin_model, "licenses", "none"))

        [event] = recording_bus.of_type(AdminPermissionsUpdated)
        assert event.permissions["licenses"]["mode"] == "none"
        assert event.permissions["products"]["mode"] == "all"

    async def test_concurrent_change_of_another_type_survives(
        self, super_actor, admin_model, admin_repository, scope_handler, recording_bus
    ):
        async def restrict_licenses():
            await scope_handler.handle(scope_command(super_actor, admin_model, "licenses", "none"))

        hooked = HookedPermissionRepository(restrict_licenses)
        handler = SetAdminScopeHandler(admin_repository, hooked, recording_bus)

        await handler.handle(scope_command(super_actor, admin_model, "products", "own"))

        permissions = await hooked.get_permissions(admin_model.id)
        assert permissions.licenses.mode == ResourceMode.NONE
        assert permissions.products.mode == ResourceMode.OWN


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestSetAdminPermissionsHandler:
    """Tests for SetAdminPermissionsHandler."""

    async def test_replaces_every_type(
        self, admin_repository, permission_repository, recording_bus, super_actor, admin_model
    ):
        await permission_repository.replace_scope(
            admin_model.id, ResourceType.POLICIES, ResourceScope.none()
        )
        handler = SetAdminPermissionsHandler(admin_repository, permission_repository, recording_bus)

        stored = await handler.handle(
            SetAdminPermissionsCommand(
                actor=super_actor,
                target_admin_id=admin_model.id,
                permissions={"licenses": {"mode": "own"}},
            )
        )

        assert stored.licenses.mode == ResourceMode.OWN
        assert stored.policies.mode == ResourceMode.ALL
        assert len(recording_bus.of_type(AdminPermissionsUpdated)) == 1


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
@pytest.mark.integration
class TestStoredScopeRows:
    """Reading scope rows written outside the service."""

    async def test_unknown_resource_type_is_skipped(self, permission_repository, admin_model):
        await sync_to_async(AdminResourceScope.objects.create)(
            admin=admin_model, resource_type="widgets", mode="none", selected_ids=[]
        )
        await sync_to_async(AdminResourceScope.objects.create)(
            admin=admin_model, resource_type="licenses", mode="own", selected_ids=[]
        )

        permissions = await permission_repository.get_permissions(admin_model.id)

        assert permissions.licenses.mode == ResourceMode.OWN
        assert permissions.products.mode == ResourceMode.ALL
        assert set(permissions.to_dict()) == {"licenses", "policies", "products"}
