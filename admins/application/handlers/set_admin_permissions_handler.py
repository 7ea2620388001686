"""
Handlers for changing admin resource scopes.
"""
import logging

from admins.application.commands.set_admin_permissions import (
    SetAdminPermissionsCommand,
    SetAdminScopeCommand,
)
from admins.domain.admin import AdminAccount
from admins.domain.events import AdminPermissionsUpdated
from admins.domain.scope import (
    AdminResourcePermissions,
    ResourceScope,
    normalize_permissions,
    normalize_scope,
)
from admins.ports.admin_permission_repository import AdminPermissionRepository
from admins.ports.admin_repository import AdminRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    AdminNotFoundError,
    ForbiddenError,
    InsufficientRoleError,
    InvalidResourceTypeError,
)
from core.domain.value_objects import ResourceType
from core.infrastructure.events import event_bus

logger = logging.getLogger(__name__)


class _PermissionHandlerBase:
    def __init__(
        self,
        admin_repository: AdminRepository,
        permission_repository: AdminPermissionRepository,
        bus: EventBus = None,
    ):
        """Initialize handler with repositories."""
        self.admin_repository = admin_repository
        self.permission_repository = permission_repository
        self.event_bus = bus or event_bus

    async def _check_target(self, actor: AdminAccount, target_admin_id) -> AdminAccount:
        if not actor.is_super_admin:
            raise InsufficientRoleError("Only super admins can change admin permissions")
        target = await self.admin_repository.find_by_id(target_admin_id)
        if target is None:
            raise AdminNotFoundError()
        if target.is_super_admin:
            raise ForbiddenError(
                "Super admin permissions cannot be changed", code="SUPER_ADMIN_PERMISSIONS"
            )
        return target

    async def _announce(
        self, actor: AdminAccount, target: AdminAccount, stored: AdminResourcePermissions
    ) -> None:
        logger.info(
            "Admin permissions updated",
            extra={"admin_id": str(target.id), "actor_id": str(actor.id)},
        )
        await self.event_bus.publish(
            AdminPermissionsUpdated(
                admin_id=target.id, permissions=stored.to_dict(), actor_id=actor.id
            )
        )


class SetAdminPermissionsHandler(_PermissionHandlerBase):
    """Handler for SetAdminPermissionsCommand."""

    async def handle(self, command: SetAdminPermissionsCommand) -> AdminResourcePermissions:
        """
        Replace every scope of the target admin.

        Args:
            command: SetAdminPermissionsCommand

        Returns:
            Normalized permissions as stored

        Raises:
            InsufficientRoleError: If the actor is not a super admin
            AdminNotFoundError: If the target does not exist
            ForbiddenError: If the target is a super admin
        """
        target = await self._check_target(command.actor, command.target_admin_id)
        stored = await self.permission_repository.replace_permissions(
            target.id, normalize_permissions(command.permissions)
        )
        await self._announce(command.actor, target, stored)
        return stored


class SetAdminScopeHandler(_PermissionHandlerBase):
    """Handler for SetAdminScopeCommand."""

    async def handle(self, command: SetAdminScopeCommand) -> ResourceScope:
        """
        Replace the scope of one resource type, keeping the others.

        Args:
            command: SetAdminScopeCommand

        Returns:
            Normalized scope as stored

        Raises:
            InvalidResourceTypeError: If the resource type is unknown
            InsufficientRoleError: If the actor is not a super admin
            AdminNotFoundError: If the target does not exist
            ForbiddenError: If the target is a super admin
        """
        resource_type = ResourceType.parse(command.resource_type)
        if resource_type is None:
            raise InvalidResourceTypeError(command.resource_type)

        target = await self._check_target(command.actor, command.target_admin_id)
        scope = normalize_scope(command.mode, command.selected_ids)
        stored = await self.permission_repository.replace_scope(target.id, resource_type, scope)
        await self._announce(
            command.actor, target, await self.permission_repository.get_permissions(target.id)
        )
        return stored
