"""
Admin domain services.
"""
import logging
import uuid
from typing import Optional

from admins.domain.scope import ResourceScope
from admins.ports.admin_permission_repository import AdminPermissionRepository
from core.domain.exceptions import InvalidInputError
from core.domain.value_objects import AdminRole, ResourceType

logger = logging.getLogger(__name__)


class ResourceScopeResolver:
    """Resolves the effective scope of an admin over one resource type."""

    def __init__(self, permission_repository: AdminPermissionRepository):
        self.permission_repository = permission_repository

    async def resolve(
        self,
        admin_id: Optional[uuid.UUID],
        role: AdminRole,
        resource_type: ResourceType,
    ) -> ResourceScope:
        """
        Resolve a scope.

        Super admins always see everything regardless of stored rows.
        Other admins get their stored scope, or ``all`` when none is stored.

        Raises:
            InvalidInputError: If a non-super admin has no ID
        """
        if role == AdminRole.SUPER_ADMIN:
            return ResourceScope.all()
        if not admin_id:
            raise InvalidInputError("Admin ID is required to resolve a resource scope")

        scope = await self.permission_repository.get_scope(admin_id, resource_type)
        if scope is None:
            return ResourceScope.all()
        logger.debug(
            "Resolved %s scope for admin %s: %s", resource_type.value, admin_id, scope.mode.value
        )
        return scope
