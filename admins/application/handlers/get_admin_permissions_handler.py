"""
GetAdminPermissionsHandler.
"""
from admins.application.queries.get_admin_permissions import GetAdminPermissionsQuery
from admins.domain.scope import AdminResourcePermissions
from admins.ports.admin_permission_repository import AdminPermissionRepository
from admins.ports.admin_repository import AdminRepository
from core.domain.exceptions import AdminNotFoundError, InsufficientRoleError


class GetAdminPermissionsHandler:
    """Handler for GetAdminPermissionsQuery."""

    def __init__(
        self,
        admin_repository: AdminRepository,
        permission_repository: AdminPermissionRepository,
    ):
        """Initialize handler with repositories."""
        self.admin_repository = admin_repository
        self.permission_repository = permission_repository

    async def handle(self, query: GetAdminPermissionsQuery) -> AdminResourcePermissions:
        """
        Handle get admin permissions query.

        Admins may read their own scopes; super admins may read anyone's.
        A super admin target always sees everything, whatever is stored.

        Raises:
            InsufficientRoleError: If a non-super admin asks about someone else
            AdminNotFoundError: If the target does not exist
        """
        actor = query.actor
        if not actor.is_super_admin and actor.id != query.target_admin_id:
            raise InsufficientRoleError("Only super admins can view other admins' permissions")

        target = await self.admin_repository.find_by_id(query.target_admin_id)
        if target is None:
            raise AdminNotFoundError()
        if target.is_super_admin:
            return AdminResourcePermissions()
        return await self.permission_repository.get_permissions(target.id)
