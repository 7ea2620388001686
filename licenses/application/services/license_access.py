"""
Scope checks for license administration.
"""
from typing import Optional

from django.db.models import Q

from admins.domain.admin import AdminAccount
from admins.domain.scope import ResourceScope, can_access
from admins.domain.services import ResourceScopeResolver
from admins.infrastructure.repositories.django_admin_permission_repository import (
    DjangoAdminPermissionRepository,
)
from admins.infrastructure.scope_filters import build_scope_filter
from core.domain.exceptions import LicenseNotFoundError, ResourceAccessDeniedError
from core.domain.value_objects import ResourceType
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

OWNER_FIELD = "owner_id"
ID_FIELD = "id"


class LicenseAccessGuard:
    """Applies an admin's license scope to listings and single records."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        resolver: Optional[ResourceScopeResolver] = None,
    ):
        self.license_repository = license_repository
        self.resolver = resolver or ResourceScopeResolver(DjangoAdminPermissionRepository())

    async def scope_for(self, actor: AdminAccount) -> ResourceScope:
        return await self.resolver.resolve(actor.id, actor.role, ResourceType.LICENSES)

    async def listing_filter(self, actor: AdminAccount) -> Q:
        """Q object restricting a license listing to what ``actor`` may see."""
        scope = await self.scope_for(actor)
        return build_scope_filter(scope, OWNER_FIELD, ID_FIELD, actor.id)

    async def load(self, actor: AdminAccount, license_id) -> License:
        """
        Fetch a license and check it is within the actor's scope.

        Raises:
            LicenseNotFoundError: If the license does not exist
            ResourceAccessDeniedError: If the scope excludes it
        """
        license = await self.license_repository.find_by_id(license_id)
        if license is None:
            raise LicenseNotFoundError()
        scope = await self.scope_for(actor)
        if not can_access(scope, license.id, license.owner_id, actor.id):
            raise ResourceAccessDeniedError("License access denied")
        return license
