"""
Django implementation of AdminPermissionRepository port.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from admins.domain.scope import (
    AdminResourcePermissions,
    ResourceScope,
    normalize_scope,
)
from admins.infrastructure.models import AdminResourceScope as ScopeModel
from admins.ports.admin_permission_repository import AdminPermissionRepository
from core.domain.value_objects import ResourceType


class DjangoAdminPermissionRepository(AdminPermissionRepository):
    """
    Django ORM implementation of AdminPermissionRepository.

    Each scope is one row holding its mode and custom ID list, so a read
    of all scopes is a single statement and a replace is one transaction.
    """

    @staticmethod
    def _to_domain(model: ScopeModel) -> ResourceScope:
        return normalize_scope(model.mode, model.selected_ids)

    @sync_to_async
    def get_scope(
        self, admin_id: uuid.UUID, resource_type: ResourceType
    ) -> Optional[ResourceScope]:
        """
        Get the stored scope for one resource type.

        Args:
            admin_id: Admin UUID
            resource_type: Resource type

        Returns:
            Stored scope, or None when nothing is configured
        """
        model = ScopeModel.objects.filter(
            admin_id=admin_id, resource_type=resource_type.value
        ).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def get_permissions(self, admin_id: uuid.UUID) -> AdminResourcePermissions:
        """
        Get every scope of an admin in one query.

        Args:
            admin_id: Admin UUID

        Returns:
            Complete permission record
        """
        stored = {}
        for model in ScopeModel.objects.filter(admin_id=admin_id):
            resource_type = ResourceType.parse(model.resource_type)
            # Unknown resource types are skipped
            if resource_type is not None:
                stored[resource_type.value] = self._to_domain(model)
        return AdminResourcePermissions(**stored)

    @sync_to_async
    def replace_permissions(
        self, admin_id: uuid.UUID, permissions: AdminResourcePermissions
    ) -> AdminResourcePermissions:
        """
        Delete and re-insert every scope row inside one transaction.

        Args:
            admin_id: Admin UUID
            permissions: Normalized permission record

        Returns:
            The permission record as stored
        """
        with transaction.atomic():
            ScopeModel.objects.filter(admin_id=admin_id).delete()
            for resource_type, scope in permissions.items():
                ScopeModel(
                    admin_id=admin_id,
                    resource_type=resource_type.value,
                    mode=scope.mode.value,
                    selected_ids=list(scope.sorted_ids),
                ).save()
        return permissions

    @sync_to_async
    def replace_scope(
        self, admin_id: uuid.UUID, resource_type: ResourceType, scope: ResourceScope
    ) -> ResourceScope:
        """
        Upsert the single row for one resource type.

        Rows of the other resource types are not read or written, so
        concurrent changes to different types never overwrite each other.

        Args:
            admin_id: Admin UUID
            resource_type: Resource type
            scope: Normalized scope

        Returns:
            The scope as stored
        """
        with transaction.atomic():
            model, _ = ScopeModel.objects.update_or_create(
                admin_id=admin_id,
                resource_type=resource_type.value,
                defaults={"mode": scope.mode.value, "selected_ids": list(scope.sorted_ids)},
            )
        return self._to_domain(model)
