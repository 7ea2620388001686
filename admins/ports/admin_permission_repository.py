"""
Admin permission repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from admins.domain.scope import AdminResourcePermissions, ResourceScope
from core.domain.value_objects import ResourceType


class AdminPermissionRepository(ABC):
    """Abstract repository for persisted admin resource scopes."""

    @abstractmethod
    async def get_scope(
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

    @abstractmethod
    async def get_permissions(self, admin_id: uuid.UUID) -> AdminResourcePermissions:
        """
        Get the scopes for every resource type, defaulting missing ones to ``all``.

        Args:
            admin_id: Admin UUID

        Returns:
            Complete permission record
        """

    @abstractmethod
    async def replace_permissions(
        self, admin_id: uuid.UUID, permissions: AdminResourcePermissions
    ) -> AdminResourcePermissions:
        """
        Atomically replace every stored scope of an admin.

        Args:
            admin_id: Admin UUID
            permissions: Normalized permission record

        Returns:
            The permission record as stored
        """

    @abstractmethod
    async def replace_scope(
        self, admin_id: uuid.UUID, resource_type: ResourceType, scope: ResourceScope
    ) -> ResourceScope:
        """
        Replace the stored scope of one resource type, leaving the others untouched.

        Args:
            admin_id: Admin UUID
            resource_type: Resource type
            scope: Normalized scope

        Returns:
            The scope as stored
        """
