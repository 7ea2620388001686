"""
Django implementation of AdminRepository port.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from admins.domain.admin import AdminAccount
from admins.infrastructure.models import Admin as AdminModel
from admins.ports.admin_repository import AdminRepository
from core.domain.value_objects import AdminRole


class DjangoAdminRepository(AdminRepository):
    """Django ORM implementation of AdminRepository."""

    @staticmethod
    def to_domain(model: AdminModel) -> AdminAccount:
        return AdminAccount(id=model.id, username=model.username, role=AdminRole(model.role))

    @sync_to_async
    def find_by_id(self, admin_id: uuid.UUID) -> Optional[AdminAccount]:
        """
        Find an admin by ID.

        Args:
            admin_id: Admin UUID

        Returns:
            AdminAccount or None if not found
        """
        try:
            return self.to_domain(AdminModel.objects.get(id=admin_id))
        except AdminModel.DoesNotExist:
            return None
