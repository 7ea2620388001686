"""
Admin repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from admins.domain.admin import AdminAccount


class AdminRepository(ABC):
    """Abstract repository for admin accounts."""

    @abstractmethod
    async def find_by_id(self, admin_id: uuid.UUID) -> Optional[AdminAccount]:
        """
        Find an admin by ID.

        Args:
            admin_id: Admin UUID

        Returns:
            AdminAccount or None if not found
        """
