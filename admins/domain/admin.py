"""
Admin account domain entity.
"""
import uuid
from dataclasses import dataclass

from core.domain.value_objects import AdminRole


@dataclass(frozen=True)
class AdminAccount:
    """An authenticated administrator and the role it currently holds."""

    id: uuid.UUID
    username: str
    role: AdminRole

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN
