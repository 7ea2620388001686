"""
GetAdminPermissionsQuery.
"""
import uuid
from dataclasses import dataclass

from admins.domain.admin import AdminAccount


@dataclass
class GetAdminPermissionsQuery:
    """Query the effective scopes of an admin."""

    actor: AdminAccount
    target_admin_id: uuid.UUID
