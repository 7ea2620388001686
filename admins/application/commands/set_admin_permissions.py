"""
Commands to change an admin's resource scopes.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List

from admins.domain.admin import AdminAccount


@dataclass
class SetAdminScopeCommand:
    """Replace the scope of one resource type."""

    actor: AdminAccount
    target_admin_id: uuid.UUID
    resource_type: str
    mode: str
    selected_ids: List[Any] = field(default_factory=list)


@dataclass
class SetAdminPermissionsCommand:
    """Replace the scopes of every resource type at once."""

    actor: AdminAccount
    target_admin_id: uuid.UUID
    permissions: Dict[str, Any] = field(default_factory=dict)
