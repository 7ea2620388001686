"""
Admin domain events.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class AdminPermissionsUpdated(DomainEvent):
    """Event raised when a super admin changes another admin's scopes."""

    entity_type = "admin"
    action = "update_admin_permissions"

    def __init__(
        self,
        admin_id: uuid.UUID,
        permissions: Dict[str, Any],
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(admin_id, occurred_at))
        self.admin_id = admin_id
        self.permissions = permissions
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["permissions"] = self.permissions
        return data
