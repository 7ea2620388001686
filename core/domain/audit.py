"""
Audit trail entries as read back by the admin API.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class AuditEntry:
    """One recorded change to a license, device or admin."""

    id: uuid.UUID
    entity_type: str
    entity_id: str
    action: str
    actor: str
    created_at: datetime
    details: Dict[str, Any] = field(default_factory=dict)
