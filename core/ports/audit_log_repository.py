"""
Audit log repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List

from core.domain.audit import AuditEntry

DEFAULT_HISTORY_LIMIT = 50


class AuditLogRepository(ABC):
    """Read access to the audit trail written by the event handlers."""

    @abstractmethod
    async def list_for_entity(
        self, entity_type: str, entity_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> List[AuditEntry]:
        """
        List the most recent entries recorded for one entity.

        Args:
            entity_type: "license", "device" or "admin"
            entity_id: ID of the entity as recorded
            limit: Maximum number of entries

        Returns:
            Entries, newest first
        """
