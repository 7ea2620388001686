"""
Django implementation of AuditLogRepository port.
"""
from typing import List

from asgiref.sync import sync_to_async

from core.domain.audit import AuditEntry
from core.infrastructure.models import AuditLog
from core.ports.audit_log_repository import DEFAULT_HISTORY_LIMIT, AuditLogRepository


class DjangoAuditLogRepository(AuditLogRepository):
    """Reads AuditLog rows back as AuditEntry values."""

    @staticmethod
    def _to_domain(model: AuditLog) -> AuditEntry:
        return AuditEntry(
            id=model.id,
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            action=model.action,
            actor=model.actor,
            created_at=model.created_at,
            details=model.details or {},
        )

    @sync_to_async
    def list_for_entity(
        self, entity_type: str, entity_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> List[AuditEntry]:
        queryset = AuditLog.objects.filter(
            entity_type=entity_type, entity_id=str(entity_id)
        ).order_by("-created_at")[:limit]
        return [self._to_domain(model) for model in queryset]
