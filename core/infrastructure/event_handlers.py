"""
Event handlers for domain events.

These handlers process domain events for side effects such as the audit
trail. Audit writes are best-effort: a failed write is logged and the
state change it describes stands.
"""

import logging

from asgiref.sync import sync_to_async

from activations.domain.events import (
    DeviceActivated,
    DeviceDeactivated,
    DeviceDeleted,
    DeviceReactivated,
    InactiveDevicesCleanedUp,
)
from admins.domain.events import AdminPermissionsUpdated
from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.events import event_bus
from core.infrastructure.models import AuditLog
from licenses.domain.events import (
    LicenseCreated,
    LicenseRevoked,
    LicensesExpired,
    LicenseStatusChanged,
    LicenseUpdated,
)

logger = logging.getLogger(__name__)

AUDITED_EVENTS = (
    LicenseCreated,
    LicenseUpdated,
    LicenseRevoked,
    LicenseStatusChanged,
    LicensesExpired,
    DeviceActivated,
    DeviceDeactivated,
    DeviceReactivated,
    DeviceDeleted,
    InactiveDevicesCleanedUp,
    AdminPermissionsUpdated,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one AuditLog row per event.
    """

    @staticmethod
    @sync_to_async
    def _write(event: DomainEvent) -> None:
        details = event.to_dict()
        AuditLog.objects.create(
            entity_type=event.entity_type,
            entity_id=event.aggregate_id,
            action=event.action,
            details=details,
            actor=event.actor_id or "system",
        )

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        try:
            await self._write(event)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Failed to write audit log for %s: %s",
                event.event_type,
                e,
                extra={"event_id": str(event.event_id), "aggregate_id": event.aggregate_id},
            )
            return
        logger.debug(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={"event_id": str(event.event_id), "action": event.action},
        )


def register_event_handlers():
    """Register all event handlers with the event bus."""
    audit_handler = AuditLogEventHandler()
    for event_type in AUDITED_EVENTS:
        event_bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered", extra={"event_types": len(AUDITED_EVENTS)})
