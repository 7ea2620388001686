"""
Admin device handlers.

Handlers for deactivating, reactivating, deleting, cleaning up and reading
the history of device activations. Every single-device operation first
checks that the device's license is within the acting admin's license scope.
"""
import logging
from typing import List

from activations.application.commands.manage_device import (
    CleanupDevicesCommand,
    DeactivateDeviceCommand,
    DeleteDeviceCommand,
    ReactivateDeviceCommand,
)
from activations.application.dto.activation_dto import ActivityLogDTO
from activations.application.queries.get_device_logs import GetDeviceLogsQuery
from activations.domain.activation import DeviceActivation
from activations.domain.events import (
    DeviceDeactivated,
    DeviceDeleted,
    DeviceReactivated,
    InactiveDevicesCleanedUp,
)
from activations.domain.services import DeviceSlotManager
from activations.ports.activation_repository import ActivationRepository
from admins.domain.admin import AdminAccount
from core.domain.events import EventBus
from core.domain.exceptions import DeviceNotFoundError, InsufficientRoleError
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from core.ports.audit_log_repository import AuditLogRepository
from licenses.application.services.license_access import LicenseAccessGuard
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class _DeviceHandlerBase:
    def __init__(
        self,
        activation_repository: ActivationRepository,
        license_repository: LicenseRepository,
        access_guard: LicenseAccessGuard = None,
        clock: Clock = None,
        bus: EventBus = None,
    ):
        """Initialize handler with repositories."""
        self.activation_repository = activation_repository
        self.access_guard = access_guard or LicenseAccessGuard(license_repository)
        self.clock = clock or system_clock
        self.event_bus = bus or event_bus
        self.slot_manager = DeviceSlotManager(activation_repository, self.clock)

    async def _load(self, actor: AdminAccount, activation_id) -> DeviceActivation:
        activation = await self.activation_repository.find_by_id(activation_id)
        if activation is None:
            raise DeviceNotFoundError()
        await self.access_guard.load(actor, activation.license_id)
        return activation


class DeactivateDeviceHandler(_DeviceHandlerBase):
    """Handler for DeactivateDeviceCommand."""

    async def handle(self, command: DeactivateDeviceCommand) -> DeviceActivation:
        """
        Handle deactivate device command.

        Args:
            command: DeactivateDeviceCommand

        Returns:
            Deactivated DeviceActivation

        Raises:
            DeviceNotFoundError: If the device does not exist
            ResourceAccessDeniedError: If its license is outside the actor's scope
        """
        await self._load(command.actor, command.activation_id)
        activation = await self.slot_manager.deactivate(command.activation_id)
        logger.info("Device deactivated", extra={"device_id": str(activation.id)})
        await self.event_bus.publish(
            DeviceDeactivated(
                activation_id=activation.id,
                license_id=activation.license_id,
                actor_id=command.actor.id,
            )
        )
        return activation


class ReactivateDeviceHandler(_DeviceHandlerBase):
    """Handler for ReactivateDeviceCommand."""

    async def handle(self, command: ReactivateDeviceCommand) -> DeviceActivation:
        """
        Handle reactivate device command.

        Args:
            command: ReactivateDeviceCommand

        Returns:
            Reactivated DeviceActivation

        Raises:
            DeviceNotFoundError: If the device does not exist
            ResourceAccessDeniedError: If its license is outside the actor's scope
            DeviceAlreadyActiveError: If the device is already active
            DeviceLimitReachedError: If the license has no free slot
        """
        await self._load(command.actor, command.activation_id)
        activation = await self.slot_manager.reactivate(command.activation_id)
        logger.info("Device reactivated", extra={"device_id": str(activation.id)})
        await self.event_bus.publish(
            DeviceReactivated(
                activation_id=activation.id,
                license_id=activation.license_id,
                actor_id=command.actor.id,
            )
        )
        return activation


class DeleteDeviceHandler(_DeviceHandlerBase):
    """Handler for DeleteDeviceCommand."""

    async def handle(self, command: DeleteDeviceCommand) -> None:
        """
        Handle delete device command. Deletion is permanent.

        Raises:
            DeviceNotFoundError: If the device does not exist
            ResourceAccessDeniedError: If its license is outside the actor's scope
        """
        activation = await self._load(command.actor, command.activation_id)
        await self.slot_manager.delete(activation.id)
        logger.info("Device deleted", extra={"device_id": str(activation.id)})
        await self.event_bus.publish(
            DeviceDeleted(
                activation_id=activation.id,
                license_id=activation.license_id,
                actor_id=command.actor.id,
            )
        )


class CleanupDevicesHandler(_DeviceHandlerBase):
    """Handler for CleanupDevicesCommand."""

    async def handle(self, command: CleanupDevicesCommand) -> int:
        """
        Handle cleanup devices command.

        Args:
            command: CleanupDevicesCommand

        Returns:
            Number of activations removed

        Raises:
            InsufficientRoleError: If the actor is not a super admin
        """
        if not command.actor.is_super_admin:
            raise InsufficientRoleError("Only super admins can clean up devices")
        removed = await self.slot_manager.cleanup(command.days)
        if removed:
            await self.event_bus.publish(
                InactiveDevicesCleanedUp(count=removed, days=command.days, actor_id=command.actor.id)
            )
        return removed


class GetDeviceLogsHandler(_DeviceHandlerBase):
    """Handler for GetDeviceLogsQuery."""

    def __init__(
        self,
        activation_repository: ActivationRepository,
        license_repository: LicenseRepository,
        audit_log_repository: AuditLogRepository,
        **kwargs,
    ):
        super().__init__(activation_repository, license_repository, **kwargs)
        self.audit_log_repository = audit_log_repository

    async def handle(self, query: GetDeviceLogsQuery) -> List[ActivityLogDTO]:
        """
        Handle get device logs query.

        Returns:
            Recorded activity of the device, newest first

        Raises:
            DeviceNotFoundError: If the device does not exist
            ResourceAccessDeniedError: If its license is outside the actor's scope
        """
        activation = await self._load(query.actor, query.activation_id)
        entries = await self.audit_log_repository.list_for_entity(
            "device", str(activation.id), query.limit
        )
        return [ActivityLogDTO.from_entry(entry, self.clock) for entry in entries]
