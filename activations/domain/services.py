"""
Device slot manager.

Enforces "at most max_devices active devices per license" and
deduplicates devices by fingerprint.
"""
import logging
import uuid
from typing import Tuple

from activations.domain.activation import DeviceActivation
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import (
    DeviceNotActivatedError,
    DeviceNotFoundError,
    InvalidInputError,
)
from core.domain.value_objects import DeviceInfo
from core.infrastructure.clock import Clock, system_clock
from licenses.domain.license import License

logger = logging.getLogger(__name__)


class DeviceSlotManager:
    """Binds devices to license slots."""

    def __init__(self, activation_repository: ActivationRepository, clock: Clock = None):
        self.activation_repository = activation_repository
        self.clock = clock or system_clock

    async def activate(
        self, license: License, fingerprint: str, device_info: DeviceInfo
    ) -> Tuple[DeviceActivation, bool]:
        """
        Activate a device against a license.

        Re-activating an already active device is a success that returns
        the same activation and does not use another slot.

        Args:
            license: License entity
            fingerprint: Device fingerprint
            device_info: Reported device information

        Returns:
            Tuple of (activation, changed); changed is False when the device
            was already active

        Raises:
            LicenseInactiveError: If the license is revoked
            LicenseExpiredError: If the license is expired
            DeviceLimitReachedError: If every slot is taken
        """
        now = self.clock.now()
        license.ensure_usable(self.clock.to_date(now))

        existing = await self.activation_repository.find_active(license.id, fingerprint)
        if existing is not None:
            return existing, False

        candidate = DeviceActivation.create(
            license_id=license.id,
            device_fingerprint=fingerprint,
            now=now,
            device_name=device_info.hostname,
            device_info=device_info.to_dict(),
        )
        activation, changed = await self.activation_repository.activate_within_limit(
            candidate, now
        )
        if changed:
            logger.info(
                "Device activated",
                extra={"license_id": str(license.id), "device_id": str(activation.id)},
            )
        return activation, changed

    async def validate(self, license: License, fingerprint: str) -> DeviceActivation:
        """
        Validate a device. Never creates an activation.

        Raises:
            LicenseInactiveError: If the license is revoked
            LicenseExpiredError: If the license is expired
            DeviceNotActivatedError: If the device holds no active slot
        """
        now = self.clock.now()
        license.ensure_usable(self.clock.to_date(now))

        activation = await self.activation_repository.find_active(license.id, fingerprint)
        if activation is None:
            raise DeviceNotActivatedError()
        touched = await self.activation_repository.touch_active(activation.id, now)
        if touched is None:  # deactivated since the lookup
            raise DeviceNotActivatedError()
        return touched

    async def deactivate(self, activation_id: uuid.UUID) -> DeviceActivation:
        """
        Raises:
            DeviceNotFoundError: If the activation does not exist
        """
        return await self.activation_repository.mark_deactivated(activation_id, self.clock.now())

    async def reactivate(self, activation_id: uuid.UUID) -> DeviceActivation:
        """
        Reactivate a device if its license has a free slot.

        Raises:
            DeviceNotFoundError: If the activation does not exist
            DeviceAlreadyActiveError: If it is already active
            DeviceLimitReachedError: If every slot is taken
        """
        return await self.activation_repository.reactivate_within_limit(
            activation_id, self.clock.now()
        )

    async def delete(self, activation_id: uuid.UUID) -> None:
        if not await self.activation_repository.delete(activation_id):
            raise DeviceNotFoundError()

    async def cleanup(self, days: int) -> int:
        """
        Hard-delete devices deactivated at least ``days`` days ago.

        Returns:
            Number of activations removed
        """
        if days < 0:
            raise InvalidInputError("days must not be negative", code="INVALID_DAYS")
        removed = await self.activation_repository.delete_deactivated_before(
            self.clock.days_ago(days)
        )
        logger.info("Cleaned up inactive devices", extra={"count": removed, "days": days})
        return removed
