"""
Device activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from activations.domain.activation import DeviceActivation


class ActivationRepository(ABC):
    """
    Abstract repository for DeviceActivation entities.

    The two ``*_within_limit`` operations are the critical sections of the
    slot manager: each re-reads the active count and writes under one
    per-license lock, so concurrent callers can never exceed max_devices.
    """

    @abstractmethod
    async def save(self, activation: DeviceActivation) -> DeviceActivation:
        """
        Save an activation entity that does not change slot usage.

        Args:
            activation: DeviceActivation entity to save

        Returns:
            Saved activation entity
        """

    @abstractmethod
    async def find_by_id(self, activation_id: uuid.UUID) -> Optional[DeviceActivation]:
        """
        Find an activation by ID.

        Args:
            activation_id: Activation UUID

        Returns:
            DeviceActivation entity or None if not found
        """

    @abstractmethod
    async def find_active(
        self, license_id: uuid.UUID, fingerprint: str
    ) -> Optional[DeviceActivation]:
        """
        Find the active activation of a device on a license.

        Args:
            license_id: License UUID
            fingerprint: Device fingerprint

        Returns:
            DeviceActivation entity or None if the device is not active
        """

    @abstractmethod
    async def count_active(self, license_id: uuid.UUID) -> int:
        """
        Count active activations of a license.

        Args:
            license_id: License UUID

        Returns:
            Number of occupied slots
        """

    @abstractmethod
    async def list_by_license(self, license_id: uuid.UUID) -> List[DeviceActivation]:
        """
        List every activation of a license, newest first.

        Args:
            license_id: License UUID

        Returns:
            List of DeviceActivation entities
        """

    @abstractmethod
    async def touch_active(
        self, activation_id: uuid.UUID, now: datetime
    ) -> Optional[DeviceActivation]:
        """
        Set last_validated_at, but only while the activation is still active.

        Args:
            activation_id: Activation UUID
            now: Validation timestamp

        Returns:
            Updated activation, or None if it was deactivated or removed
        """

    @abstractmethod
    async def mark_deactivated(self, activation_id: uuid.UUID, now: datetime) -> DeviceActivation:
        """
        Write status and deactivated_at in one statement, leaving other columns alone.

        Args:
            activation_id: Activation UUID
            now: Deactivation timestamp

        Returns:
            Deactivated DeviceActivation

        Raises:
            DeviceNotFoundError: If the activation does not exist
        """

    @abstractmethod
    async def activate_within_limit(
        self, candidate: DeviceActivation, now: datetime
    ) -> Tuple[DeviceActivation, bool]:
        """
        Occupy a slot for ``candidate`` unless the license is full.

        Inside the critical section: an already active row for the same
        fingerprint is returned unchanged; otherwise the active count is
        compared against max_devices, and a deactivated row for the same
        fingerprint is reused before a new one is inserted.

        Args:
            candidate: Freshly created activation for the device
            now: Activation timestamp

        Returns:
            Tuple of (activation, changed) where changed is False when the
            device was already active

        Raises:
            LicenseNotFoundError: If the license disappeared
            DeviceLimitReachedError: If every slot is taken
        """

    @abstractmethod
    async def reactivate_within_limit(
        self, activation_id: uuid.UUID, now: datetime
    ) -> DeviceActivation:
        """
        Bring a deactivated device back unless the license is full.

        Args:
            activation_id: Activation UUID
            now: Reactivation timestamp

        Returns:
            Reactivated DeviceActivation

        Raises:
            DeviceNotFoundError: If the activation does not exist
            DeviceAlreadyActiveError: If it is already active
            DeviceLimitReachedError: If every slot is taken
        """

    @abstractmethod
    async def delete(self, activation_id: uuid.UUID) -> bool:
        """
        Hard-delete an activation.

        Args:
            activation_id: Activation UUID

        Returns:
            True if a row was deleted
        """

    @abstractmethod
    async def delete_deactivated_before(self, threshold: datetime) -> int:
        """
        Hard-delete deactivated activations with deactivated_at <= threshold.

        Args:
            threshold: Cutoff timestamp

        Returns:
            Number of rows deleted
        """
