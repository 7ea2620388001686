"""
Device activation domain entity.

This is the core domain entity binding one physical device (identified by
its fingerprint) to a license slot. It contains business logic and is
independent of infrastructure.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.value_objects import DeviceStatus


@dataclass(frozen=True)
class DeviceActivation:
    """
    Device activation domain entity.

    At most one active activation exists per (license, fingerprint); a
    deactivated row keeps its identity and is reused when the same device
    comes back.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    device_fingerprint: str
    status: DeviceStatus
    activated_at: datetime
    last_validated_at: Optional[datetime]
    deactivated_at: Optional[datetime] = None
    device_name: str = ""
    device_info: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        if not self.device_fingerprint:
            raise ValueError("Device fingerprint is required")

    @classmethod
    def create(
        cls,
        license_id: uuid.UUID,
        device_fingerprint: str,
        now: datetime,
        device_name: str = "",
        device_info: Optional[Dict[str, Any]] = None,
        activation_id: Optional[uuid.UUID] = None,
    ) -> "DeviceActivation":
        """
        Create a new active DeviceActivation.

        Args:
            license_id: License UUID
            device_fingerprint: Fingerprint of the device
            now: Activation timestamp from the canonical clock
            device_name: Display name (the reported hostname)
            device_info: Reported hardware identifiers
            activation_id: Optional UUID (generated if not provided)

        Returns:
            DeviceActivation entity instance
        """
        return cls(
            id=activation_id or uuid.uuid4(),
            license_id=license_id,
            device_fingerprint=device_fingerprint,
            status=DeviceStatus.ACTIVE,
            activated_at=now,
            last_validated_at=now,
            deactivated_at=None,
            device_name=device_name,
            device_info=device_info or {},
        )

    @property
    def is_active(self) -> bool:
        return self.status == DeviceStatus.ACTIVE

    def deactivate(self, now: datetime) -> "DeviceActivation":
        """
        Free the slot held by this device.

        Deactivation is unconditional: an already deactivated device gets a
        fresh deactivated_at.
        """
        return replace(self, status=DeviceStatus.DEACTIVATED, deactivated_at=now)

    def reactivate(self, now: datetime) -> "DeviceActivation":
        """Return a copy occupying a slot again; activated_at is kept."""
        return replace(
            self, status=DeviceStatus.ACTIVE, deactivated_at=None, last_validated_at=now
        )

    def reuse(
        self, now: datetime, device_name: str, device_info: Dict[str, Any]
    ) -> "DeviceActivation":
        """Return a copy for a client re-activating this deactivated device."""
        return replace(
            self,
            status=DeviceStatus.ACTIVE,
            activated_at=now,
            last_validated_at=now,
            deactivated_at=None,
            device_name=device_name,
            device_info=device_info,
        )
