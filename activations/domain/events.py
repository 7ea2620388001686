"""
Device activation domain events.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class DeviceActivated(DomainEvent):
    """Event raised when a client activates a device on a license."""

    entity_type = "device"
    action = "activate_device"

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        device_name: str = "",
        reused: bool = False,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize DeviceActivated event.

        Args:
            activation_id: Device activation UUID
            license_id: License UUID
            device_name: Reported hostname
            reused: True when a deactivated row was brought back
            occurred_at: When the event occurred
        """
        super().__init__(event_type=self.event_type, **self.base_fields(activation_id, occurred_at))
        self.activation_id = activation_id
        self.license_id = license_id
        self.device_name = device_name
        self.reused = reused

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            license_id=str(self.license_id), device_name=self.device_name, reused=self.reused
        )
        return data


class DeviceDeactivated(DomainEvent):
    """Event raised when an admin deactivates a device."""

    entity_type = "device"
    action = "deactivate_device"

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(activation_id, occurred_at))
        self.activation_id = activation_id
        self.license_id = license_id
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["license_id"] = str(self.license_id)
        return data


class DeviceReactivated(DomainEvent):
    """Event raised when an admin reactivates a device."""

    entity_type = "device"
    action = "reactivate_device"

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(activation_id, occurred_at))
        self.activation_id = activation_id
        self.license_id = license_id
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["license_id"] = str(self.license_id)
        return data


class DeviceDeleted(DomainEvent):
    """Event raised when an admin hard-deletes a device activation."""

    entity_type = "device"
    action = "delete_device"

    def __init__(
        self,
        activation_id: uuid.UUID,
        license_id: uuid.UUID,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(activation_id, occurred_at))
        self.activation_id = activation_id
        self.license_id = license_id
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["license_id"] = str(self.license_id)
        return data


class InactiveDevicesCleanedUp(DomainEvent):
    """Event raised when deactivated devices older than a threshold are purged."""

    entity_type = "device"
    action = "cleanup_devices"

    def __init__(
        self,
        count: int,
        days: int,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(None, occurred_at))
        self.count = count
        self.days = days
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(count=self.count, days=self.days)
        return data
