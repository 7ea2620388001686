"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class LicenseCreated(DomainEvent):
    """Event raised when an admin creates a license."""

    entity_type = "license"
    action = "create_license"

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key: str,
        max_devices: int,
        expires_at: str,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseCreated event.

        Args:
            license_id: License UUID
            license_key: Generated key
            max_devices: Device slots
            expires_at: Expiry date (YYYY-MM-DD)
            actor_id: Creating admin
            occurred_at: When the event occurred
        """
        super().__init__(event_type=self.event_type, **self.base_fields(license_id, occurred_at))
        self.license_id = license_id
        self.license_key = license_key
        self.max_devices = max_devices
        self.expires_at = expires_at
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            license_key=self.license_key,
            max_devices=self.max_devices,
            expires_at=self.expires_at,
        )
        return data


class LicenseUpdated(DomainEvent):
    """Event raised when an admin edits a license."""

    entity_type = "license"
    action = "update_license"

    def __init__(
        self,
        license_id: uuid.UUID,
        changes: Dict[str, Any],
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(license_id, occurred_at))
        self.license_id = license_id
        self.changes = changes
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["changes"] = self.changes
        return data


class LicenseRevoked(DomainEvent):
    """Event raised when a license is revoked."""

    entity_type = "license"
    action = "revoke_license"

    def __init__(
        self,
        license_id: uuid.UUID,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(license_id, occurred_at))
        self.license_id = license_id
        self.actor_id = str(actor_id) if actor_id else None


class LicenseStatusChanged(DomainEvent):
    """Event raised when an expiry edit flips a license between active and expired."""

    entity_type = "license"
    action = "license_status_changed"

    def __init__(
        self,
        license_id: uuid.UUID,
        old_status: str,
        new_status: str,
        actor_id: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(event_type=self.event_type, **self.base_fields(license_id, occurred_at))
        self.license_id = license_id
        self.old_status = old_status
        self.new_status = new_status
        self.actor_id = str(actor_id) if actor_id else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(old_status=self.old_status, new_status=self.new_status)
        return data


class LicensesExpired(DomainEvent):
    """Event raised once per sweep that expired at least one license."""

    entity_type = "system"
    action = "expire_licenses"

    def __init__(self, count: int, run_date: str, occurred_at: Optional[datetime] = None):
        """
        Initialize LicensesExpired event.

        Args:
            count: Number of licenses transitioned
            run_date: Date the sweep compared against (YYYY-MM-DD)
            occurred_at: When the event occurred
        """
        super().__init__(event_type=self.event_type, **self.base_fields(None, occurred_at))
        self.count = count
        self.run_date = run_date

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(count=self.count, run_date=self.run_date)
        return data
