"""
License DTOs for API responses.

Dates and timestamps are rendered by the canonical clock, so every
response uses the same time zone.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.infrastructure.clock import Clock
from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    license_key: str
    product_id: Optional[uuid.UUID]
    product_name: str
    policy_id: Optional[uuid.UUID]
    customer_name: str
    customer_email: str
    max_devices: int
    active_devices: int
    expires_at: str
    status: str
    owner_id: Optional[uuid.UUID]
    notes: str
    created_at: Optional[str]
    updated_at: Optional[str]

    @classmethod
    def from_entity(cls, license: License, active_devices: int, clock: Clock) -> "LicenseDTO":
        """
        Build a DTO from a License entity.

        Args:
            license: License entity
            active_devices: Current count of active device activations
            clock: Clock used to format dates

        Returns:
            LicenseDTO
        """
        return cls(
            id=license.id,
            license_key=license.license_key,
            product_id=license.product_id,
            product_name=license.product_name,
            policy_id=license.policy_id,
            customer_name=license.customer_name,
            customer_email=license.customer_email,
            max_devices=license.max_devices,
            active_devices=active_devices,
            expires_at=clock.format_date(license.expires_at),
            status=license.status.value,
            owner_id=license.owner_id,
            notes=license.notes,
            created_at=clock.format_timestamp(license.created_at),
            updated_at=clock.format_timestamp(license.updated_at),
        )
