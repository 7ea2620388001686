"""
License domain entity.

This is the core domain entity representing a license and its status
state machine:

    active  -> expired   (sweeper, or expiry edited into the past)
    active  -> revoked   (administrative, terminal)
    expired -> active    (expiry edited to today or later)

It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from core.domain.exceptions import LicenseExpiredError, LicenseInactiveError
from core.domain.value_objects import LicenseStatus


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Expiry is date-only: a license expiring today is usable for the whole
    of today in the canonical time zone.
    """

    id: uuid.UUID
    license_key: str
    product_id: Optional[uuid.UUID]
    policy_id: Optional[uuid.UUID]
    product_name: str
    customer_name: str
    customer_email: str
    max_devices: int
    expires_at: date
    status: LicenseStatus
    owner_id: Optional[uuid.UUID]
    notes: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        if not self.license_key:
            raise ValueError("License key is required")
        if self.max_devices < 1:
            raise ValueError("max_devices must be at least 1")

    @classmethod
    def create(
        cls,
        license_key: str,
        expires_at: date,
        now: datetime,
        max_devices: int = 1,
        product_id: Optional[uuid.UUID] = None,
        policy_id: Optional[uuid.UUID] = None,
        product_name: str = "",
        customer_name: str = "",
        customer_email: str = "",
        owner_id: Optional[uuid.UUID] = None,
        notes: str = "",
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new active License.

        Args:
            license_key: Generated license key
            expires_at: Last day the license is usable
            now: Creation timestamp from the canonical clock
            max_devices: Number of device slots
            product_id: Optional product UUID
            policy_id: Optional policy UUID
            product_name: Product name snapshot
            customer_name: Customer name
            customer_email: Customer email
            owner_id: Creating admin
            notes: Free-form notes
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        return cls(
            id=license_id or uuid.uuid4(),
            license_key=license_key,
            product_id=product_id,
            policy_id=policy_id,
            product_name=product_name,
            customer_name=customer_name,
            customer_email=customer_email,
            max_devices=max_devices,
            expires_at=expires_at,
            status=LicenseStatus.ACTIVE,
            owner_id=owner_id,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    def is_expired(self, today: date) -> bool:
        """True iff the expiry date is strictly before ``today``."""
        return self.expires_at < today

    def is_usable(self, today: date) -> bool:
        """True iff the license is active and not past its expiry date."""
        return self.status == LicenseStatus.ACTIVE and not self.is_expired(today)

    def ensure_usable(self, today: date) -> None:
        """
        Raise unless the license can be used for activation or validation.

        Raises:
            LicenseExpiredError: If expired by status or by date
            LicenseInactiveError: If revoked
        """
        if self.status == LicenseStatus.REVOKED:
            raise LicenseInactiveError("License has been revoked")
        if self.status == LicenseStatus.EXPIRED or self.is_expired(today):
            raise LicenseExpiredError()
        if self.status != LicenseStatus.ACTIVE:
            raise LicenseInactiveError()

    def revoke(self, now: datetime) -> "License":
        """
        Revoke the license. Revoking is terminal and idempotent.

        Returns:
            New License instance with revoked status
        """
        if self.status == LicenseStatus.REVOKED:
            return self
        return replace(self, status=LicenseStatus.REVOKED, updated_at=now)

    def mark_expired(self, now: datetime) -> "License":
        """
        Returns:
            New License instance with expired status
        """
        if self.status != LicenseStatus.ACTIVE:
            return self
        return replace(self, status=LicenseStatus.EXPIRED, updated_at=now)

    def change_expiry(self, expires_at: date, today: date, now: datetime) -> "License":
        """
        Set a new expiry date and apply the automatic status transitions.

        An expired license whose expiry moves to today or later becomes
        active again; an active license whose expiry moves into the past
        becomes expired. Revoked licenses keep their status.

        Returns:
            New License instance
        """
        status = self.status
        if status == LicenseStatus.EXPIRED and expires_at >= today:
            status = LicenseStatus.ACTIVE
        elif status == LicenseStatus.ACTIVE and expires_at < today:
            status = LicenseStatus.EXPIRED
        return replace(self, expires_at=expires_at, status=status, updated_at=now)

    def update_details(self, now: datetime, **changes) -> "License":
        """
        Return a copy with plain field changes (no status effects).

        Args:
            now: Update timestamp
            **changes: Any of customer_name, customer_email, notes,
                max_devices, policy_id, product_id, product_name

        Returns:
            New License instance
        """
        allowed = {
            "customer_name",
            "customer_email",
            "notes",
            "max_devices",
            "policy_id",
            "product_id",
            "product_name",
        }
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        return replace(self, updated_at=now, **changes)
