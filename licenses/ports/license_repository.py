"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, List, Optional

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity

        Raises:
            DuplicateResourceError: If the license key is already taken
        """

    @abstractmethod
    async def save_within_active_count(self, license: License) -> License:
        """
        Save a license, refusing if its max_devices is below the active device count.

        The count and the write form one critical section with device
        activation on the same license.

        Args:
            license: License entity to save

        Returns:
            Saved license entity

        Raises:
            LicenseNotFoundError: If the license disappeared
            MaxDevicesBelowActiveCountError: If max_devices is below the
                number of active devices
        """

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            license_key: Normalized license key

        Returns:
            License entity or None if not found
        """

    @abstractmethod
    async def list(
        self,
        scope_filter: Any = None,
        status: Optional[LicenseStatus] = None,
        search: Optional[str] = None,
    ) -> List[License]:
        """
        List licenses visible under a scope filter.

        Args:
            scope_filter: Storage-specific predicate from the scope resolver
            status: Optional status filter
            search: Optional case-insensitive match on key, customer or product

        Returns:
            List of License entities, newest first
        """

    @abstractmethod
    async def find_overdue(self, today: date) -> List[License]:
        """
        Find active licenses whose expiry date is before ``today``.

        Args:
            today: Current date in the canonical time zone

        Returns:
            List of License entities
        """

    @abstractmethod
    async def expire_overdue(self, today: date, now: datetime) -> int:
        """
        Bulk-transition every active license expiring before ``today`` to expired.

        Args:
            today: Current date in the canonical time zone
            now: Timestamp stamped into updated_at

        Returns:
            Number of licenses transitioned
        """
