"""
License detail queries.
"""
import uuid
from dataclasses import dataclass

from admins.domain.admin import AdminAccount
from core.ports.audit_log_repository import DEFAULT_HISTORY_LIMIT


@dataclass
class GetLicenseQuery:
    """Query a single license by ID."""

    actor: AdminAccount
    license_id: uuid.UUID


@dataclass
class ListLicenseDevicesQuery:
    """Query the device activations of a license."""

    actor: AdminAccount
    license_id: uuid.UUID


@dataclass
class GetLicenseLogsQuery:
    """Query the recorded changes of a license."""

    actor: AdminAccount
    license_id: uuid.UUID
    limit: int = DEFAULT_HISTORY_LIMIT
