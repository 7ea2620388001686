"""
Admin device commands.
"""
import uuid
from dataclasses import dataclass

from admins.domain.admin import AdminAccount


@dataclass
class DeactivateDeviceCommand:
    """Command to free the slot held by a device."""

    actor: AdminAccount
    activation_id: uuid.UUID


@dataclass
class ReactivateDeviceCommand:
    """Command to bring a deactivated device back."""

    actor: AdminAccount
    activation_id: uuid.UUID


@dataclass
class DeleteDeviceCommand:
    """Command to hard-delete a device activation."""

    actor: AdminAccount
    activation_id: uuid.UUID


@dataclass
class CleanupDevicesCommand:
    """Command to purge devices deactivated at least ``days`` days ago."""

    actor: AdminAccount
    days: int = 90
