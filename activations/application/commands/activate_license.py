"""
Client activation commands.

Commands sent by installed clients to bind or check a device.
"""

from dataclasses import dataclass

from core.domain.value_objects import DeviceInfo


@dataclass
class ActivateDeviceCommand:
    """Command to activate a device against a license key."""

    license_key: str
    device_info: DeviceInfo


@dataclass
class ValidateDeviceCommand:
    """Command to confirm a device still holds a slot on a license."""

    license_key: str
    device_info: DeviceInfo
