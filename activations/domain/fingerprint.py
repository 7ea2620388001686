"""
Device fingerprint function.

The fingerprint is a SHA-256 hex digest over the hardware identifiers a
client reports, in a fixed order. It is an equality key, not a secret.
"""
import hashlib

from core.domain.value_objects import DeviceInfo

FINGERPRINT_FIELDS = (
    "client_id",
    "cpu_id",
    "motherboard_sn",
    "mac_address",
    "disk_serial",
    "machine_id",
)
FINGERPRINT_SEPARATOR = "|"


def generate_device_fingerprint(device_info: DeviceInfo) -> str:
    """
    Compute the fingerprint of a device.

    Display fields (hostname, OS) do not take part, so renaming a machine
    keeps its fingerprint.

    Args:
        device_info: Reported device information

    Returns:
        64-character lower-case hex digest
    """
    payload = FINGERPRINT_SEPARATOR.join(
        getattr(device_info, name) or "" for name in FINGERPRINT_FIELDS
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
