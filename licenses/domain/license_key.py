"""
License key generation.

Keys are 8 random bytes rendered as upper-case hex in four dash-separated
groups, e.g. ``3F9A-01BC-77D2-E4A0``.
"""
import secrets

KEY_BYTES = 8
GROUP_SIZE = 4


def generate_license_key() -> str:
    """Generate a new random license key."""
    raw = secrets.token_hex(KEY_BYTES).upper()
    return "-".join(raw[i:i + GROUP_SIZE] for i in range(0, len(raw), GROUP_SIZE))


def normalize_license_key(value: str) -> str:
    """Trim and upper-case a key as typed by a user."""
    return (value or "").strip().upper()
