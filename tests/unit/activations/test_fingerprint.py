"""
Unit tests for device fingerprinting.
"""

import hashlib
from dataclasses import replace

from activations.domain.fingerprint import generate_device_fingerprint


class TestDeviceFingerprint:
    """Tests for generate_device_fingerprint."""

    def test_deterministic(self, device_info):
        assert generate_device_fingerprint(device_info("a")) == generate_device_fingerprint(
            device_info("a")
        )

    def test_known_digest(self, device_info):
        """Test the digest covers the hardware fields in order."""
        info = device_info("a")
        payload = "|".join(
            [
                info.client_id,
                info.cpu_id,
                info.motherboard_sn,
                info.mac_address,
                info.disk_serial,
                info.machine_id,
            ]
        )

        assert generate_device_fingerprint(info) == hashlib.sha256(payload.encode()).hexdigest()

    def test_hex_digest_shape(self, device_info):
        fingerprint = generate_device_fingerprint(device_info("a"))

        assert len(fingerprint) == 64
        assert fingerprint == fingerprint.lower()

    def test_display_fields_do_not_matter(self, device_info):
        info = device_info("a")
        renamed = replace(info, hostname="renamed", os="Linux", os_version="6.1")

        assert generate_device_fingerprint(renamed) == generate_device_fingerprint(info)

    def test_each_hardware_field_matters(self, device_info):
        info = device_info("a")
        original = generate_device_fingerprint(info)

        for name in ("client_id", "cpu_id", "motherboard_sn", "mac_address", "disk_serial", "machine_id"):
            changed = replace(info, **{name: getattr(info, name) + "x"})
            assert generate_device_fingerprint(changed) != original, name
