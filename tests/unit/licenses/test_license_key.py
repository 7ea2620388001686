"""
Unit tests for license key generation.
"""

import re

from licenses.domain.license_key import generate_license_key, normalize_license_key

KEY_PATTERN = re.compile(r"^[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}$")


def test_generated_key_format():
    for _ in range(20):
        assert KEY_PATTERN.match(generate_license_key())


def test_generated_keys_differ():
    keys = {generate_license_key() for _ in range(50)}
    assert len(keys) == 50


def test_normalize_license_key():
    assert normalize_license_key("  3f9a-01bc-77d2-e4a0 ") == "3F9A-01BC-77D2-E4A0"
    assert normalize_license_key(None) == ""
