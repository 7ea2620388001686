"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. Status, role and scope values are closed enums
parsed at a single point.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


class LicenseStatus(Enum):
    """License status enumeration."""

    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"


class DeviceStatus(Enum):
    """Device activation status enumeration."""

    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class AdminRole(Enum):
    """Administrator role enumeration."""

    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class ResourceType(Enum):
    """Resource types an admin scope can be configured for."""

    LICENSES = "licenses"
    POLICIES = "policies"
    PRODUCTS = "products"

    @classmethod
    def parse(cls, value: str) -> Optional["ResourceType"]:
        """Return the matching resource type, or None when unknown."""
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None


class ResourceMode(Enum):
    """Visibility mode of an admin scope."""

    ALL = "all"
    NONE = "none"
    OWN = "own"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Any) -> "ResourceMode":
        """Lower-case and trim the value; anything unrecognized becomes ALL."""
        normalized = str(value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.ALL


class _Unset:
    """Marker for a field that was not provided in an update."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()


@dataclass(frozen=True)
class DeviceInfo(ValueObject):
    """Hardware identifiers and display labels reported by a client."""

    client_id: str
    cpu_id: str
    motherboard_sn: str
    mac_address: str
    disk_serial: str
    machine_id: str
    hostname: str = ""
    os: str = ""
    os_version: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Return the payload as stored alongside the activation."""
        return {
            "client_id": self.client_id,
            "cpu_id": self.cpu_id,
            "motherboard_sn": self.motherboard_sn,
            "mac_address": self.mac_address,
            "disk_serial": self.disk_serial,
            "machine_id": self.machine_id,
            "hostname": self.hostname,
            "os": self.os,
            "os_version": self.os_version,
        }
