"""
UpdateLicenseCommand.

Command to edit a license. Only fields that were provided are applied;
fields left as UNSET keep their stored value.
"""
import uuid
from dataclasses import dataclass, fields
from typing import Any, Dict

from admins.domain.admin import AdminAccount
from core.domain.value_objects import UNSET


@dataclass
class UpdateLicenseCommand:
    """Command to update a license."""

    actor: AdminAccount
    license_id: uuid.UUID
    expires_at: Any = UNSET
    max_devices: Any = UNSET
    policy_id: Any = UNSET
    customer_name: Any = UNSET
    customer_email: Any = UNSET
    notes: Any = UNSET

    def provided(self) -> Dict[str, Any]:
        """Return the editable fields that were explicitly set."""
        skip = {"actor", "license_id"}
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in skip and getattr(self, f.name) is not UNSET
        }
