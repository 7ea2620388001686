"""
CreateLicenseCommand.

Command to issue a new license.
"""
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from admins.domain.admin import AdminAccount


@dataclass
class CreateLicenseCommand:
    """
    Command to create a license.

    The license key is generated; the product name is copied from the
    product so the license stays readable if the product is deleted.
    """

    actor: AdminAccount
    expires_at: Union[str, date]
    max_devices: int = 1
    product_id: Optional[uuid.UUID] = None
    policy_id: Optional[uuid.UUID] = None
    customer_name: str = ""
    customer_email: str = ""
    notes: str = ""
