"""
RevokeLicenseCommand.

Command to revoke a license.
"""
import uuid
from dataclasses import dataclass

from admins.domain.admin import AdminAccount


@dataclass
class RevokeLicenseCommand:
    """Command to revoke a license. Revocation is terminal."""

    actor: AdminAccount
    license_id: uuid.UUID
