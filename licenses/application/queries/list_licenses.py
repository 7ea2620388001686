"""
ListLicensesQuery.

Query to list the licenses visible to an admin.
"""
from dataclasses import dataclass
from typing import Optional

from admins.domain.admin import AdminAccount


@dataclass
class ListLicensesQuery:
    """Query licenses visible to ``actor``, optionally filtered."""

    actor: AdminAccount
    status: Optional[str] = None
    search: Optional[str] = None
