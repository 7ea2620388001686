"""
Device history query.
"""
import uuid
from dataclasses import dataclass

from admins.domain.admin import AdminAccount
from core.ports.audit_log_repository import DEFAULT_HISTORY_LIMIT


@dataclass
class GetDeviceLogsQuery:
    """Query the recorded activity of one device."""

    actor: AdminAccount
    activation_id: uuid.UUID
    limit: int = DEFAULT_HISTORY_LIMIT
