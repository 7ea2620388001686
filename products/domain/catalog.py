"""
Read-only catalog views delivered to activated clients.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PolicySnapshot:
    """A policy as delivered to a client."""

    id: uuid.UUID
    policy_name: str
    policy_data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProductFileSnapshot:
    """An active product file and its metadata."""

    id: uuid.UUID
    file_id: uuid.UUID
    label: str
    description: str
    file_name: str
    file_size: int
    mime_type: str
    checksum: str
    sort_order: int
    delivery_url: str = ""


@dataclass(frozen=True)
class ProductSnapshot:
    id: uuid.UUID
    name: str
    owner_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class StoredFile:
    """Location of a file asset on disk."""

    id: uuid.UUID
    original_name: str
    storage_path: str
    mime_type: str
