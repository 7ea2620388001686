"""
Activation DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from activations.domain.activation import DeviceActivation
from core.domain.audit import AuditEntry
from core.infrastructure.clock import Clock


@dataclass
class PolicyDTO:
    """Policy delivered to a client."""

    id: uuid.UUID
    policy_name: str
    policy_data: Dict[str, Any]


@dataclass
class ProductFileDTO:
    """Product file delivered to a client, with a link to fetch it."""

    id: uuid.UUID
    file_id: uuid.UUID
    label: str
    description: str
    file_name: str
    file_size: int
    mime_type: str
    checksum: str
    sort_order: int
    download_url: str


@dataclass
class ActivationResultDTO:
    """DTO for activate response."""

    license_key: str
    device_id: uuid.UUID
    product_id: Optional[uuid.UUID]
    product_name: str
    expires_at: str
    created: bool
    policies: List[PolicyDTO] = field(default_factory=list)
    product_files: List[ProductFileDTO] = field(default_factory=list)


@dataclass
class ValidationResultDTO:
    """DTO for validate response."""

    license_key: str
    valid: bool
    device_id: uuid.UUID
    expires_at: str
    policies: List[PolicyDTO] = field(default_factory=list)
    product_files: List[ProductFileDTO] = field(default_factory=list)


@dataclass
class DeviceDTO:
    """DTO for device activation information."""

    id: uuid.UUID
    license_id: uuid.UUID
    device_fingerprint: str
    device_name: str
    device_info: Dict[str, Any]
    status: str
    activated_at: Optional[str]
    last_validated_at: Optional[str]
    deactivated_at: Optional[str]

    @classmethod
    def from_entity(cls, activation: DeviceActivation, clock: Clock) -> "DeviceDTO":
        return cls(
            id=activation.id,
            license_id=activation.license_id,
            device_fingerprint=activation.device_fingerprint,
            device_name=activation.device_name,
            device_info=activation.device_info,
            status=activation.status.value,
            activated_at=clock.format_timestamp(activation.activated_at),
            last_validated_at=clock.format_timestamp(activation.last_validated_at),
            deactivated_at=clock.format_timestamp(activation.deactivated_at),
        )


@dataclass
class ActivityLogDTO:
    """DTO for one audit trail entry of a device or license."""

    id: uuid.UUID
    entity_type: str
    entity_id: str
    action: str
    actor: str
    details: Dict[str, Any]
    created_at: Optional[str]

    @classmethod
    def from_entry(cls, entry: AuditEntry, clock: Clock) -> "ActivityLogDTO":
        return cls(
            id=entry.id,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            action=entry.action,
            actor=entry.actor,
            details=entry.details,
            created_at=clock.format_timestamp(entry.created_at),
        )
