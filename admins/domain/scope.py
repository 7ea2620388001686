"""
Resource scope domain objects.

A scope describes which records of one resource type an admin may see:
everything, nothing, the records they own, or an explicit ID set.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from core.domain.value_objects import ResourceMode, ResourceType, ValueObject


def canonical_id(value: Any) -> Optional[str]:
    """Return the canonical (lower-case hyphenated) UUID string, or None."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return str(value)
    try:
        return str(uuid.UUID(str(value).strip()))
    except ValueError:
        return None


@dataclass(frozen=True)
class ResourceScope(ValueObject):
    """Visibility mode plus the selected IDs used by custom mode."""

    mode: ResourceMode
    selected_ids: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def all(cls) -> "ResourceScope":
        return cls(mode=ResourceMode.ALL)

    @classmethod
    def none(cls) -> "ResourceScope":
        return cls(mode=ResourceMode.NONE)

    @property
    def sorted_ids(self) -> Tuple[str, ...]:
        return tuple(sorted(self.selected_ids))

    def to_dict(self) -> Dict[str, Any]:
        return {"mode": self.mode.value, "selected_ids": list(self.sorted_ids)}


def normalize_scope(mode: Any, selected_ids: Optional[Iterable[Any]] = None) -> ResourceScope:
    """
    Build a scope from raw input.

    The mode is trimmed and lower-cased; unrecognized modes become ``all``.
    Selected IDs are kept only for ``custom``: each is trimmed and parsed
    as a UUID (unparseable entries are dropped), then de-duplicated.
    """
    resolved_mode = ResourceMode.parse(mode)
    if resolved_mode != ResourceMode.CUSTOM:
        return ResourceScope(mode=resolved_mode)
    ids = {canonical_id(value) for value in (selected_ids or [])}
    ids.discard(None)
    return ResourceScope(mode=resolved_mode, selected_ids=frozenset(ids))


@dataclass(frozen=True)
class AdminResourcePermissions:
    """One scope per known resource type."""

    licenses: ResourceScope = field(default_factory=ResourceScope.all)
    policies: ResourceScope = field(default_factory=ResourceScope.all)
    products: ResourceScope = field(default_factory=ResourceScope.all)

    def for_type(self, resource_type: ResourceType) -> ResourceScope:
        return getattr(self, resource_type.value)

    def items(self):
        return [(rt, self.for_type(rt)) for rt in ResourceType]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {rt.value: scope.to_dict() for rt, scope in self.items()}


def normalize_permissions(payload: Optional[Mapping[str, Any]]) -> AdminResourcePermissions:
    """
    Normalize a ``{resource_type: {mode, selected_ids}}`` mapping.

    Unknown resource types are ignored and missing ones default to ``all``,
    so the result always has exactly one scope per resource type.
    """
    values = {}
    for key, raw in (payload or {}).items():
        resource_type = ResourceType.parse(key)
        if resource_type is None:
            continue
        raw = raw if isinstance(raw, Mapping) else {}
        values[resource_type.value] = normalize_scope(raw.get("mode"), raw.get("selected_ids"))
    return AdminResourcePermissions(**values)


def can_access(scope: ResourceScope, resource_id: Any, owner_id: Any, admin_id: Any) -> bool:
    """
    Decide whether a single, already-fetched record is visible.

    Mirrors the listing filter built by
    ``admins.infrastructure.scope_filters.build_scope_filter``.
    """
    if scope.mode == ResourceMode.ALL:
        return True
    if scope.mode == ResourceMode.NONE:
        return False
    if scope.mode == ResourceMode.OWN:
        owner = canonical_id(owner_id)
        admin = canonical_id(admin_id)
        return owner is not None and admin is not None and owner == admin
    resource = canonical_id(resource_id)
    return resource is not None and resource in scope.selected_ids
