"""
Translate resource scopes into Django ORM filters.
"""
import uuid
from typing import Any, Optional

from django.db.models import Q

from admins.domain.scope import ResourceScope, canonical_id
from core.domain.value_objects import ResourceMode

# A predicate no row satisfies
NOTHING = Q(pk__in=[])


def build_scope_filter(
    scope: ResourceScope,
    owner_field: Optional[str],
    id_field: str,
    admin_id: Any,
) -> Q:
    """
    Build a Q object to AND into a listing query.

    Args:
        scope: Resolved scope
        owner_field: Lookup of the owning admin (e.g. "owner_id"), None when
            the resource has no owner
        id_field: Lookup of the resource ID (e.g. "id")
        admin_id: ID of the admin doing the listing

    Returns:
        Q object; agrees with ``admins.domain.scope.can_access`` for every mode
    """
    if scope.mode == ResourceMode.ALL:
        return Q()
    if scope.mode == ResourceMode.NONE:
        return NOTHING
    if scope.mode == ResourceMode.OWN:
        admin = canonical_id(admin_id)
        if not owner_field or admin is None:
            return NOTHING
        return Q(**{owner_field: uuid.UUID(admin)})
    if not scope.selected_ids:
        return NOTHING
    return Q(**{f"{id_field}__in": [uuid.UUID(value) for value in scope.sorted_ids]})
