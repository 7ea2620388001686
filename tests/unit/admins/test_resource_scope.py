"""
Unit tests for resource scope normalization and access checks.
"""

import uuid

import pytest

from admins.domain.scope import (
    ResourceScope,
    can_access,
    canonical_id,
    normalize_permissions,
    normalize_scope,
)
from core.domain.value_objects import ResourceMode


class TestNormalizeScope:
    """Tests for normalize_scope."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("all", ResourceMode.ALL),
            (" NONE ", ResourceMode.NONE),
            ("Own", ResourceMode.OWN),
            ("custom", ResourceMode.CUSTOM),
            ("bogus", ResourceMode.ALL),
            ("", ResourceMode.ALL),
            (None, ResourceMode.ALL),
        ],
    )
    def test_mode(self, raw, expected):
        assert normalize_scope(raw).mode == expected

    def test_selected_ids_dropped_outside_custom(self):
        scope = normalize_scope("own", [str(uuid.uuid4())])

        assert scope.selected_ids == frozenset()

    def test_selected_ids_canonicalized_and_deduplicated(self):
        value = uuid.uuid4()
        scope = normalize_scope(
            "custom", [f"  {str(value).upper()} ", str(value), value, "not-a-uuid", ""]
        )

        assert scope.selected_ids == frozenset({str(value)})

    def test_to_dict_sorts_ids(self):
        ids = sorted(str(uuid.uuid4()) for _ in range(3))
        scope = normalize_scope("custom", list(reversed(ids)))

        assert scope.to_dict() == {"mode": "custom", "selected_ids": ids}


class TestNormalizePermissions:
    """Tests for normalize_permissions."""

    def test_defaults_to_all(self):
        permissions = normalize_permissions({})

        for _, scope in permissions.items():
            assert scope.mode == ResourceMode.ALL

    def test_unknown_types_ignored(self):
        permissions = normalize_permissions(
            {"widgets": {"mode": "none"}, "LICENSES": {"mode": "own"}}
        )

        assert permissions.licenses.mode == ResourceMode.OWN
        assert set(permissions.to_dict()) == {"licenses", "policies", "products"}

    def test_non_mapping_scope_becomes_all(self):
        assert normalize_permissions({"products": "none"}).products.mode == ResourceMode.ALL


class TestCanAccess:
    """Tests for can_access."""

    def setup_method(self):
        self.admin_id = uuid.uuid4()
        self.resource_id = uuid.uuid4()

    def test_all_and_none(self):
        assert can_access(ResourceScope.all(), self.resource_id, None, self.admin_id)
        assert not can_access(ResourceScope.none(), self.resource_id, self.admin_id, self.admin_id)

    def test_own(self):
        scope = normalize_scope("own")

        assert can_access(scope, self.resource_id, self.admin_id, self.admin_id)
        assert can_access(scope, self.resource_id, str(self.admin_id).upper(), self.admin_id)
        assert not can_access(scope, self.resource_id, uuid.uuid4(), self.admin_id)
        assert not can_access(scope, self.resource_id, None, self.admin_id)
        assert not can_access(scope, self.resource_id, None, None)

    def test_custom(self):
        scope = normalize_scope("custom", [self.resource_id])

        assert can_access(scope, self.resource_id, None, self.admin_id)
        assert can_access(scope, str(self.resource_id), None, self.admin_id)
        assert not can_access(scope, uuid.uuid4(), self.admin_id, self.admin_id)

    def test_empty_custom_denies(self):
        assert not can_access(normalize_scope("custom", []), self.resource_id, None, self.admin_id)


def test_canonical_id():
    value = uuid.uuid4()

    assert canonical_id(value) == str(value)
    assert canonical_id(f" {str(value).upper()} ") == str(value)
    assert canonical_id("nope") is None
    assert canonical_id(None) is None
