"""
Integration tests for the admin permissions API.
"""

import uuid

import pytest
from django.urls import reverse

from admins.infrastructure.models import AdminResourceScope
from core.infrastructure.models import AuditLog

ALL = {"mode": "all", "selected_ids": []}


def permissions_url(admin_id):
    return reverse("admin_api:admin-permissions", kwargs={"admin_id": admin_id})


def scope_url(admin_id, resource_type):
    return reverse(
        "admin_api:admin-scope", kwargs={"admin_id": admin_id, "resource_type": resource_type}
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminPermissionsAPI:
    """Integration tests for reading and replacing scopes."""

    def test_default_permissions(self, admin_client, admin_model):
        response = admin_client.get(permissions_url(admin_model.id))

        assert response.status_code == 200
        assert response.json() == {"licenses": ALL, "policies": ALL, "products": ALL}

    def test_replace_normalizes(self, super_client, admin_model):
        first, second = uuid.uuid4(), uuid.uuid4()
        ordered = sorted([str(first), str(second)])

        response = super_client.put(
            permissions_url(admin_model.id),
            {
                "licenses": {
                    "mode": " CUSTOM ",
                    "selected_ids": [str(second).upper(), str(first), str(first), "not-a-uuid"],
                },
                "products": {"mode": "whatever"},
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.json() == {
            "licenses": {"mode": "custom", "selected_ids": ordered},
            "policies": ALL,
            "products": ALL,
        }
        row = AdminResourceScope.objects.get(admin=admin_model, resource_type="licenses")
        assert row.mode == "custom"
        assert sorted(row.selected_ids) == ordered
        assert AuditLog.objects.filter(action="update_admin_permissions").count() == 1

    def test_replace_resets_omitted_types(self, super_client, admin_model):
        super_client.put(
            permissions_url(admin_model.id), {"policies": {"mode": "none"}}, format="json"
        )

        response = super_client.put(
            permissions_url(admin_model.id), {"licenses": {"mode": "own"}}, format="json"
        )

        assert response.json()["policies"] == ALL
        assert response.json()["licenses"] == {"mode": "own", "selected_ids": []}

    def test_replace_requires_super_admin(self, admin_client, other_admin_model):
        response = admin_client.put(
            permissions_url(other_admin_model.id), {"licenses": {"mode": "none"}}, format="json"
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"

    def test_super_admin_target_is_refused(self, super_client, admin_factory):
        other_super = admin_factory("root-2", role="super_admin")

        response = super_client.put(
            permissions_url(other_super.id), {"licenses": {"mode": "none"}}, format="json"
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "SUPER_ADMIN_PERMISSIONS"

    def test_read_other_requires_super_admin(self, admin_client, other_admin_model):
        response = admin_client.get(permissions_url(other_admin_model.id))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"

    def test_super_admin_reads_anyone(self, super_client, admin_model):
        AdminResourceScope.objects.create(
            admin=admin_model, resource_type="products", mode="none", selected_ids=[]
        )

        response = super_client.get(permissions_url(admin_model.id))

        assert response.json()["products"] == {"mode": "none", "selected_ids": []}

    def test_unknown_admin(self, super_client):
        response = super_client.get(permissions_url(uuid.uuid4()))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ADMIN_NOT_FOUND"


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminScopeAPI:
    """Integration tests for replacing a single scope."""

    def test_set_one_scope_keeps_others(self, super_client, admin_model):
        AdminResourceScope.objects.create(
            admin=admin_model, resource_type="policies", mode="none", selected_ids=[]
        )
        target = uuid.uuid4()

        response = super_client.put(
            scope_url(admin_model.id, "licenses"),
            {"mode": "custom", "selected_ids": [f"  {target}  "]},
            format="json",
        )

        assert response.status_code == 200
        assert response.json() == {"mode": "custom", "selected_ids": [str(target)]}
        stored = super_client.get(permissions_url(admin_model.id)).json()
        assert stored["policies"] == {"mode": "none", "selected_ids": []}

    def test_non_custom_mode_drops_ids(self, super_client, admin_model):
        response = super_client.put(
            scope_url(admin_model.id, "products"),
            {"mode": "own", "selected_ids": [str(uuid.uuid4())]},
            format="json",
        )

        assert response.json() == {"mode": "own", "selected_ids": []}

    def test_unknown_resource_type(self, super_client, admin_model):
        response = super_client.put(
            scope_url(admin_model.id, "widgets"), {"mode": "all"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_RESOURCE_TYPE"

    def test_requires_super_admin(self, admin_client, other_admin_model):
        response = admin_client.put(
            scope_url(other_admin_model.id, "licenses"), {"mode": "none"}, format="json"
        )

        assert response.status_code == 403

    def test_unknown_admin(self, super_client):
        response = super_client.put(
            scope_url(uuid.uuid4(), "licenses"), {"mode": "none"}, format="json"
        )

        assert response.status_code == 404
