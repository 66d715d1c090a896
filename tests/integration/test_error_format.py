"""Framework-level API errors share one body shape."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration


class TestErrorFormat:
    def test_validation_error(self, client_for, admin_user):
        response = client_for(admin_user).post(
            "/api/v1/orders/", {"quantity": "many"}, format="json"
        )

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        attrs = {error["attr"] for error in body["errors"]}
        assert {"order_id", "marketplace", "quantity"} <= attrs
        assert all({"code", "detail", "attr"} == set(error) for error in body["errors"])

    def test_nested_error_keeps_parent_attr(self, client_for, superadmin_user):
        response = client_for(superadmin_user).put(
            "/api/v1/me/workspace", {"order_draft": "not-a-dict"}, format="json"
        )

        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "order_draft"

    def test_not_authenticated(self, api_client):
        body = api_client.get("/api/v1/orders/").json()

        assert body["type"] == "client_error"
        assert body["errors"][0]["code"] == "not_authenticated"
        assert body["errors"][0]["attr"] is None

    def test_permission_denied(self, client_for, print_user):
        response = client_for(print_user).get("/api/v1/orders/dashboard/")

        assert response.status_code == 403
        body = response.json()
        assert body["type"] == "client_error"
        assert body["errors"][0]["code"] == "permission_denied"
        assert "Super Admin" in body["errors"][0]["detail"]

    def test_domain_errors_keep_plain_detail(self, client_for, admin_user):
        response = client_for(admin_user).get(
            "/api/v1/orders/00000000-0000-0000-0000-000000000000/"
        )
        assert response.json() == {"detail": "Order not found."}
