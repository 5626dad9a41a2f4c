"""
Tests pour le module Fournisseurs
"""

import pytest


class TestSuppliers:

    def test_create_supplier(self, client, owner_headers):
        response = client.post(
            "/api/suppliers/create",
            json={"name": " Grossiste Nord ", "contact": "M. Martin", "email": "contact@nord.fr", "phone": ""},
            headers=owner_headers,
        )
        assert response.status_code == 201
        supplier = response.json()["supplier"]
        assert supplier["name"] == "Grossiste Nord"
        assert supplier["phone"] is None
        assert supplier["email"] == "contact@nord.fr"

    def test_name_required(self, client, owner_headers):
        response = client.post("/api/suppliers/create", json={"contact": "M. Martin"}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

    def test_invalid_email(self, client, owner_headers):
        response = client.post(
            "/api/suppliers/create", json={"name": "Nord", "email": "nord"}, headers=owner_headers
        )
        assert response.status_code == 400

    def test_update_and_archive(self, client, owner_headers):
        supplier = client.post(
            "/api/suppliers/create", json={"name": "Nord"}, headers=owner_headers
        ).json()["supplier"]

        response = client.patch(
            f"/api/suppliers/{supplier['id']}/update", json={"address": "1 quai du Port"}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["supplier"]["address"] == "1 quai du Port"

        response = client.delete(f"/api/suppliers/{supplier['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["supplier"]["isArchived"] is True
        assert client.get("/api/suppliers", headers=owner_headers).json()["count"] == 0

    def test_seller_cannot_create(self, client, auth_headers):
        response = client.post(
            "/api/suppliers/create", json={"name": "Nord"}, headers=auth_headers(role="seller")
        )
        assert response.status_code == 403

    def test_tenant_isolation(self, client, owner_headers, other_tenant_headers):
        supplier = client.post(
            "/api/suppliers/create", json={"name": "Nord"}, headers=owner_headers
        ).json()["supplier"]

        response = client.delete(f"/api/suppliers/{supplier['id']}/delete", headers=other_tenant_headers)
        assert response.status_code == 404
        assert client.get("/api/suppliers", headers=owner_headers).json()["count"] == 1
