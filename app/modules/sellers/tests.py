"""
Tests pour le module Vendeurs

- Code vendeur unique par tenant
- Associations vendeur <-> établissements
- Désactivation
"""

import pytest
from uuid import uuid4


class TestSellers:

    def test_create_with_establishments(self, client, owner_headers, establishment):
        response = client.post(
            "/api/sellers/create",
            json={"name": " Alice ", "code": "V001", "establishmentIds": [establishment["id"]]},
            headers=owner_headers,
        )
        assert response.status_code == 201
        seller = response.json()["seller"]
        assert seller["name"] == "Alice"
        assert seller["establishmentIds"] == [establishment["id"]]

    def test_duplicate_code_conflicts(self, client, owner_headers):
        client.post("/api/sellers/create", json={"name": "Alice", "code": "V001"}, headers=owner_headers)
        response = client.post("/api/sellers/create", json={"name": "Bruno", "code": "V001"}, headers=owner_headers)
        assert response.status_code == 409

    def test_same_code_in_other_tenant(self, client, owner_headers, other_tenant_headers):
        client.post("/api/sellers/create", json={"name": "Alice", "code": "V001"}, headers=owner_headers)
        response = client.post(
            "/api/sellers/create", json={"name": "Alice", "code": "V001"}, headers=other_tenant_headers
        )
        assert response.status_code == 201

    def test_unknown_establishment(self, client, owner_headers):
        response = client.post(
            "/api/sellers/create",
            json={"name": "Alice", "establishmentIds": [str(uuid4())]},
            headers=owner_headers,
        )
        assert response.status_code == 404

    def test_missing_name(self, client, owner_headers):
        response = client.post("/api/sellers/create", json={"code": "V001"}, headers=owner_headers)
        assert response.status_code == 400

    def test_replace_establishments(self, client, owner_headers, establishment):
        seller = client.post(
            "/api/sellers/create",
            json={"name": "Alice", "establishmentIds": [establishment["id"]]},
            headers=owner_headers,
        ).json()["seller"]

        response = client.patch(
            f"/api/sellers/{seller['id']}/update",
            json={"establishmentIds": []},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json()["seller"]["establishmentIds"] == []

    def test_list_establishments(self, client, owner_headers, establishment):
        seller = client.post(
            "/api/sellers/create",
            json={"name": "Alice", "establishmentIds": [establishment["id"]]},
            headers=owner_headers,
        ).json()["seller"]

        response = client.get(f"/api/sellers/{seller['id']}/establishments", headers=owner_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["establishmentIds"] == [establishment["id"]]
        assert body["establishments"][0]["name"] == establishment["name"]

    def test_delete_deactivates(self, client, owner_headers):
        seller = client.post("/api/sellers/create", json={"name": "Alice"}, headers=owner_headers).json()["seller"]

        response = client.delete(f"/api/sellers/{seller['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        assert client.get("/api/sellers", headers=owner_headers).json()["count"] == 0

    def test_other_tenant_cannot_delete(self, client, owner_headers, other_tenant_headers):
        seller = client.post("/api/sellers/create", json={"name": "Alice"}, headers=owner_headers).json()["seller"]

        response = client.delete(f"/api/sellers/{seller['id']}/delete", headers=other_tenant_headers)
        assert response.status_code == 404
        assert client.get("/api/sellers", headers=owner_headers).json()["count"] == 1
