"""
Tests pour le module Marques
"""

import pytest


def create_brand(client, headers, name="Nike", **data):
    response = client.post("/api/brands/create", json={"name": name, **data}, headers=headers)
    assert response.status_code == 201
    return response.json()["brand"]


class TestBrands:

    def test_create_brand(self, client, owner_headers):
        brand = create_brand(client, owner_headers, name="  Adidas ", description=" Sport ")
        assert brand["name"] == "Adidas"
        assert brand["description"] == "Sport"
        assert brand["isArchived"] is False

    def test_name_required(self, client, owner_headers):
        response = client.post("/api/brands/create", json={"name": ""}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Le nom de la marque est requis"

    def test_duplicate_name(self, client, owner_headers):
        create_brand(client, owner_headers)
        response = client.post("/api/brands/create", json={"name": "Nike"}, headers=owner_headers)
        assert response.status_code == 409

    def test_list_sorted(self, client, owner_headers):
        for name in ("Puma", "Asics"):
            create_brand(client, owner_headers, name=name)
        brands = client.get("/api/brands", headers=owner_headers).json()["brands"]
        assert [b["name"] for b in brands] == ["Asics", "Puma"]

    def test_delete_archives(self, client, owner_headers):
        brand = create_brand(client, owner_headers)

        response = client.delete(f"/api/brands/{brand['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        archived = response.json()["brand"]
        assert archived["isArchived"] is True
        assert archived["archivedAt"] is not None

        assert client.get("/api/brands", headers=owner_headers).json()["count"] == 0
        listing = client.get("/api/brands", params={"includeArchived": True}, headers=owner_headers).json()
        assert listing["count"] == 1

    def test_restore_through_update(self, client, owner_headers):
        brand = create_brand(client, owner_headers)
        client.delete(f"/api/brands/{brand['id']}/delete", headers=owner_headers)

        response = client.patch(
            f"/api/brands/{brand['id']}/update", json={"isArchived": False}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["brand"]["archivedAt"] is None

    def test_tenant_isolation(self, client, owner_headers, other_tenant_headers):
        brand = create_brand(client, owner_headers)

        assert client.get("/api/brands", headers=other_tenant_headers).json()["count"] == 0
        response = client.patch(
            f"/api/brands/{brand['id']}/update", json={"name": "Reebok"}, headers=other_tenant_headers
        )
        assert response.status_code == 404
        # Same name is free in another tenant
        create_brand(client, other_tenant_headers)
