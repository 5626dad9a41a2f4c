"""
Tests pour le module Variations (groupes et valeurs)
"""

import pytest
from uuid import uuid4


@pytest.fixture
def size_group(client, owner_headers):
    response = client.post("/api/variations/groups/create", json={"name": "Taille"}, headers=owner_headers)
    assert response.status_code == 201
    return response.json()["group"]


def create_variation(client, headers, group_id, name, sort_order=0):
    response = client.post(
        "/api/variations/create",
        json={"groupId": group_id, "name": name, "sortOrder": sort_order},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["variation"]


class TestVariationCatalog:

    def test_catalog_sorted_by_sort_order(self, client, owner_headers, size_group):
        create_variation(client, owner_headers, size_group["id"], "L", 2)
        create_variation(client, owner_headers, size_group["id"], "S", 0)
        create_variation(client, owner_headers, size_group["id"], "M", 1)

        body = client.get("/api/variations", headers=owner_headers).json()
        assert body["success"] is True
        group = body["groups"][0]
        assert group["name"] == "Taille"
        assert [v["name"] for v in group["variations"]] == ["S", "M", "L"]

    def test_archived_variations_hidden(self, client, owner_headers, size_group):
        small = create_variation(client, owner_headers, size_group["id"], "S")
        create_variation(client, owner_headers, size_group["id"], "M", 1)

        response = client.delete(f"/api/variations/{small['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["variation"]["isArchived"] is True

        group = client.get("/api/variations", headers=owner_headers).json()["groups"][0]
        assert [v["name"] for v in group["variations"]] == ["M"]

    def test_tenant_isolation(self, client, other_tenant_headers, size_group):
        body = client.get("/api/variations", headers=other_tenant_headers).json()
        assert body["groups"] == []


class TestVariationGroups:

    def test_group_name_required(self, client, owner_headers):
        response = client.post("/api/variations/groups/create", json={"name": " "}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Le nom du groupe est requis"

    def test_rename_group(self, client, owner_headers, size_group):
        response = client.patch(
            f"/api/variations/groups/{size_group['id']}/update", json={"name": "Pointure"}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["group"]["name"] == "Pointure"

    def test_group_with_variations_cannot_be_deleted(self, client, owner_headers, size_group):
        create_variation(client, owner_headers, size_group["id"], "S")

        response = client.delete(f"/api/variations/groups/{size_group['id']}/delete", headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Impossible de supprimer un groupe contenant 1 variation(s)"

    def test_group_with_variations_cannot_be_archived_by_update(self, client, owner_headers, size_group):
        create_variation(client, owner_headers, size_group["id"], "S")

        response = client.patch(
            f"/api/variations/groups/{size_group['id']}/update", json={"isArchived": True}, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Impossible de supprimer un groupe contenant 1 variation(s)"

        groups = client.get("/api/variations/groups", headers=owner_headers).json()["groups"]
        assert groups[0]["isArchived"] is False

    def test_empty_group_archived(self, client, owner_headers, size_group):
        response = client.delete(f"/api/variations/groups/{size_group['id']}/delete", headers=owner_headers)
        assert response.status_code == 200

        assert client.get("/api/variations/groups", headers=owner_headers).json()["count"] == 0
        archived = client.get(
            "/api/variations/groups", params={"includeArchived": True}, headers=owner_headers
        ).json()
        assert archived["groups"][0]["isArchived"] is True


class TestVariations:

    def test_unknown_group(self, client, owner_headers):
        response = client.post(
            "/api/variations/create", json={"groupId": str(uuid4()), "name": "S"}, headers=owner_headers
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Groupe de variation introuvable"

    def test_group_of_other_tenant(self, client, other_tenant_headers, size_group):
        response = client.post(
            "/api/variations/create", json={"groupId": size_group["id"], "name": "S"}, headers=other_tenant_headers
        )
        assert response.status_code == 404

    def test_negative_sort_order(self, client, owner_headers, size_group):
        response = client.post(
            "/api/variations/create",
            json={"groupId": size_group["id"], "name": "S", "sortOrder": -1},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "sortOrder"

    def test_update_variation(self, client, owner_headers, size_group):
        variation = create_variation(client, owner_headers, size_group["id"], "S")
        response = client.patch(
            f"/api/variations/{variation['id']}/update", json={"name": "XS", "sortOrder": 3}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["variation"]["name"] == "XS"
        assert response.json()["variation"]["sortOrder"] == 3
