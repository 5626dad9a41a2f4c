"""
Tests pour le module Catégories

- Arborescence parent / sous-catégories
- Nom unique par tenant
- Protection contre les boucles de rattachement
- Archivage (refusé tant qu'il reste des sous-catégories)
"""

import pytest
from uuid import uuid4

from app.modules.categories.models import Category


def create_category(client, headers, name, **data):
    response = client.post("/api/categories/create", json={"name": name, **data}, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["category"]


@pytest.fixture
def clothing(client, owner_headers):
    return create_category(client, owner_headers, "Vêtements", icon="shirt", color="#3366FF")


class TestCategoryTree:

    def test_children_nested_under_parent(self, client, owner_headers, clothing):
        create_category(client, owner_headers, "Pantalons", parentId=clothing["id"], sortOrder=2)
        create_category(client, owner_headers, "Chemises", parentId=clothing["id"], sortOrder=1)
        create_category(client, owner_headers, "Accessoires")

        body = client.get("/api/categories", headers=owner_headers).json()
        assert body["success"] is True
        assert body["totalCount"] == 4

        roots = body["categories"]
        assert [root["name"] for root in roots] == ["Accessoires", "Vêtements"]
        assert [child["name"] for child in roots[1]["children"]] == ["Chemises", "Pantalons"]
        assert roots[1]["children"][0]["parentId"] == clothing["id"]
        assert roots[1]["icon"] == "shirt"

    def test_archived_hidden_unless_requested(self, client, owner_headers, clothing):
        client.delete(f"/api/categories/{clothing['id']}/delete", headers=owner_headers)

        assert client.get("/api/categories", headers=owner_headers).json()["categories"] == []
        body = client.get("/api/categories", params={"includeArchived": True}, headers=owner_headers).json()
        assert body["categories"][0]["isArchived"] is True

    def test_tenant_isolation(self, client, other_tenant_headers, clothing):
        assert client.get("/api/categories", headers=other_tenant_headers).json()["totalCount"] == 0
        response = client.get(f"/api/categories/{clothing['id']}", headers=other_tenant_headers)
        assert response.status_code == 404


class TestCategoryCreate:

    def test_name_trimmed(self, client, owner_headers):
        category = create_category(client, owner_headers, "  Chaussures ")
        assert category["name"] == "Chaussures"
        assert category["parentId"] is None
        assert category["sortOrder"] == 0

    def test_name_required(self, client, owner_headers, db_session):
        response = client.post("/api/categories/create", json={"name": "  "}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Le nom de la catégorie est obligatoire"
        assert db_session.query(Category).count() == 0

    def test_duplicate_name(self, client, owner_headers, clothing):
        response = client.post("/api/categories/create", json={"name": "Vêtements"}, headers=owner_headers)
        assert response.status_code == 409

    def test_unknown_parent(self, client, owner_headers):
        response = client.post(
            "/api/categories/create", json={"name": "Chemises", "parentId": str(uuid4())}, headers=owner_headers
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Catégorie parente introuvable"

    def test_parent_of_other_tenant(self, client, other_tenant_headers, clothing):
        response = client.post(
            "/api/categories/create", json={"name": "Chemises", "parentId": clothing["id"]}, headers=other_tenant_headers
        )
        assert response.status_code == 404

    def test_seller_cannot_create(self, client, auth_headers):
        response = client.post("/api/categories/create", json={"name": "Divers"}, headers=auth_headers(role="seller"))
        assert response.status_code == 403


class TestCategoryUpdate:

    def test_move_to_root(self, client, owner_headers, clothing):
        shirts = create_category(client, owner_headers, "Chemises", parentId=clothing["id"])

        response = client.patch(
            f"/api/categories/{shirts['id']}/update", json={"parentId": None, "color": "#FF0000"}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["category"]["parentId"] is None
        assert response.json()["category"]["color"] == "#FF0000"

    def test_own_parent_refused(self, client, owner_headers, clothing):
        response = client.patch(
            f"/api/categories/{clothing['id']}/update", json={"parentId": clothing["id"]}, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Une catégorie ne peut pas être son propre parent"

    def test_descendant_as_parent_refused(self, client, owner_headers, clothing):
        shirts = create_category(client, owner_headers, "Chemises", parentId=clothing["id"])
        linen = create_category(client, owner_headers, "Lin", parentId=shirts["id"])

        response = client.patch(
            f"/api/categories/{clothing['id']}/update", json={"parentId": linen["id"]}, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Une catégorie ne peut pas être rattachée à l'une de ses sous-catégories"

    def test_rename_to_existing_name(self, client, owner_headers, clothing):
        shoes = create_category(client, owner_headers, "Chaussures")
        response = client.patch(
            f"/api/categories/{shoes['id']}/update", json={"name": "Vêtements"}, headers=owner_headers
        )
        assert response.status_code == 409


class TestCategoryArchive:

    def test_delete_archives(self, client, owner_headers, clothing, db_session):
        response = client.delete(f"/api/categories/{clothing['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Catégorie supprimée avec succès"
        assert body["category"]["isArchived"] is True
        assert body["category"]["archivedAt"] is not None

        assert db_session.query(Category).count() == 1

    def test_parent_with_children_cannot_be_deleted(self, client, owner_headers, clothing):
        create_category(client, owner_headers, "Chemises", parentId=clothing["id"])

        response = client.delete(f"/api/categories/{clothing['id']}/delete", headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Impossible de supprimer une catégorie contenant des sous-catégories"

    def test_unknown_category(self, client, owner_headers):
        response = client.delete(f"/api/categories/{uuid4()}/delete", headers=owner_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Catégorie introuvable"
