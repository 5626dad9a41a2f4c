"""
Tests pour le module Caisses

- Création rattachée à un établissement du tenant
- Filtre par établissement
- Journal d'audit des opérations sur les caisses
- Désactivation
"""

import pytest
from uuid import uuid4

from app.modules.audit.models import AuditLog
from app.modules.registers.models import Register


class TestRegisterCreate:

    def test_create_register(self, client, owner_headers, establishment):
        response = client.post(
            "/api/registers/create",
            json={"establishmentId": establishment["id"], "name": "  Caisse principale "},
            headers=owner_headers,
        )
        assert response.status_code == 201
        register = response.json()["register"]
        assert register["name"] == "Caisse principale"
        assert register["establishmentId"] == establishment["id"]
        assert register["establishment"]["name"] == establishment["name"]

    def test_unknown_establishment(self, client, owner_headers):
        response = client.post(
            "/api/registers/create",
            json={"establishmentId": str(uuid4()), "name": "Caisse"},
            headers=owner_headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Établissement introuvable"

    def test_establishment_of_other_tenant(self, client, other_tenant_headers, establishment):
        response = client.post(
            "/api/registers/create",
            json={"establishmentId": establishment["id"], "name": "Caisse"},
            headers=other_tenant_headers,
        )
        assert response.status_code == 404

    def test_missing_establishment_id(self, client, owner_headers):
        response = client.post("/api/registers/create", json={"name": "Caisse"}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "establishmentId"

    def test_invalid_payload_writes_nothing(self, client, owner_headers, establishment, db_session):
        response = client.post(
            "/api/registers/create",
            json={"establishmentId": establishment["id"], "name": "   "},
            headers=owner_headers,
        )
        assert response.status_code == 400

        assert db_session.query(Register).count() == 0
        assert db_session.query(AuditLog).count() == 0
        assert client.get("/api/registers", headers=owner_headers).json()["count"] == 0

    def test_creation_is_audited(self, client, owner_headers, establishment, db_session):
        response = client.post(
            "/api/registers/create",
            json={"establishmentId": establishment["id"], "name": "Caisse 2"},
            headers=owner_headers,
        )
        register_id = response.json()["register"]["id"]

        entry = db_session.query(AuditLog).filter(AuditLog.entity_id == register_id).one()
        assert entry.action == "register_created"
        assert entry.entity_type == "register"
        assert entry.tenant_id == "tenant-a"
        assert entry.changes["name"] == "Caisse 2"


class TestRegisterList:

    def test_filter_by_establishment(self, client, owner_headers, register):
        other = client.post("/api/establishments/create", json={"name": "Annexe"}, headers=owner_headers).json()
        client.post(
            "/api/registers/create",
            json={"establishmentId": other["establishment"]["id"], "name": "Caisse annexe"},
            headers=owner_headers,
        )

        everything = client.get("/api/registers", headers=owner_headers).json()
        assert everything["count"] == 2

        filtered = client.get(
            "/api/registers",
            params={"establishmentId": register["establishmentId"]},
            headers=owner_headers,
        ).json()
        assert filtered["count"] == 1
        assert filtered["registers"][0]["id"] == register["id"]

    def test_other_tenant_sees_nothing(self, client, other_tenant_headers, register):
        assert client.get("/api/registers", headers=other_tenant_headers).json()["count"] == 0


class TestRegisterUpdateDelete:

    def test_rename(self, client, owner_headers, register):
        response = client.patch(
            f"/api/registers/{register['id']}/update",
            json={"name": "Caisse express"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json()["register"]["name"] == "Caisse express"

    def test_seller_cannot_update(self, client, auth_headers, register):
        response = client.patch(
            f"/api/registers/{register['id']}/update",
            json={"name": "Caisse express"},
            headers=auth_headers(role="seller"),
        )
        assert response.status_code == 403

    def test_delete_deactivates_and_audits(self, client, owner_headers, register, db_session):
        response = client.delete(f"/api/registers/{register['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Caisse désactivée avec succès"
        assert client.get("/api/registers", headers=owner_headers).json()["count"] == 0

        actions = {
            entry.action for entry in db_session.query(AuditLog).filter(AuditLog.entity_id == register["id"])
        }
        assert actions == {"register_created", "register_deleted"}
