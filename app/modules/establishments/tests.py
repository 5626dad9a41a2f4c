"""
Tests pour le module Établissements

- CRUD avec isolation multi-tenant
- Validations (nom requis, SIRET, NAF, numéro de TVA, email)
- Désactivation au lieu de suppression
"""

import pytest
from uuid import uuid4


@pytest.fixture
def sample_establishment_data():
    return {
        "name": "  Boutique Opéra  ",
        "address": "8 boulevard des Capucines",
        "postalCode": "75009",
        "city": "  Paris ",
        "phone": "0102030405",
        "email": "opera@boutique.fr",
        "siret": "12345678901234",
        "naf": "4711D",
        "tvaNumber": "FR12345678901",
    }


class TestEstablishmentCreate:

    def test_create_echoes_trimmed_input(self, client, owner_headers, sample_establishment_data):
        response = client.post("/api/establishments/create", json=sample_establishment_data, headers=owner_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        establishment = body["establishment"]
        assert establishment["name"] == "Boutique Opéra"
        assert establishment["city"] == "Paris"
        assert establishment["country"] == "France"
        assert establishment["isActive"] is True
        assert establishment["siret"] == "12345678901234"

    def test_snake_case_payload_accepted(self, client, owner_headers):
        response = client.post(
            "/api/establishments/create",
            json={"name": "Dépôt", "postal_code": "13001"},
            headers=owner_headers,
        )
        assert response.status_code == 201
        assert response.json()["establishment"]["postalCode"] == "13001"

    def test_missing_name(self, client, owner_headers):
        response = client.post("/api/establishments/create", json={"city": "Paris"}, headers=owner_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["statusCode"] == 400
        assert body["errors"][0]["field"] == "name"

    def test_blank_name(self, client, owner_headers):
        response = client.post("/api/establishments/create", json={"name": "   "}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Le nom est requis"

    @pytest.mark.parametrize("field,value,message", [
        ("siret", "1234", "Le SIRET doit contenir 14 chiffres"),
        ("siret", "1234567890123A", "Le SIRET doit contenir uniquement des chiffres"),
        ("naf", "47110", "Le code NAF doit être au format 1234A"),
        ("tvaNumber", "12345", "Le numéro de TVA doit être au format FR12345678901"),
    ])
    def test_legal_identifiers_validated(self, client, owner_headers, field, value, message):
        response = client.post(
            "/api/establishments/create",
            json={"name": "Boutique", field: value},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == message

    def test_invalid_email(self, client, owner_headers):
        response = client.post(
            "/api/establishments/create",
            json={"name": "Boutique", "email": "pas-un-email"},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    def test_blank_email_becomes_null(self, client, owner_headers):
        response = client.post(
            "/api/establishments/create",
            json={"name": "Boutique", "email": "  "},
            headers=owner_headers,
        )
        assert response.status_code == 201
        assert response.json()["establishment"]["email"] is None

    def test_validation_error_does_not_persist(self, client, owner_headers):
        client.post("/api/establishments/create", json={"name": ""}, headers=owner_headers)
        response = client.get("/api/establishments", headers=owner_headers)
        assert response.json()["count"] == 0


class TestEstablishmentReadUpdate:

    def test_list_ordered_by_name(self, client, owner_headers):
        for name in ("Zénith", "Atelier"):
            client.post("/api/establishments/create", json={"name": name}, headers=owner_headers)

        body = client.get("/api/establishments", headers=owner_headers).json()
        assert body["count"] == 2
        assert [e["name"] for e in body["establishments"]] == ["Atelier", "Zénith"]

    def test_get_unknown_returns_404(self, client, owner_headers):
        response = client.get(f"/api/establishments/{uuid4()}", headers=owner_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Établissement introuvable"

    def test_invalid_id_is_validation_error(self, client, owner_headers):
        response = client.get("/api/establishments/not-a-uuid", headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Identifiant invalide"

    def test_partial_update(self, client, owner_headers, establishment):
        response = client.patch(
            f"/api/establishments/{establishment['id']}/update",
            json={"city": " Marseille "},
            headers=owner_headers,
        )
        assert response.status_code == 200
        updated = response.json()["establishment"]
        assert updated["city"] == "Marseille"
        assert updated["name"] == establishment["name"]

    def test_update_rejects_blank_name(self, client, owner_headers, establishment):
        response = client.patch(
            f"/api/establishments/{establishment['id']}/update",
            json={"name": ""},
            headers=owner_headers,
        )
        assert response.status_code == 400


class TestEstablishmentTenancy:

    def test_other_tenant_cannot_see(self, client, other_tenant_headers, establishment):
        response = client.get(f"/api/establishments/{establishment['id']}", headers=other_tenant_headers)
        assert response.status_code == 404

        listing = client.get("/api/establishments", headers=other_tenant_headers).json()
        assert listing["count"] == 0

    def test_other_tenant_cannot_update(self, client, other_tenant_headers, establishment):
        response = client.patch(
            f"/api/establishments/{establishment['id']}/update",
            json={"name": "Piraté"},
            headers=other_tenant_headers,
        )
        assert response.status_code == 404


class TestEstablishmentDeactivate:

    def test_delete_deactivates(self, client, owner_headers, establishment):
        response = client.delete(f"/api/establishments/{establishment['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Établissement désactivé avec succès"

        # Row still present, flagged inactive, hidden from the list
        row = client.get(f"/api/establishments/{establishment['id']}", headers=owner_headers).json()
        assert row["establishment"]["isActive"] is False
        assert client.get("/api/establishments", headers=owner_headers).json()["count"] == 0
