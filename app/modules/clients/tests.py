"""
Tests pour le module Clients

- Consentement RGPD obligatoire
- Recherche (prénom, nom, nom complet, email, téléphone)
- Remplacement complet (PUT) et suppression définitive
- Isolation multi-tenant
"""

import pytest
from uuid import uuid4


@pytest.fixture
def sample_client_data():
    return {
        "firstName": "  Marie ",
        "lastName": "Curie",
        "email": "marie.curie@example.fr",
        "phone": "0611223344",
        "gdprConsent": True,
        "marketingConsent": True,
        "discount": 5,
        "metadata": {"city": "Paris", "postalCode": "75005"},
    }


def create_client(client, headers, **data):
    payload = {"gdprConsent": True}
    payload.update(data)
    response = client.post("/api/clients", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["client"]


class TestClientCreate:

    def test_create_client(self, client, owner_headers, sample_client_data):
        response = client.post("/api/clients", json=sample_client_data, headers=owner_headers)
        assert response.status_code == 201
        created = response.json()["client"]
        assert created["firstName"] == "Marie"
        assert created["gdprConsent"] is True
        assert created["gdprConsentDate"] is not None
        assert created["city"] == "Paris"
        assert created["metadata"]["postalCode"] == "75005"
        assert float(created["discount"]) == 5.0

    def test_consent_required(self, client, owner_headers, sample_client_data):
        sample_client_data["gdprConsent"] = False
        response = client.post("/api/clients", json=sample_client_data, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Le consentement RGPD est obligatoire"

    def test_consent_missing(self, client, owner_headers):
        response = client.post("/api/clients", json={"firstName": "Paul"}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "gdprConsent", "message": "Le consentement RGPD est obligatoire"}
        ]
        assert client.get("/api/clients", headers=owner_headers).json()["count"] == 0

    def test_discount_out_of_range(self, client, owner_headers):
        response = client.post(
            "/api/clients", json={"gdprConsent": True, "discount": 150}, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "La remise doit être comprise entre 0 et 100"

    def test_blank_optional_fields_become_null(self, client, owner_headers):
        created = create_client(client, owner_headers, firstName="Paul", email="", phone="  ")
        assert created["email"] is None
        assert created["phone"] is None

    def test_viewer_cannot_create(self, client, auth_headers):
        response = client.post("/api/clients", json={"gdprConsent": True}, headers=auth_headers(role="viewer"))
        assert response.status_code == 403


class TestClientSearch:

    @pytest.fixture(autouse=True)
    def clients(self, client, owner_headers):
        create_client(client, owner_headers, firstName="Marie", lastName="Curie", email="marie@example.fr")
        create_client(client, owner_headers, firstName="Pierre", lastName="Curie", phone="0699887766")
        create_client(client, owner_headers, firstName="Albert", lastName="Camus")

    def test_list_all(self, client, owner_headers):
        body = client.get("/api/clients", headers=owner_headers).json()
        assert body["success"] is True
        assert body["count"] == 3

    @pytest.mark.parametrize("search,expected", [
        ("curie", {"Marie", "Pierre"}),
        ("ALB", {"Albert"}),
        ("marie@", {"Marie"}),
        ("998877", {"Pierre"}),
        ("Marie Curie", {"Marie"}),
        ("inconnu", set()),
    ])
    def test_search(self, client, owner_headers, search, expected):
        body = client.get("/api/clients", params={"search": search}, headers=owner_headers).json()
        assert {c["firstName"] for c in body["clients"]} == expected
        assert body["count"] == len(expected)

    def test_other_tenant_sees_nothing(self, client, other_tenant_headers):
        assert client.get("/api/clients", headers=other_tenant_headers).json()["count"] == 0


class TestClientUpdateDelete:

    def test_get_client(self, client, owner_headers):
        created = create_client(client, owner_headers, firstName="Marie")
        response = client.get(f"/api/clients/{created['id']}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["client"]["id"] == created["id"]

    def test_put_replaces_record(self, client, owner_headers):
        created = create_client(client, owner_headers, firstName="Marie", lastName="Curie", phone="0611223344")

        response = client.put(
            f"/api/clients/{created['id']}",
            json={"firstName": "Marie", "lastName": "Skłodowska", "gdprConsent": True},
            headers=owner_headers,
        )
        assert response.status_code == 200
        updated = response.json()["client"]
        assert updated["lastName"] == "Skłodowska"
        # Full replace: omitted fields are cleared
        assert updated["phone"] is None
        # Original consent date is kept
        assert updated["gdprConsentDate"] == created["gdprConsentDate"]

    def test_put_requires_consent(self, client, owner_headers):
        created = create_client(client, owner_headers, firstName="Marie")
        response = client.put(
            f"/api/clients/{created['id']}",
            json={"firstName": "Marie", "gdprConsent": False},
            headers=owner_headers,
        )
        assert response.status_code == 400

    def test_delete_is_permanent(self, client, owner_headers):
        created = create_client(client, owner_headers, firstName="Marie")

        response = client.delete(f"/api/clients/{created['id']}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Client supprimé avec succès"

        response = client.get(f"/api/clients/{created['id']}", headers=owner_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Client introuvable"

    def test_unknown_client(self, client, owner_headers):
        response = client.delete(f"/api/clients/{uuid4()}", headers=owner_headers)
        assert response.status_code == 404

    def test_other_tenant_cannot_read_or_delete(self, client, owner_headers, other_tenant_headers):
        created = create_client(client, owner_headers, firstName="Marie")

        assert client.get(f"/api/clients/{created['id']}", headers=other_tenant_headers).status_code == 404
        assert client.delete(f"/api/clients/{created['id']}", headers=other_tenant_headers).status_code == 404
        assert client.get(f"/api/clients/{created['id']}", headers=owner_headers).status_code == 200
