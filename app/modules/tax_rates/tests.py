"""
Tests pour le module Taux de TVA

- Un seul taux par défaut par tenant
- Code unique par tenant
- Archivage (jamais de suppression physique)
- Validation du taux et du code
"""

import pytest
from sqlalchemy.orm import Session

from app.modules.audit.models import AuditLog
from app.modules.tax_rates.models import TaxRate


def create_rate(client, headers, **data):
    payload = {"name": "TVA 20%", "rate": "20", "code": "T1"}
    payload.update(data)
    response = client.post("/api/tax-rates/create", json=payload, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["taxRate"]


def defaults(client, headers):
    rates = client.get("/api/tax-rates", params={"includeArchived": True}, headers=headers).json()["taxRates"]
    return [rate["code"] for rate in rates if rate["isDefault"]]


class TestTaxRateDefault:

    def test_new_default_replaces_previous(self, client, owner_headers):
        create_rate(client, owner_headers, code="T1", isDefault=True)
        create_rate(client, owner_headers, name="TVA 10%", rate="10", code="T2", isDefault=True)

        assert defaults(client, owner_headers) == ["T2"]

    def test_update_to_default(self, client, owner_headers):
        create_rate(client, owner_headers, code="T1", isDefault=True)
        reduced = create_rate(client, owner_headers, name="TVA 5.5%", rate="5.5", code="T3")

        response = client.patch(
            f"/api/tax-rates/{reduced['id']}/update", json={"isDefault": True}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["taxRate"]["isDefault"] is True
        assert defaults(client, owner_headers) == ["T3"]

    def test_default_listed_first(self, client, owner_headers):
        create_rate(client, owner_headers, name="TVA 0%", rate="0", code="T0")
        create_rate(client, owner_headers, name="TVA 20%", rate="20", code="T1", isDefault=True)
        create_rate(client, owner_headers, name="TVA 10%", rate="10", code="T2")

        rates = client.get("/api/tax-rates", headers=owner_headers).json()["taxRates"]
        assert [rate["code"] for rate in rates] == ["T1", "T0", "T2"]

    def test_defaults_are_per_tenant(self, client, owner_headers, other_tenant_headers):
        create_rate(client, owner_headers, code="T1", isDefault=True)
        create_rate(client, other_tenant_headers, code="T1", isDefault=True)

        assert defaults(client, owner_headers) == ["T1"]
        assert defaults(client, other_tenant_headers) == ["T1"]

    def test_archived_rate_cannot_become_default(self, client, owner_headers):
        rate = create_rate(client, owner_headers)
        client.delete(f"/api/tax-rates/{rate['id']}/delete", headers=owner_headers)

        response = client.patch(f"/api/tax-rates/{rate['id']}/update", json={"isDefault": True}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Un taux archivé ne peut pas être le taux par défaut"


class TestTaxRateValidation:

    def test_code_unique_per_tenant(self, client, owner_headers):
        create_rate(client, owner_headers, code="T1")
        response = client.post(
            "/api/tax-rates/create",
            json={"name": "Autre", "rate": "10", "code": "T1"},
            headers=owner_headers,
        )
        assert response.status_code == 409

    @pytest.mark.parametrize("payload,message", [
        ({"name": "TVA", "rate": "120", "code": "T1"}, "Le taux doit être compris entre 0 et 100"),
        ({"name": "TVA", "rate": "5.555", "code": "T1"}, "Le taux doit avoir au plus 2 décimales"),
        ({"name": "TVA", "rate": "20", "code": "t1"}, "Le code doit contenir uniquement des lettres majuscules et des chiffres"),
        ({"name": "TVA", "rate": "20", "code": "  "}, "Le code TVA est requis"),
    ])
    def test_invalid_payloads(self, client, owner_headers, db_session, payload, message):
        response = client.post("/api/tax-rates/create", json=payload, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == message

        assert db_session.query(TaxRate).count() == 0
        assert client.get("/api/tax-rates", headers=owner_headers).json()["count"] == 0

    def test_rate_normalized(self, client, owner_headers):
        rate = create_rate(client, owner_headers, rate="5.5", code="T3")
        assert rate["rate"] == "5.50"


class TestTaxRateArchive:

    def test_delete_archives_and_clears_default(self, client, owner_headers, db_session):
        rate = create_rate(client, owner_headers, isDefault=True)

        response = client.delete(f"/api/tax-rates/{rate['id']}/delete", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Taux de TVA archivé avec succès"

        assert client.get("/api/tax-rates", headers=owner_headers).json()["count"] == 0
        archived = client.get(
            "/api/tax-rates", params={"includeArchived": True}, headers=owner_headers
        ).json()["taxRates"]
        assert archived[0]["isArchived"] is True
        assert archived[0]["archivedAt"] is not None
        assert archived[0]["isDefault"] is False

        assert db_session.query(TaxRate).count() == 1

    def test_changes_are_audited(self, client, owner_headers, db_session):
        rate = create_rate(client, owner_headers)
        client.patch(f"/api/tax-rates/{rate['id']}/update", json={"rate": "19.6"}, headers=owner_headers)

        entries = db_session.query(AuditLog).filter(AuditLog.entity_id == rate["id"]).all()
        assert len(entries) == 2
        assert all(entry.action == "config_change" for entry in entries)
        assert {entry.changes["operation"] for entry in entries} == {"create", "update"}


class TestTaxRateErrors:

    def test_database_failure_hides_details(self, client, owner_headers, monkeypatch):
        def failing_commit(self):
            raise RuntimeError("server closed the connection unexpectedly")

        monkeypatch.setattr(Session, "commit", failing_commit)
        response = client.post(
            "/api/tax-rates/create", json={"name": "TVA 20%", "rate": "20", "code": "T1"}, headers=owner_headers
        )
        assert response.status_code == 500
        assert response.json()["message"] == "Erreur interne du serveur"
