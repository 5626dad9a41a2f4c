"""
Tests pour le module Clôtures journalières

- Clôture unique par caisse et par date
- Hash SHA-256 du JSON canonique
- Vérification et historique des clôtures
- Journal d'audit
"""

import pytest
from datetime import date
from uuid import uuid4

from app.modules.audit.models import AuditLog
from app.modules.closures.service import compute_closure_hash


def closure_payload(register_id, day="2026-03-14", **data):
    payload = {
        "registerId": register_id,
        "date": day,
        "ticketCount": 42,
        "cancelledCount": 1,
        "totalHT": "1000.00",
        "totalTVA": "200.00",
        "totalTTC": "1200.00",
        "paymentMethods": {"Espèces": "400.00", "Carte": "800.00"},
    }
    payload.update(data)
    return payload


class TestClosureHash:

    def test_canonical_json_ignores_key_order(self):
        first = compute_closure_hash({"b": 1, "a": "x"})
        second = compute_closure_hash({"a": "x", "b": 1})
        assert first == second
        assert len(first) == 64

    def test_hash_changes_with_content(self):
        assert compute_closure_hash({"a": 1}) != compute_closure_hash({"a": 2})


class TestCloseDay:

    def test_close_day(self, client, owner_headers, register):
        response = client.post("/api/sales/close-day", json=closure_payload(register["id"]), headers=owner_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Journée clôturée avec succès"
        closure = body["closure"]
        assert closure["closureDate"] == "2026-03-14"
        assert closure["registerId"] == register["id"]
        assert closure["establishmentId"] == register["establishmentId"]
        assert closure["ticketCount"] == 42
        assert closure["totalTTC"] == "1200.00"
        assert closure["paymentMethods"] == {"Espèces": 400.0, "Carte": 800.0}
        assert len(closure["closureHash"]) == 64
        assert closure["closedBy"] == "owner@tenant-a.test"

    def test_day_cannot_be_closed_twice(self, client, owner_headers, register):
        client.post("/api/sales/close-day", json=closure_payload(register["id"]), headers=owner_headers)
        response = client.post("/api/sales/close-day", json=closure_payload(register["id"]), headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Cette journée est déjà clôturée"

    def test_each_register_closes_independently(self, client, owner_headers, register):
        other = client.post(
            "/api/registers/create",
            json={"establishmentId": register["establishmentId"], "name": "Caisse 2"},
            headers=owner_headers,
        ).json()["register"]

        client.post("/api/sales/close-day", json=closure_payload(register["id"]), headers=owner_headers)
        response = client.post("/api/sales/close-day", json=closure_payload(other["id"]), headers=owner_headers)
        assert response.status_code == 201

    def test_seller_can_close(self, client, auth_headers, register):
        response = client.post(
            "/api/sales/close-day", json=closure_payload(register["id"]), headers=auth_headers(role="seller")
        )
        assert response.status_code == 201

    def test_viewer_cannot_close(self, client, auth_headers, register):
        response = client.post(
            "/api/sales/close-day", json=closure_payload(register["id"]), headers=auth_headers(role="viewer")
        )
        assert response.status_code == 403

    def test_register_of_other_tenant(self, client, other_tenant_headers, register):
        response = client.post(
            "/api/sales/close-day", json=closure_payload(register["id"]), headers=other_tenant_headers
        )
        assert response.status_code == 404

    def test_unknown_register(self, client, owner_headers):
        response = client.post("/api/sales/close-day", json=closure_payload(str(uuid4())), headers=owner_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Caisse introuvable"

    @pytest.mark.parametrize("overrides,message", [
        ({"date": "14/03/2026"}, "Date invalide (format attendu: YYYY-MM-DD)"),
        ({"date": "2026-02-30"}, "Date invalide (format attendu: YYYY-MM-DD)"),
        ({"totalTTC": "1300.00"}, "Le total TTC doit être égal au total HT plus la TVA"),
        ({"totalHT": "-1"}, "Le montant doit être positif"),
    ])
    def test_invalid_payload(self, client, owner_headers, register, overrides, message):
        response = client.post(
            "/api/sales/close-day", json=closure_payload(register["id"], **overrides), headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == message

    def test_closure_is_audited(self, client, owner_headers, register, db_session):
        closure = client.post(
            "/api/sales/close-day", json=closure_payload(register["id"]), headers=owner_headers
        ).json()["closure"]

        entry = db_session.query(AuditLog).filter(AuditLog.entity_id == closure["id"]).one()
        assert entry.action == "closure_create"
        assert entry.metadata_["closureHash"] == closure["closureHash"]


class TestCheckClosure:

    def test_open_day(self, client, owner_headers, register):
        response = client.get(
            "/api/sales/check-closure", params={"date": "2026-03-14"}, headers=owner_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["isClosed"] is False
        assert body["date"] == "2026-03-14"
        assert body["closure"] is None

    def test_closed_day(self, client, owner_headers, register):
        client.post("/api/sales/close-day", json=closure_payload(register["id"]), headers=owner_headers)

        body = client.get(
            "/api/sales/check-closure",
            params={"date": "2026-03-14", "registerId": register["id"]},
            headers=owner_headers,
        ).json()
        assert body["isClosed"] is True
        assert body["closure"]["registerId"] == register["id"]

    def test_defaults_to_today(self, client, owner_headers):
        body = client.get("/api/sales/check-closure", headers=owner_headers).json()
        assert body["date"] == date.today().isoformat()

    def test_invalid_date(self, client, owner_headers):
        response = client.get("/api/sales/check-closure", params={"date": "demain"}, headers=owner_headers)
        assert response.status_code == 400

    def test_closure_of_other_tenant_not_visible(self, client, owner_headers, other_tenant_headers, register):
        client.post("/api/sales/close-day", json=closure_payload(register["id"]), headers=owner_headers)

        body = client.get(
            "/api/sales/check-closure", params={"date": "2026-03-14"}, headers=other_tenant_headers
        ).json()
        assert body["isClosed"] is False


class TestClosureHistory:

    @pytest.fixture(autouse=True)
    def closures(self, client, owner_headers, register):
        for day in ("2026-03-01", "2026-03-02", "2026-03-03"):
            response = client.post(
                "/api/sales/close-day", json=closure_payload(register["id"], day=day), headers=owner_headers
            )
            assert response.status_code == 201

    def test_newest_first(self, client, owner_headers):
        body = client.get("/api/closures", headers=owner_headers).json()
        assert body["count"] == 3
        assert [c["closureDate"] for c in body["closures"]] == ["2026-03-03", "2026-03-02", "2026-03-01"]

    def test_date_range(self, client, owner_headers):
        body = client.get(
            "/api/closures", params={"startDate": "2026-03-02", "endDate": "2026-03-02"}, headers=owner_headers
        ).json()
        assert [c["closureDate"] for c in body["closures"]] == ["2026-03-02"]

    def test_sales_alias_path(self, client, owner_headers):
        assert client.get("/api/sales/closures", headers=owner_headers).json()["count"] == 3

    def test_other_tenant(self, client, other_tenant_headers):
        assert client.get("/api/closures", headers=other_tenant_headers).json()["count"] == 0
