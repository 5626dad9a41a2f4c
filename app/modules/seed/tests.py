"""
Tests pour le seed de démonstration
"""

import pytest

from app.core.config import settings


class TestSeed:

    def test_seed_creates_demo_tenant(self, client):
        response = client.post("/api/database/seed")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["tenantId"] == settings.DEMO_TENANT_ID

        results = body["results"]
        assert results["users"] == {"added": 1, "existing": 0}
        assert results["taxRates"] == {"added": 5, "existing": 0}
        assert results["registers"]["added"] == 1
        assert results["variationGroups"]["added"] == 2

    def test_seed_is_idempotent(self, client):
        client.post("/api/database/seed")
        results = client.post("/api/database/seed").json()["results"]

        assert all(counts["added"] == 0 for counts in results.values())
        assert results["taxRates"]["existing"] == 5
        assert results["sellers"]["existing"] == 2

    def test_demo_owner_can_log_in(self, client):
        client.post("/api/database/seed")
        login = client.post(
            "/api/auth/login", json={"email": settings.DEMO_EMAIL, "password": settings.DEMO_PASSWORD}
        )
        assert login.status_code == 200
        token = login.json()["accessToken"]

        rates = client.get("/api/tax-rates", headers={"Authorization": f"Bearer {token}"}).json()["taxRates"]
        assert [rate["code"] for rate in rates if rate["isDefault"]] == ["T1"]
        assert len(rates) == 5

    def test_refused_in_production(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        response = client.post("/api/database/seed")
        assert response.status_code == 403
        assert response.json()["message"] == "Le seed est désactivé en production"
