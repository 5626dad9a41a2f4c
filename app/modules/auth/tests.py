"""
Tests du module d'authentification

- Résolution du token (en-tête Bearer, cookies de session)
- Dérivation du tenant depuis les claims
- Sélection du tenant par l'en-tête X-Tenant-ID
- Contrôle des rôles
- Login / session / logout
"""

import pytest
from datetime import timedelta
from fastapi import HTTPException

from app.modules.auth.utils import (
    resolve_tenants, build_auth_context, create_access_token, decode_token,
    hash_password, verify_password
)
from app.modules.seed.service import SeedService
from conftest import make_token, TENANT_A, TENANT_B


# ===== TESTS DE RÉSOLUTION DU TENANT =====

class TestTenantResolution:
    """Dérivation du tenant depuis les claims du token"""

    def test_app_metadata_tenant_first(self):
        claims = {
            "sub": "user-1",
            "app_metadata": {"tenant_id": "t-app"},
            "user_metadata": {"tenantId": "t-user"},
        }
        assert resolve_tenants(claims) == ["t-app", "t-user"]

    def test_user_metadata_camel_case(self):
        claims = {"sub": "user-1", "user_metadata": {"tenantId": "t-user"}}
        assert resolve_tenants(claims) == ["t-user"]

    def test_tenant_list_entries(self):
        claims = {
            "sub": "user-1",
            "app_metadata": {"tenants": [{"id": "t1"}, {"tenant_id": "t2"}, {"slug": "t3"}]},
        }
        assert resolve_tenants(claims) == ["t1", "t2", "t3"]

    def test_subject_fallback(self):
        assert resolve_tenants({"sub": "user-42"}) == ["user-42"]

    def test_duplicates_removed(self):
        claims = {"sub": "u", "app_metadata": {"tenant_id": "t1", "tenants": [{"id": "t1"}, {"id": "t2"}]}}
        assert resolve_tenants(claims) == ["t1", "t2"]

    def test_requested_tenant_must_be_allowed(self):
        claims = {"sub": "u", "app_metadata": {"tenant_id": "t1", "tenants": [{"id": "t2"}]}}
        assert build_auth_context(claims, "t2").tenant_id == "t2"

        with pytest.raises(HTTPException) as exc_info:
            build_auth_context(claims, "t3")
        assert exc_info.value.status_code == 403

    def test_default_role_is_owner(self):
        context = build_auth_context({"sub": "u", "app_metadata": {"tenant_id": "t1"}})
        assert context.role == "owner"

    def test_missing_subject_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            build_auth_context({"app_metadata": {"tenant_id": "t1"}})
        assert exc_info.value.status_code == 401


class TestTokens:
    """Encodage et décodage des tokens"""

    def test_round_trip_keeps_claims(self):
        token = create_access_token({"sub": "user-1", "email": "a@b.fr"})
        claims = decode_token(token)
        assert claims["sub"] == "user-1"
        assert claims["type"] == "access"

    def test_expired_token(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-10))
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Session expirée"

    def test_malformed_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token("not-a-jwt")
        assert exc_info.value.detail == "Session invalide"

    def test_password_hashing(self):
        hashed = hash_password("Secret!123")
        assert hashed != "Secret!123"
        assert verify_password("Secret!123", hashed)
        assert not verify_password("wrong", hashed)

    def test_empty_hash_never_matches(self):
        assert verify_password("Secret!123", "") is False


# ===== TESTS DU MIDDLEWARE =====

class TestAuthMiddleware:
    """Toutes les routes de données exigent un tenant résolu"""

    @pytest.mark.parametrize("path", [
        "/api/clients",
        "/api/establishments",
        "/api/registers",
        "/api/sellers",
        "/api/suppliers",
        "/api/brands",
        "/api/tax-rates",
        "/api/variations",
        "/api/closures",
        "/api/sales/check-closure",
        "/api/movements",
    ])
    def test_missing_token_returns_401(self, client, path):
        response = client.get(path)
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["statusCode"] == 401
        assert body["message"] == "Token d'authentification manquant"

    def test_invalid_token_returns_401(self, client):
        response = client.get("/api/clients", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json()["message"] == "Session invalide"

    def test_session_cookie_accepted(self, client):
        client.cookies.set("sb-access-token", make_token())
        response = client.get("/api/establishments")
        assert response.status_code == 200

    def test_supabase_array_cookie_accepted(self, client):
        client.cookies.set("supabase-auth-token", f'["{make_token()}", "refresh"]')
        response = client.get("/api/establishments")
        assert response.status_code == 200

    def test_tenant_header_outside_token_is_forbidden(self, client, owner_headers):
        headers = {**owner_headers, "X-Tenant-ID": TENANT_B}
        response = client.get("/api/establishments", headers=headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Accès refusé à ce tenant"

    def test_tenant_header_selects_allowed_tenant(self, client, auth_headers):
        headers = {**auth_headers(tenants=[TENANT_A, TENANT_B]), "X-Tenant-ID": TENANT_B}
        response = client.get("/api/establishments", headers=headers)
        assert response.status_code == 200
        assert response.headers["X-Tenant-ID"] == TENANT_B

    def test_public_paths_skip_auth(self, client):
        assert client.get("/health").status_code == 200
        assert client.get("/").status_code == 200

    def test_security_headers(self, client):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestRoles:
    """Contrôle des rôles sur les mutations"""

    def test_viewer_can_read(self, client, auth_headers):
        response = client.get("/api/establishments", headers=auth_headers(role="viewer"))
        assert response.status_code == 200

    def test_viewer_cannot_create_establishment(self, client, auth_headers):
        response = client.post(
            "/api/establishments/create",
            json={"name": "Boutique"},
            headers=auth_headers(role="viewer"),
        )
        assert response.status_code == 403
        assert response.json()["message"].startswith("Rôle requis")

    def test_seller_cannot_change_tax_rates(self, client, auth_headers):
        response = client.post(
            "/api/tax-rates/create",
            json={"name": "TVA 20%", "rate": 20, "code": "T1"},
            headers=auth_headers(role="seller"),
        )
        assert response.status_code == 403

    def test_seller_can_create_clients(self, client, auth_headers):
        response = client.post(
            "/api/clients",
            json={"firstName": "Jeanne", "gdprConsent": True},
            headers=auth_headers(role="seller"),
        )
        assert response.status_code == 201


# ===== TESTS LOGIN / SESSION =====

@pytest.fixture
def demo_user(db_session):
    SeedService(db_session).seed_user("tenant-demo", "Demo@Pos-Demo.fr", "Demo!2025")
    db_session.commit()
    return {"email": "demo@pos-demo.fr", "password": "Demo!2025"}


class TestLogin:

    def test_login_returns_token_and_cookie(self, client, demo_user):
        response = client.post("/api/auth/login", json=demo_user)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["tokenType"] == "bearer"
        assert body["expiresIn"] > 0
        assert body["user"]["tenantId"] == "tenant-demo"
        assert "access_token" in response.cookies

        claims = decode_token(body["accessToken"])
        assert claims["app_metadata"]["tenant_id"] == "tenant-demo"

    def test_login_alias_path(self, client, demo_user):
        response = client.post("/api/login", json={"email": "DEMO@pos-demo.fr", "password": "Demo!2025"})
        assert response.status_code == 200

    def test_wrong_password(self, client, demo_user):
        response = client.post("/api/auth/login", json={"email": demo_user["email"], "password": "nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Email ou mot de passe incorrect"

    def test_invalid_email_is_validation_error(self, client):
        response = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    def test_session_resolves_token(self, client, demo_user):
        token = client.post("/api/auth/login", json=demo_user).json()["accessToken"]
        response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["auth"]["tenantId"] == "tenant-demo"

    def test_session_without_token(self, client):
        client.cookies.clear()
        response = client.get("/api/auth/session")
        assert response.status_code == 401

    def test_logout_clears_cookie(self, client, demo_user):
        client.post("/api/auth/login", json=demo_user)
        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json()["message"] == "Déconnexion réussie"
