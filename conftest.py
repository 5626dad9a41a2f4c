"""
Shared fixtures: in-memory SQLite database, API client and token factory.

The environment is set before the application is imported so that the
settings pick up the test database.
"""
import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("JWT_AUDIENCE", None)

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.database.database import Base, engine, SessionLocal
from app.modules.auth.utils import create_access_token

TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


def make_token(tenant_id=TENANT_A, role="owner", user_id=None, email=None, tenants=None, **claims):
    """JWT signé avec le secret de l'application, tenant dans app_metadata."""
    app_metadata = {"role": role}
    if tenant_id:
        app_metadata["tenant_id"] = tenant_id
    if tenants:
        app_metadata["tenants"] = [{"id": tenant} for tenant in tenants]

    data = {
        "sub": user_id or f"user-{tenant_id or 'none'}-{role}",
        "email": email or f"{role}@{tenant_id or 'none'}.test",
        "app_metadata": app_metadata,
    }
    data.update(claims)
    return create_access_token(data)


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Factory: auth_headers(tenant_id=..., role=...) -> headers dict."""
    def _headers(tenant_id=TENANT_A, role="owner", **kwargs):
        return {"Authorization": f"Bearer {make_token(tenant_id=tenant_id, role=role, **kwargs)}"}
    return _headers


@pytest.fixture
def owner_headers(auth_headers):
    return auth_headers()


@pytest.fixture
def other_tenant_headers(auth_headers):
    return auth_headers(tenant_id=TENANT_B)


@pytest.fixture
def establishment(client, owner_headers):
    response = client.post(
        "/api/establishments/create",
        json={"name": "Boutique Centre", "city": "Lyon", "postalCode": "69001"},
        headers=owner_headers,
    )
    assert response.status_code == 201
    return response.json()["establishment"]


@pytest.fixture
def register(client, owner_headers, establishment):
    response = client.post(
        "/api/registers/create",
        json={"establishmentId": establishment["id"], "name": "Caisse 1"},
        headers=owner_headers,
    )
    assert response.status_code == 201
    return response.json()["register"]
