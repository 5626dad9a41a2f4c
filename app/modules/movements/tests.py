"""
Tests pour le module Mouvements de stock

- Numérotation {PREFIX}-{ANNÉE}-{SEQ:05d} par tenant, type et année
- Filtre par type
- Isolation multi-tenant
"""

import re
import pytest
from datetime import datetime, timezone
from uuid import uuid4

from app.modules.movements.models import MovementType
from app.modules.movements.service import format_movement_number

YEAR = datetime.now(timezone.utc).year


def create_movement(client, headers, movement_type="reception", **data):
    response = client.post("/api/movements/create", json={"type": movement_type, **data}, headers=headers)
    assert response.status_code == 201
    return response.json()["movement"]


class TestMovementNumbers:

    @pytest.mark.parametrize("movement_type,prefix", [
        (MovementType.RECEPTION, "REC"),
        (MovementType.ADJUSTMENT, "ADJ"),
        (MovementType.LOSS, "PER"),
        (MovementType.TRANSFER, "TRF"),
    ])
    def test_format(self, movement_type, prefix):
        assert format_movement_number(movement_type, 2026, 7) == f"{prefix}-2026-00007"

    def test_sequential_per_type(self, client, owner_headers):
        first = create_movement(client, owner_headers, "reception")
        second = create_movement(client, owner_headers, "reception")
        loss = create_movement(client, owner_headers, "loss")

        assert first["movementNumber"] == f"REC-{YEAR}-00001"
        assert second["movementNumber"] == f"REC-{YEAR}-00002"
        assert loss["movementNumber"] == f"PER-{YEAR}-00001"

    def test_sequences_are_per_tenant(self, client, owner_headers, other_tenant_headers):
        create_movement(client, owner_headers, "adjustment")
        other = create_movement(client, other_tenant_headers, "adjustment")
        assert other["movementNumber"] == f"ADJ-{YEAR}-00001"

    def test_number_shape(self, client, owner_headers):
        movement = create_movement(client, owner_headers, "transfer", comment="  Vers l'annexe ")
        assert re.fullmatch(r"TRF-\d{4}-\d{5}", movement["movementNumber"])
        assert movement["comment"] == "Vers l'annexe"
        assert movement["userName"] == "owner@tenant-a.test"


class TestMovementValidation:

    def test_unknown_type(self, client, owner_headers):
        response = client.post("/api/movements/create", json={"type": "theft"}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "type"

    def test_missing_type(self, client, owner_headers):
        response = client.post("/api/movements/create", json={}, headers=owner_headers)
        assert response.status_code == 400

    def test_viewer_cannot_create(self, client, auth_headers):
        response = client.post(
            "/api/movements/create", json={"type": "loss"}, headers=auth_headers(role="viewer")
        )
        assert response.status_code == 403


class TestMovementRead:

    def test_filter_by_type(self, client, owner_headers):
        create_movement(client, owner_headers, "reception")
        create_movement(client, owner_headers, "loss")

        body = client.get("/api/movements", params={"type": "loss"}, headers=owner_headers).json()
        assert body["count"] == 1
        assert body["movements"][0]["type"] == "loss"

        assert client.get("/api/movements", headers=owner_headers).json()["count"] == 2

    def test_get_movement(self, client, owner_headers, other_tenant_headers):
        movement = create_movement(client, owner_headers)

        response = client.get(f"/api/movements/{movement['id']}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["movement"]["movementNumber"] == movement["movementNumber"]

        assert client.get(f"/api/movements/{movement['id']}", headers=other_tenant_headers).status_code == 404

    def test_unknown_movement(self, client, owner_headers):
        response = client.get(f"/api/movements/{uuid4()}", headers=owner_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Mouvement introuvable"
