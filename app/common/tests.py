"""
Tests des validateurs communs et de l'enveloppe d'erreur
"""

import pytest

from app.common.errors import _field_name, _translate
from app.common.validators import (
    clean_required, clean_optional, blank_to_none,
    validate_siret, validate_naf, validate_tva_number, validate_tax_code, validate_iso_date
)


class TestStringCleaning:

    def test_required_is_trimmed(self):
        assert clean_required("  Paris ", "Requis", 10) == "Paris"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_required_rejects_blank(self, value):
        with pytest.raises(ValueError, match="Requis"):
            clean_required(value, "Requis", 10)

    def test_required_too_long(self):
        with pytest.raises(ValueError, match="Trop long"):
            clean_required("abcdef", "Requis", 5, "Trop long")

    def test_optional_blank_becomes_none(self):
        assert clean_optional("   ", 10) is None
        assert clean_optional(None, 10) is None
        assert clean_optional(" x ", 10) == "x"

    def test_blank_to_none(self):
        assert blank_to_none(" ") is None
        assert blank_to_none(" a@b.fr ") == "a@b.fr"
        assert blank_to_none(12) == 12


class TestFrenchIdentifiers:

    def test_siret(self):
        assert validate_siret("12345678901234")
        assert not validate_siret("1234567890123")

    def test_naf(self):
        assert validate_naf("4711D")
        assert not validate_naf("4711d")

    def test_tva_number(self):
        assert validate_tva_number("FR12345678901")
        assert not validate_tva_number("FR123")

    def test_tax_code(self):
        assert validate_tax_code("T1")
        assert not validate_tax_code("t-1")

    @pytest.mark.parametrize("value,expected", [
        ("2026-03-14", True),
        ("2024-02-29", True),
        ("2026-02-29", False),
        ("14/03/2026", False),
        ("2026-3-14", False),
    ])
    def test_iso_date(self, value, expected):
        assert validate_iso_date(value) is expected


class TestErrorEnvelope:

    def test_location_prefix_stripped(self):
        assert _field_name(("body", "name")) == "name"
        assert _field_name(("query", "startDate")) == "startDate"
        assert _field_name(("body", "items", 0, "name")) == "items.0.name"

    def test_value_error_prefix_stripped(self):
        error = {"type": "value_error", "msg": "Value error, Le nom est requis"}
        assert _translate(error) == "Le nom est requis"

    def test_missing_field(self):
        assert _translate({"type": "missing", "msg": "Field required"}) == "Champ requis"

    def test_uuid_parsing(self):
        assert _translate({"type": "uuid_parsing", "msg": "Input should be a valid UUID"}) == "Identifiant invalide"

    def test_unknown_body_is_400(self, client, owner_headers):
        response = client.post(
            "/api/establishments/create",
            content="{not json",
            headers={**owner_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unknown_route_is_enveloped(self, client, owner_headers):
        response = client.get("/api/nothing-here", headers=owner_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "statusCode": 404, "message": "Not Found"}
