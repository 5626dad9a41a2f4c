"""
Validateurs communs (chaînes, identifiants légaux français, codes TVA)
"""
import re
from datetime import date
from typing import Optional


SIRET_PATTERN = re.compile(r'^\d{14}$')
NAF_PATTERN = re.compile(r'^\d{4}[A-Z]$')
TVA_NUMBER_PATTERN = re.compile(r'^[A-Z]{2}\d{11}$')
TAX_CODE_PATTERN = re.compile(r'^[A-Z0-9]+$')
DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def clean_required(value: str, required_message: str, max_length: int,
                   too_long_message: Optional[str] = None) -> str:
    """
    Nettoie une chaîne obligatoire.
    - Supprime les espaces en début et fin
    - Refuse une chaîne vide après nettoyage
    - Vérifie la longueur maximale
    """
    if value is None:
        raise ValueError(required_message)
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(required_message)
    if len(cleaned) > max_length:
        raise ValueError(too_long_message or f'Ne doit pas dépasser {max_length} caractères')
    return cleaned


def clean_optional(value: Optional[str], max_length: int,
                   too_long_message: Optional[str] = None) -> Optional[str]:
    """Nettoie une chaîne optionnelle. Une chaîne vide devient None."""
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    if len(cleaned) > max_length:
        raise ValueError(too_long_message or f'Ne doit pas dépasser {max_length} caractères')
    return cleaned


def blank_to_none(value):
    """Pour les champs typés (email, nombres): une chaîne vide vaut None."""
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, str):
        return value.strip()
    return value


def validate_siret(siret: str) -> bool:
    """SIRET: exactement 14 chiffres."""
    return bool(SIRET_PATTERN.match(siret))


def validate_naf(naf: str) -> bool:
    """Code NAF/APE: 4 chiffres suivis d'une lettre majuscule (ex. 4711D)."""
    return bool(NAF_PATTERN.match(naf))


def validate_tva_number(tva_number: str) -> bool:
    """Numéro de TVA intracommunautaire: code pays + 11 chiffres (ex. FR12345678901)."""
    return bool(TVA_NUMBER_PATTERN.match(tva_number))


def validate_tax_code(code: str) -> bool:
    """Code TVA: uniquement des lettres majuscules et des chiffres."""
    return bool(TAX_CODE_PATTERN.match(code))


def validate_iso_date(value: str) -> bool:
    """Date au format YYYY-MM-DD."""
    if not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
