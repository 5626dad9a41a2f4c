from pydantic import EmailStr, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import (
    clean_required, clean_optional, blank_to_none,
    validate_siret, validate_naf, validate_tva_number
)

TEXT_LIMITS = {
    "address": (500, "L'adresse est trop longue"),
    "postal_code": (10, "Le code postal est invalide"),
    "city": (100, "Le nom de la ville est trop long"),
    "country": (100, "Le nom du pays est trop long"),
    "phone": (20, "Le numéro de téléphone est trop long"),
}


class EstablishmentFields(CamelModel):
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    siret: Optional[str] = None
    naf: Optional[str] = None
    tva_number: Optional[str] = None

    @field_validator('address', 'postal_code', 'city', 'phone')
    @classmethod
    def clean_text(cls, v, info):
        max_length, message = TEXT_LIMITS[info.field_name]
        return clean_optional(v, max_length, message)

    @field_validator('email', mode='before')
    @classmethod
    def clean_email(cls, v):
        v = blank_to_none(v)
        if v is not None and len(v) > 255:
            raise ValueError("L'email est trop long")
        return v

    @field_validator('siret')
    @classmethod
    def check_siret(cls, v):
        v = clean_optional(v, 255)
        if v is None:
            return v
        if len(v) != 14:
            raise ValueError('Le SIRET doit contenir 14 chiffres')
        if not validate_siret(v):
            raise ValueError('Le SIRET doit contenir uniquement des chiffres')
        return v

    @field_validator('naf')
    @classmethod
    def check_naf(cls, v):
        v = clean_optional(v, 255)
        if v is None:
            return v
        if len(v) != 5:
            raise ValueError('Le code NAF doit contenir 5 caractères')
        if not validate_naf(v):
            raise ValueError('Le code NAF doit être au format 1234A')
        return v

    @field_validator('tva_number')
    @classmethod
    def check_tva_number(cls, v):
        v = clean_optional(v, 20, 'Le numéro de TVA est trop long')
        if v is None:
            return v
        if not validate_tva_number(v):
            raise ValueError('Le numéro de TVA doit être au format FR12345678901')
        return v


class EstablishmentCreate(EstablishmentFields):
    name: str
    country: str = "France"
    is_active: bool = True

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom est requis', 255, 'Le nom est trop long')

    @field_validator('country')
    @classmethod
    def clean_country(cls, v):
        max_length, message = TEXT_LIMITS['country']
        return clean_optional(v, max_length, message) or "France"


class EstablishmentUpdate(EstablishmentFields):
    name: Optional[str] = None
    country: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom est requis', 255, 'Le nom est trop long')

    @field_validator('country')
    @classmethod
    def clean_country(cls, v):
        max_length, message = TEXT_LIMITS['country']
        return clean_optional(v, max_length, message) or "France"

    @field_validator('is_active')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError('Booléen attendu')
        return v


class EstablishmentOut(CamelModel):
    id: UUID
    name: str
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: str
    phone: Optional[str] = None
    email: Optional[str] = None
    siret: Optional[str] = None
    naf: Optional[str] = None
    tva_number: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class EstablishmentSummary(CamelModel):
    id: UUID
    name: str
    city: Optional[str] = None


class EstablishmentResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    establishment: EstablishmentOut


class EstablishmentList(CamelModel):
    success: bool = True
    establishments: List[EstablishmentOut]
    count: int
