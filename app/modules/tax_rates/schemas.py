from pydantic import field_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_required, clean_optional, validate_tax_code


def _check_rate(v: Decimal) -> Decimal:
    if v < 0 or v > 100:
        raise ValueError('Le taux doit être compris entre 0 et 100')
    if v != v.quantize(Decimal("0.01")):
        raise ValueError('Le taux doit avoir au plus 2 décimales')
    return v.quantize(Decimal("0.01"))


def _check_code(v: str) -> str:
    v = clean_required(v, 'Le code TVA est requis', 10)
    if not validate_tax_code(v):
        raise ValueError('Le code doit contenir uniquement des lettres majuscules et des chiffres')
    return v


class TaxRateCreate(CamelModel):
    name: str
    rate: Decimal
    code: str
    description: Optional[str] = None
    is_default: bool = False

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom du taux de TVA est requis', 100)

    @field_validator('rate')
    @classmethod
    def validate_rate(cls, v):
        return _check_rate(v)

    @field_validator('code')
    @classmethod
    def validate_code(cls, v):
        return _check_code(v)

    @field_validator('description')
    @classmethod
    def clean_description(cls, v):
        return clean_optional(v, 500)


class TaxRateUpdate(CamelModel):
    name: Optional[str] = None
    rate: Optional[Decimal] = None
    code: Optional[str] = None
    description: Optional[str] = None
    is_default: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom du taux de TVA est requis', 100)

    @field_validator('rate')
    @classmethod
    def validate_rate(cls, v):
        if v is None:
            raise ValueError('Le taux est requis')
        return _check_rate(v)

    @field_validator('code')
    @classmethod
    def validate_code(cls, v):
        return _check_code(v)

    @field_validator('description')
    @classmethod
    def clean_description(cls, v):
        return clean_optional(v, 500)

    @field_validator('is_default')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError('Booléen attendu')
        return v


class TaxRateOut(CamelModel):
    id: UUID
    name: str
    rate: Decimal
    code: str
    description: Optional[str] = None
    is_default: bool
    is_archived: bool
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaxRateResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    tax_rate: TaxRateOut


class TaxRateList(CamelModel):
    success: bool = True
    tax_rates: List[TaxRateOut]
    count: int
