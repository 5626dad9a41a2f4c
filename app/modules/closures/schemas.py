from pydantic import Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional, List, Dict, Any
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_optional, validate_iso_date

CENT = Decimal("0.01")


def _check_amount(v: Decimal) -> Decimal:
    if v < 0:
        raise ValueError('Le montant doit être positif')
    if v != v.quantize(CENT):
        raise ValueError('Le montant doit avoir au plus 2 décimales')
    return v.quantize(CENT)


class ClosureCreate(CamelModel):
    """Totaux de la journée tels que calculés par la caisse."""
    register_id: UUID
    date: str
    ticket_count: int = Field(0, ge=0)
    cancelled_count: int = Field(0, ge=0)
    total_ht: Decimal = Field(alias="totalHT")
    total_tva: Decimal = Field(alias="totalTVA")
    total_ttc: Decimal = Field(alias="totalTTC")
    payment_methods: Dict[str, Decimal] = {}
    first_ticket_number: Optional[str] = None
    last_ticket_number: Optional[str] = None
    last_ticket_hash: Optional[str] = None

    @field_validator('date')
    @classmethod
    def check_date(cls, v):
        v = v.strip() if v else v
        if not v:
            raise ValueError('Date de clôture manquante')
        if not validate_iso_date(v):
            raise ValueError('Date invalide (format attendu: YYYY-MM-DD)')
        return v

    @field_validator('total_ht', 'total_tva', 'total_ttc')
    @classmethod
    def check_totals(cls, v):
        return _check_amount(v)

    @field_validator('payment_methods')
    @classmethod
    def check_payment_methods(cls, v):
        cleaned = {}
        for mode, amount in v.items():
            mode = mode.strip()
            if not mode:
                raise ValueError('Mode de paiement invalide')
            cleaned[mode] = _check_amount(amount)
        return cleaned

    @field_validator('first_ticket_number', 'last_ticket_number')
    @classmethod
    def clean_ticket_numbers(cls, v):
        return clean_optional(v, 50)

    @field_validator('last_ticket_hash')
    @classmethod
    def clean_ticket_hash(cls, v):
        return clean_optional(v, 64)

    @model_validator(mode='after')
    def check_total_consistency(self):
        if self.total_ht + self.total_tva != self.total_ttc:
            raise ValueError('Le total TTC doit être égal au total HT plus la TVA')
        return self


class ClosureOut(CamelModel):
    id: UUID
    register_id: UUID
    establishment_id: UUID
    closure_date: str
    ticket_count: int
    cancelled_count: int
    total_ht: Decimal = Field(alias="totalHT")
    total_tva: Decimal = Field(alias="totalTVA")
    total_ttc: Decimal = Field(alias="totalTTC")
    payment_methods: Dict[str, Any]
    closure_hash: str
    first_ticket_number: Optional[str] = None
    last_ticket_number: Optional[str] = None
    last_ticket_hash: Optional[str] = None
    closed_by: Optional[str] = None
    closed_by_id: Optional[str] = None
    created_at: datetime


class ClosureResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    closure: ClosureOut


class ClosureList(CamelModel):
    success: bool = True
    closures: List[ClosureOut]
    count: int


class ClosureCheck(CamelModel):
    success: bool = True
    is_closed: bool
    date: str
    closure: Optional[ClosureOut] = None
