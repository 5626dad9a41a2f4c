from pydantic import EmailStr, Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional, List, Dict, Any
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_optional, blank_to_none


class ClientPayload(CamelModel):
    """Corps de création et de mise à jour (PUT remplace la fiche complète)."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gdpr_consent: Optional[bool] = None
    marketing_consent: bool = False
    loyalty_program: bool = False
    discount: Decimal = Decimal("0")
    notes: Optional[str] = None
    alerts: Optional[str] = None
    metadata: Dict[str, Any] = {}

    @model_validator(mode='before')
    @classmethod
    def consent_present(cls, data):
        # Absent consent goes through consent_required like an explicit false
        if isinstance(data, dict) and "gdprConsent" not in data and "gdpr_consent" not in data:
            data = {**data, "gdprConsent": None}
        return data

    @field_validator('first_name', 'last_name')
    @classmethod
    def clean_names(cls, v):
        return clean_optional(v, 100, 'Le nom est trop long')

    @field_validator('phone')
    @classmethod
    def clean_phone(cls, v):
        return clean_optional(v, 20, 'Le numéro de téléphone est trop long')

    @field_validator('address', 'notes', 'alerts')
    @classmethod
    def clean_text(cls, v):
        return clean_optional(v, 5000)

    @field_validator('email', mode='before')
    @classmethod
    def clean_email(cls, v):
        return blank_to_none(v)

    @field_validator('discount', mode='before')
    @classmethod
    def default_discount(cls, v):
        v = blank_to_none(v)
        return Decimal("0") if v is None else v

    @field_validator('discount')
    @classmethod
    def check_discount(cls, v):
        if v < 0 or v > 100:
            raise ValueError('La remise doit être comprise entre 0 et 100')
        return v.quantize(Decimal("0.01"))

    @field_validator('gdpr_consent')
    @classmethod
    def consent_required(cls, v):
        if not v:
            raise ValueError('Le consentement RGPD est obligatoire')
        return v

    @field_validator('metadata', mode='before')
    @classmethod
    def default_metadata(cls, v):
        return {} if v is None else v


class ClientOut(CamelModel):
    id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    gdpr_consent: bool
    gdpr_consent_date: Optional[datetime] = None
    marketing_consent: bool
    loyalty_program: bool
    discount: Decimal
    notes: Optional[str] = None
    alerts: Optional[str] = None
    metadata_: Optional[Dict[str, Any]] = Field(
        None, validation_alias="metadata_", serialization_alias="metadata"
    )
    created_at: datetime
    updated_at: datetime


class ClientResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    client: ClientOut


class ClientList(CamelModel):
    success: bool = True
    clients: List[ClientOut]
    count: int
