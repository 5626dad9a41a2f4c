from pydantic import EmailStr, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_required, clean_optional, blank_to_none

TEXT_LIMITS = {
    "contact": 255,
    "phone": 50,
    "address": 500,
    "description": 1000,
}


class SupplierFields(CamelModel):
    contact: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None

    @field_validator('contact', 'phone', 'address', 'description')
    @classmethod
    def clean_text(cls, v, info):
        return clean_optional(v, TEXT_LIMITS[info.field_name])

    @field_validator('email', mode='before')
    @classmethod
    def clean_email(cls, v):
        v = blank_to_none(v)
        if v is not None and len(v) > 255:
            raise ValueError('Ne doit pas dépasser 255 caractères')
        return v


class SupplierCreate(SupplierFields):
    name: str
    is_archived: bool = False

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom du fournisseur est requis', 255)


class SupplierUpdate(SupplierFields):
    name: Optional[str] = None
    is_archived: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom du fournisseur est requis', 255)


class SupplierOut(CamelModel):
    id: UUID
    name: str
    contact: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    is_archived: bool
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SupplierResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    supplier: SupplierOut


class SupplierList(CamelModel):
    success: bool = True
    suppliers: List[SupplierOut]
    count: int
