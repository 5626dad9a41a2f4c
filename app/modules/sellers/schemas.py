from pydantic import field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_required, clean_optional
from app.modules.establishments.schemas import EstablishmentSummary


class SellerCreate(CamelModel):
    name: str
    code: Optional[str] = None
    is_active: bool = True
    establishment_ids: Optional[List[UUID]] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom est requis', 100, 'Le nom est trop long')

    @field_validator('code')
    @classmethod
    def clean_code(cls, v):
        return clean_optional(v, 20, 'Le code est trop long')


class SellerUpdate(CamelModel):
    name: Optional[str] = None
    code: Optional[str] = None
    is_active: Optional[bool] = None
    establishment_ids: Optional[List[UUID]] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom est requis', 100, 'Le nom est trop long')

    @field_validator('code')
    @classmethod
    def clean_code(cls, v):
        return clean_optional(v, 20, 'Le code est trop long')

    @field_validator('is_active')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError('Booléen attendu')
        return v


class SellerOut(CamelModel):
    id: UUID
    name: str
    code: Optional[str] = None
    is_active: bool
    establishment_ids: List[UUID] = []
    created_at: datetime
    updated_at: datetime


class SellerResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    seller: SellerOut


class SellerList(CamelModel):
    success: bool = True
    sellers: List[SellerOut]
    count: int


class SellerEstablishments(CamelModel):
    success: bool = True
    establishments: List[EstablishmentSummary]
    establishment_ids: List[UUID]
