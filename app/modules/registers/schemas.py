from pydantic import Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_required
from app.modules.establishments.schemas import EstablishmentSummary


class RegisterCreate(CamelModel):
    establishment_id: UUID
    name: str
    is_active: bool = True

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom est requis', 100, 'Le nom est trop long')


class RegisterUpdate(CamelModel):
    establishment_id: Optional[UUID] = None
    name: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom est requis', 100, 'Le nom est trop long')

    @field_validator('establishment_id', 'is_active')
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            if info.field_name == 'establishment_id':
                raise ValueError("L'ID de l'établissement est requis")
            raise ValueError('Booléen attendu')
        return v


class RegisterOut(CamelModel):
    id: UUID
    establishment_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    establishment: Optional[EstablishmentSummary] = None


class RegisterResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    register_: RegisterOut = Field(alias="register")


class RegisterList(CamelModel):
    success: bool = True
    registers: List[RegisterOut]
    count: int
