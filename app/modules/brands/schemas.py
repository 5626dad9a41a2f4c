from pydantic import field_validator
from uuid import UUID
from typing import Optional, List
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_required, clean_optional


class BrandCreate(CamelModel):
    name: str
    description: Optional[str] = None
    is_archived: bool = False

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom de la marque est requis', 255)

    @field_validator('description')
    @classmethod
    def clean_description(cls, v):
        return clean_optional(v, 1000)


class BrandUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_archived: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom de la marque est requis', 255)

    @field_validator('description')
    @classmethod
    def clean_description(cls, v):
        return clean_optional(v, 1000)


class BrandOut(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    is_archived: bool
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class BrandResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    brand: BrandOut


class BrandList(CamelModel):
    success: bool = True
    brands: List[BrandOut]
    count: int
