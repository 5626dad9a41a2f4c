from pydantic import Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_required


class VariationGroupCreate(CamelModel):
    name: str
    is_archived: bool = False

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom du groupe est requis', 255)


class VariationGroupUpdate(CamelModel):
    name: Optional[str] = None
    is_archived: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom du groupe est requis', 255)


class VariationCreate(CamelModel):
    name: str
    group_id: UUID
    sort_order: int = Field(0, ge=0)
    is_archived: bool = False

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom de la variation est requis', 255)


class VariationUpdate(CamelModel):
    name: Optional[str] = None
    group_id: Optional[UUID] = None
    sort_order: Optional[int] = Field(None, ge=0)
    is_archived: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom de la variation est requis', 255)

    @field_validator('group_id', 'sort_order')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError('Champ requis')
        return v


class VariationOut(CamelModel):
    id: UUID
    group_id: UUID
    name: str
    sort_order: int
    is_archived: bool
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class VariationGroupOut(CamelModel):
    id: UUID
    name: str
    is_archived: bool
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class VariationItem(CamelModel):
    id: UUID
    name: str
    sort_order: int


class VariationGroupWithVariations(CamelModel):
    id: UUID
    name: str
    variations: List[VariationItem]


class VariationCatalog(CamelModel):
    success: bool = True
    groups: List[VariationGroupWithVariations]


class VariationGroupList(CamelModel):
    success: bool = True
    groups: List[VariationGroupOut]
    count: int


class VariationGroupResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    group: VariationGroupOut


class VariationResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    variation: VariationOut
