from pydantic import Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_required, clean_optional


class CategoryCreate(CamelModel):
    name: str
    parent_id: Optional[UUID] = None
    sort_order: int = Field(0, ge=0)
    icon: Optional[str] = None
    color: Optional[str] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom de la catégorie est obligatoire', 255)

    @field_validator('icon')
    @classmethod
    def clean_icon(cls, v):
        return clean_optional(v, 50)

    @field_validator('color')
    @classmethod
    def clean_color(cls, v):
        return clean_optional(v, 20)


class CategoryUpdate(CamelModel):
    """``parentId: null`` replace la catégorie à la racine."""
    name: Optional[str] = None
    parent_id: Optional[UUID] = None
    sort_order: Optional[int] = Field(None, ge=0)
    icon: Optional[str] = None
    color: Optional[str] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return clean_required(v, 'Le nom de la catégorie est obligatoire', 255)

    @field_validator('sort_order')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError('Champ requis')
        return v

    @field_validator('icon')
    @classmethod
    def clean_icon(cls, v):
        return clean_optional(v, 50)

    @field_validator('color')
    @classmethod
    def clean_color(cls, v):
        return clean_optional(v, 20)


class CategoryOut(CamelModel):
    id: UUID
    name: str
    parent_id: Optional[UUID] = None
    sort_order: int
    icon: Optional[str] = None
    color: Optional[str] = None
    is_archived: bool
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CategoryNode(CamelModel):
    id: UUID
    name: str
    parent_id: Optional[UUID] = None
    sort_order: int
    icon: Optional[str] = None
    color: Optional[str] = None
    is_archived: bool
    children: List["CategoryNode"] = []


class CategoryTree(CamelModel):
    success: bool = True
    categories: List[CategoryNode]
    total_count: int


class CategoryResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    category: CategoryOut
