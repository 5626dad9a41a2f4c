from pydantic import field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel
from app.common.validators import clean_optional
from app.modules.movements.models import MovementType


class MovementCreate(CamelModel):
    type: MovementType
    comment: Optional[str] = None

    @field_validator('comment')
    @classmethod
    def clean_comment(cls, v):
        return clean_optional(v, 1000, 'Le commentaire est trop long')


class MovementOut(CamelModel):
    id: UUID
    movement_number: str
    type: MovementType
    comment: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    created_at: datetime


class MovementResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    movement: MovementOut


class MovementList(CamelModel):
    success: bool = True
    movements: List[MovementOut]
    count: int
