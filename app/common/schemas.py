"""
Base schemas shared by every module.

The API speaks camelCase JSON (``isArchived``, ``establishmentId``); models
keep snake_case attributes and accept both spellings on input.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
