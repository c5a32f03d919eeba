"""Category schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from blogcms.configs.settings import MAX_CATEGORY_NAME_LENGTH

CategoryName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_CATEGORY_NAME_LENGTH),
]


class CategoryCreate(BaseModel):
    name: CategoryName = Field(..., examples=["Engineering"])


class CategoryUpdate(BaseModel):
    name: CategoryName


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime
