"""Category database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from blogcms.utils.helpers import utc_now


class CategoryDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(
        sa_column=Column(String(100), unique=True, nullable=False, index=True),
        description="Category name (unique)",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
