"""User database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from blogcms.utils.helpers import utc_now


class UserDB(SQLModel, table=True):
    """
    Dashboard account.

    ``role`` names one of the fixed roles in ``blogcms.auth.permissions``.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(sa_column=Column(String(100), nullable=False))
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Normalised (lowercase, trimmed) email address",
    )
    password_hash: str = Field(sa_column=Column(String(255), nullable=False))
    role: str = Field(
        default="user",
        sa_column=Column(String(20), nullable=False, server_default="user", index=True),
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
