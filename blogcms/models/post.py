"""Post database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import Boolean, DateTime, Index, Text
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from blogcms.utils.helpers import utc_now


class PostDB(SQLModel, table=True):
    """
    Blog post.

    ``published`` gates visibility on the public blog and in the posts
    sitemap; ``updated_at`` drives sitemap recency.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_published_updated", "published", "updated_at"),
        Index("ix_posts_category_published", "category_id", "published"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)

    title: str = Field(sa_column=Column(String(200), nullable=False))
    slug: str = Field(
        sa_column=Column(String(220), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    content: str = Field(sa_column=Column(Text, nullable=False))
    excerpt: str | None = Field(default=None, sa_column=Column(String(500)))
    featured_image: str | None = Field(default=None, sa_column=Column(String(500)))
    published: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
    )

    category_id: UUID | None = Field(
        default=None,
        sa_column=Column(
            "category_id",
            ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    author_id: UUID | None = Field(
        default=None,
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Caching in FastAPI",
                "slug": "caching-in-fastapi",
                "content": "Tag-based invalidation keeps reads fresh...",
                "published": True,
            },
        },
    )
