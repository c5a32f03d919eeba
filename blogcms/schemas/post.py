"""Request and response schemas for blog posts."""

from datetime import datetime
from re import match
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from blogcms.configs.settings import MAX_EXCERPT_LENGTH, MAX_TITLE_LENGTH
from blogcms.utils.helpers import slugify

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_TITLE_LENGTH)]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _check_slug(slug: str) -> str:
    if not match(SLUG_PATTERN, slug):
        mssg = "Slug must be lowercase alphanumeric with hyphens only"
        raise ValueError(mssg)
    return slug


class PostCreate(BaseModel):
    """Post creation payload; the slug is derived from the title when omitted."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Title = Field(..., examples=["Caching in FastAPI"])
    slug: str | None = Field(default=None, max_length=220)
    content: Content
    excerpt: str | None = Field(default=None, max_length=MAX_EXCERPT_LENGTH)
    featured_image: str | None = Field(default=None, max_length=500)
    published: bool = False
    category_id: UUID | None = None

    @model_validator(mode="before")
    @classmethod
    def generate_slug_from_title(cls, data: Any) -> Any:  # noqa: ANN401
        """Auto-generate slug from title if not provided."""
        if not isinstance(data, dict):
            return data

        slug = data.get("slug")
        if slug:
            _check_slug(slug)
            return data

        title = data.get("title") or ""
        generated = slugify(title)
        if title and not generated:
            mssg = "Could not generate valid slug from title"
            raise ValueError(mssg)
        return {**data, "slug": generated or None}


class PostUpdate(BaseModel):
    """Partial update; only the fields sent are written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Title | None = None
    slug: str | None = Field(default=None, max_length=220)
    content: Content | None = None
    excerpt: str | None = Field(default=None, max_length=MAX_EXCERPT_LENGTH)
    featured_image: str | None = Field(default=None, max_length=500)
    published: bool | None = None
    category_id: UUID | None = None

    @model_validator(mode="after")
    def validate_slug(self) -> "PostUpdate":
        if self.slug is not None:
            _check_slug(self.slug)
        return self


class BulkDateUpdate(BaseModel):
    ids: list[UUID] = Field(..., min_length=1, description="Posts to re-stamp with the current time")


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    featured_image: str | None = None
    published: bool
    category_id: UUID | None = None
    author_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class PostSummary(BaseModel):
    """Listing entry without the body."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    excerpt: str | None = None
    featured_image: str | None = None
    published: bool
    category_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class BulkUpdateResult(BaseModel):
    updated: int
