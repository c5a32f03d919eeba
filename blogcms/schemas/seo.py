from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ChangeFrequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SitemapPost(BaseModel):
    """The fields of a published post a sitemap entry is built from."""

    model_config = ConfigDict(from_attributes=True)

    slug: str
    created_at: datetime
    updated_at: datetime | None = None


class SitemapCategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    updated_at: datetime | None = None


class SitemapUrl(BaseModel):
    loc: str
    lastmod: str
    changefreq: ChangeFrequency
    priority: float
