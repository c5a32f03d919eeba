from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RecentPost(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    published: bool
    created_at: datetime


class DashboardStats(BaseModel):
    """Counts shown on the dashboard landing page; all zero when unavailable."""

    total_posts: int = 0
    published_posts: int = 0
    draft_posts: int = 0
    total_categories: int = 0
    total_users: int = 0
    recent_posts: list[RecentPost] = Field(default_factory=list)
