"""Singleton site settings row."""

from datetime import datetime
from typing import cast

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from blogcms.utils.helpers import utc_now

SITE_SETTINGS_ID = 1


class SiteSettingsDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "site_settings")

    id: int = Field(default=SITE_SETTINGS_ID, primary_key=True)
    site_name: str = Field(default="My Blog", sa_column=Column(String(100), nullable=False))
    site_description: str | None = Field(default=None, sa_column=Column(String(500)))
    robots_index: bool = Field(default=True, description="Allow search engines to index")
    robots_follow: bool = Field(default=True, description="Allow search engines to follow links")
    revisit_days: int = Field(default=1, ge=1, description="Suggested crawl interval")
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
