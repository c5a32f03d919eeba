"""Site-wide settings schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SiteSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    site_name: str
    site_description: str | None = None
    robots_index: bool = True
    robots_follow: bool = True
    revisit_days: int = 1
    updated_at: datetime | None = None


class SiteSettingsUpdate(BaseModel):
    site_name: str | None = Field(default=None, min_length=1, max_length=100)
    site_description: str | None = Field(default=None, max_length=500)
    robots_index: bool | None = None
    robots_follow: bool | None = None
    revisit_days: int | None = Field(default=None, ge=1, le=365)
