"""Database models for the application."""

from blogcms.models.category import CategoryDB
from blogcms.models.post import PostDB
from blogcms.models.site_settings import SITE_SETTINGS_ID, SiteSettingsDB
from blogcms.models.user import UserDB

__all__ = ["SITE_SETTINGS_ID", "CategoryDB", "PostDB", "SiteSettingsDB", "UserDB"]
