"""Repositories for database operations."""

from blogcms.repositories.base import BaseRepository
from blogcms.repositories.category import CategoryRepository
from blogcms.repositories.post import PostRepository
from blogcms.repositories.site_settings import SiteSettingsRepository
from blogcms.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "PostRepository",
    "SiteSettingsRepository",
    "UserRepository",
]
