"""Application services: mutations, cached reads and generated documents."""

from blogcms.services.base import BaseService, validate_input
from blogcms.services.category_service import CategoryService
from blogcms.services.dashboard_service import DashboardService
from blogcms.services.post_service import PostService
from blogcms.services.seo import SeoService
from blogcms.services.site_settings_service import SiteSettingsService
from blogcms.services.user_service import UserService

__all__ = [
    "BaseService",
    "CategoryService",
    "DashboardService",
    "PostService",
    "SeoService",
    "SiteSettingsService",
    "UserService",
    "validate_input",
]
