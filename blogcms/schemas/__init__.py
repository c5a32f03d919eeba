"""Pydantic schemas for request validation and responses."""

from blogcms.schemas.auth import Token, TokenData
from blogcms.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from blogcms.schemas.dashboard import DashboardStats, RecentPost
from blogcms.schemas.health import HealthCheckResponse
from blogcms.schemas.indexing import (
    BatchIndexingRequest,
    BatchIndexingResult,
    IndexingRequest,
    IndexingResult,
    NotificationType,
    SubmissionStatus,
)
from blogcms.schemas.post import (
    BulkDateUpdate,
    BulkUpdateResult,
    PostCreate,
    PostResponse,
    PostSummary,
    PostUpdate,
)
from blogcms.schemas.seo import ChangeFrequency, SitemapCategory, SitemapPost, SitemapUrl
from blogcms.schemas.site_settings import SiteSettingsResponse, SiteSettingsUpdate
from blogcms.schemas.user import (
    RegistrationResponse,
    RoleAssignment,
    UserCreate,
    UserLogin,
    UserResponse,
)

__all__ = [
    "BatchIndexingRequest",
    "BatchIndexingResult",
    "BulkDateUpdate",
    "BulkUpdateResult",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "ChangeFrequency",
    "DashboardStats",
    "HealthCheckResponse",
    "IndexingRequest",
    "IndexingResult",
    "NotificationType",
    "PostCreate",
    "PostResponse",
    "PostSummary",
    "PostUpdate",
    "RecentPost",
    "RegistrationResponse",
    "RoleAssignment",
    "SiteSettingsResponse",
    "SiteSettingsUpdate",
    "SitemapCategory",
    "SitemapPost",
    "SitemapUrl",
    "SubmissionStatus",
    "Token",
    "TokenData",
    "UserCreate",
    "UserLogin",
    "UserResponse",
]
