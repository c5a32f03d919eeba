"""Dashboard Routes: landing-page statistics and site settings."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from blogcms.auth.permissions import Permission
from blogcms.dependencies import (
    CurrentUserDep,
    DashboardServiceDep,
    SettingsServiceDep,
    require_permission,
)
from blogcms.schemas import DashboardStats, SiteSettingsResponse, SiteSettingsUpdate, UserResponse

router = APIRouter(prefix="/api/dashboard", tags=["📊 Dashboard"])


@router.get(
    "/stats",
    response_class=ORJSONResponse,
    response_model=DashboardStats,
    summary="Dashboard statistics",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "total_posts": 12,
                        "published_posts": 9,
                        "draft_posts": 3,
                        "total_categories": 4,
                        "total_users": 2,
                        "recent_posts": [],
                    },
                },
            },
        },
    },
    operation_id="dashboard_stats",
)
async def get_stats(dashboard: DashboardServiceDep, user: CurrentUserDep) -> DashboardStats:
    """Counts are all zero when the database cannot be reached."""
    return await dashboard.get_stats()


@router.get(
    "/settings",
    response_class=ORJSONResponse,
    response_model=SiteSettingsResponse | None,
    summary="Get site settings",
    operation_id="dashboard_get_settings",
)
async def get_settings(
    site: SettingsServiceDep,
    user: Annotated[UserResponse, Depends(require_permission(Permission.MANAGE_SETTINGS))],
) -> SiteSettingsResponse | None:
    return await site.get_settings()


@router.put(
    "/settings",
    response_class=ORJSONResponse,
    response_model=SiteSettingsResponse,
    summary="Update site settings",
    operation_id="dashboard_update_settings",
)
async def update_settings(
    update: SiteSettingsUpdate,
    site: SettingsServiceDep,
    user: Annotated[UserResponse, Depends(require_permission(Permission.MANAGE_SETTINGS))],
) -> SiteSettingsResponse:
    """Changes show up in robots.txt and page metadata on the next request."""
    return await site.update_settings(update)
