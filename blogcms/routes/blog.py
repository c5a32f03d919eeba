"""
Public Blog Routes.

Read-only endpoints behind the public site: published posts, a single post
by slug, the category list and the site settings used for page metadata.
All reads go through the tagged cache and are refreshed by dashboard writes.
"""

from uuid import UUID

from fastapi import APIRouter, Query
from fastapi.responses import ORJSONResponse

from blogcms.dependencies import CategoryServiceDep, PostServiceDep, SettingsServiceDep
from blogcms.errors import RecordNotFoundError
from blogcms.schemas import CategoryResponse, PostResponse, PostSummary, SiteSettingsResponse

router = APIRouter(prefix="/api", tags=["📰 Blog"])


@router.get(
    "/posts",
    response_class=ORJSONResponse,
    response_model=list[PostSummary],
    summary="List published posts",
    operation_id="list_published_posts",
)
async def list_published_posts(
    posts: PostServiceDep,
    category_id: UUID | None = Query(default=None, description="Only posts in this category"),
) -> list[PostSummary]:
    """
    List published posts, newest first.

    Parameters
    ----------
    posts : PostService
        Post service dependency.
    category_id : UUID | None
        Optional category filter.

    Returns
    -------
    list[PostSummary]
        Published posts without their body.
    """
    return await posts.list_published_posts(category_id)


@router.get(
    "/posts/{slug}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get published post by slug",
    responses={
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Post not found"}}},
        },
    },
    operation_id="get_published_post",
)
async def get_published_post(slug: str, posts: PostServiceDep) -> PostResponse:
    """Drafts are answered with 404 as if they did not exist."""
    post = await posts.get_published_post(slug)
    if post is None:
        mssg = f"Post '{slug}' not found"
        raise RecordNotFoundError(mssg)
    return post


@router.get(
    "/categories",
    response_class=ORJSONResponse,
    response_model=list[CategoryResponse],
    summary="List categories",
    operation_id="list_categories",
)
async def list_categories(categories: CategoryServiceDep) -> list[CategoryResponse]:
    return await categories.list_categories()


@router.get(
    "/site-settings",
    response_class=ORJSONResponse,
    response_model=SiteSettingsResponse | None,
    summary="Get site settings",
    operation_id="get_public_site_settings",
)
async def get_site_settings(site: SettingsServiceDep) -> SiteSettingsResponse | None:
    return await site.get_settings()
