"""
Dashboard Post Routes.

CRUD for posts plus publish toggling and bulk date updates. Every write is
committed before the cache is invalidated, so the public listing served
right after a successful response already reflects it.

Permissions
-----------
  - `create_post` to create.
  - `edit_post`, or `edit_own_post` on the caller's posts, to update.
  - `delete_post`, or `delete_own_post` on the caller's posts, to delete.
  - `publish_post` to toggle publication and re-stamp dates.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from blogcms.auth.permissions import Permission, has_permission
from blogcms.dependencies import CurrentUserDep, PostServiceDep, ensure_post_access, require_permission
from blogcms.schemas import (
    BulkDateUpdate,
    BulkUpdateResult,
    PostCreate,
    PostResponse,
    PostSummary,
    PostUpdate,
    UserResponse,
)

router = APIRouter(prefix="/api/dashboard/posts", tags=["📝 Posts"])

CanViewDrafts = Annotated[UserResponse, Depends(require_permission(Permission.VIEW_DRAFT_POST))]
CanCreate = Annotated[UserResponse, Depends(require_permission(Permission.CREATE_POST))]
CanPublish = Annotated[UserResponse, Depends(require_permission(Permission.PUBLISH_POST))]


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[PostSummary],
    summary="List all posts",
    operation_id="dashboard_list_posts",
)
async def list_posts(posts: PostServiceDep, user: CanViewDrafts) -> list[PostSummary]:
    """Every post, drafts included, newest first."""
    return await posts.list_all_posts()


@router.get(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get post by id",
    operation_id="dashboard_get_post",
)
async def get_post(post_id: UUID, posts: PostServiceDep, user: CanViewDrafts) -> PostResponse:
    return await posts.get_post(post_id)


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create post",
    responses={
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {"example": {"detail": "A post with slug 'hello' already exists"}},
            },
        },
    },
    operation_id="dashboard_create_post",
)
async def create_post(post: PostCreate, posts: PostServiceDep, user: CanCreate) -> PostResponse:
    """
    Create a post authored by the caller.

    Publishing at creation requires `publish_post` as well; without it the
    post is stored as a draft.

    Parameters
    ----------
    post : PostCreate
        Post payload; the slug is derived from the title when omitted.
    posts : PostService
        Post service dependency.
    user : UserResponse
        Caller holding `create_post`.

    Returns
    -------
    PostResponse
        The stored post.
    """
    if post.published and not has_permission(user.role, Permission.PUBLISH_POST):
        post = post.model_copy(update={"published": False})
    return await posts.create_post(post, author_id=user.id)


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update post",
    operation_id="dashboard_update_post",
)
async def update_post(
    post_id: UUID,
    post_update: PostUpdate,
    posts: PostServiceDep,
    user: CurrentUserDep,
) -> PostResponse:
    current = await posts.get_post(post_id)
    ensure_post_access(user, current, Permission.EDIT_POST, Permission.EDIT_OWN_POST)
    changes = post_update.model_dump(exclude_unset=True)
    if not has_permission(user.role, Permission.PUBLISH_POST):
        changes.pop("published", None)
    return await posts.update_post(post_id, changes)


@router.patch(
    "/{post_id}/toggle",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Toggle publication",
    operation_id="dashboard_toggle_post",
)
async def toggle_post(
    post_id: UUID,
    posts: PostServiceDep,
    user: CanPublish,
    current: Annotated[bool | None, Body(embed=True)] = None,
) -> PostResponse:
    """Flip `published`; `current` is the state the editor last saw."""
    return await posts.toggle_published(post_id, current)


@router.delete(
    "/{post_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete post",
    operation_id="dashboard_delete_post",
)
async def delete_post(post_id: UUID, posts: PostServiceDep, user: CurrentUserDep) -> Response:
    current = await posts.get_post(post_id)
    ensure_post_access(user, current, Permission.DELETE_POST, Permission.DELETE_OWN_POST)
    await posts.delete_post(post_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.post(
    "/bulk-dates",
    response_class=ORJSONResponse,
    response_model=BulkUpdateResult,
    summary="Re-stamp post dates",
    operation_id="dashboard_bulk_update_dates",
)
async def bulk_update_dates(
    body: BulkDateUpdate,
    posts: PostServiceDep,
    user: CanPublish,
) -> BulkUpdateResult:
    """Set the created and updated dates of the given posts to now."""
    return await posts.bulk_update_post_dates(body.ids)

