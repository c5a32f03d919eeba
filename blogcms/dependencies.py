"""FastAPI dependencies: the application context, services and the authenticated user."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from starlette.status import HTTP_401_UNAUTHORIZED

from blogcms.auth.permissions import Permission, has_permission
from blogcms.context import AppContext
from blogcms.errors import PermissionDeniedError
from blogcms.managers.token_manager import decode_access_token
from blogcms.schemas import PostResponse, UserResponse
from blogcms.services import (
    CategoryService,
    DashboardService,
    PostService,
    SeoService,
    SiteSettingsService,
    UserService,
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_context(request: Request) -> AppContext:
    """The context built by the lifespan and stored on ``app.state``."""
    return request.app.state.context


ContextDep = Annotated[AppContext, Depends(get_context)]


def get_post_service(context: ContextDep) -> PostService:
    return PostService(context)


def get_category_service(context: ContextDep) -> CategoryService:
    return CategoryService(context)


def get_user_service(context: ContextDep) -> UserService:
    return UserService(context)


def get_settings_service(context: ContextDep) -> SiteSettingsService:
    return SiteSettingsService(context)


def get_dashboard_service(context: ContextDep) -> DashboardService:
    return DashboardService(context)


def get_seo_service(context: ContextDep) -> SeoService:
    return SeoService(context)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
SettingsServiceDep = Annotated[SiteSettingsService, Depends(get_settings_service)]
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
SeoServiceDep = Annotated[SeoService, Depends(get_seo_service)]


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    users: UserServiceDep,
) -> UserResponse:
    """
    Resolve the bearer token to a stored user.

    Raises:
        HTTPException: 401 for an invalid token or a deleted user.
    """
    token_data = decode_access_token(token)
    if not token_data:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await users.get_user(token_data.user_id)
    if not user:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


CurrentUserDep = Annotated[UserResponse, Depends(get_current_user)]


def require_permission(permission: Permission) -> Callable[..., Awaitable[UserResponse]]:
    """
    Create a dependency that requires the caller's role to grant ``permission``.

    Example:
        @router.get("/users")
        async def list_users(user: Annotated[UserResponse, Depends(require_permission(Permission.VIEW_USERS))]):
            ...
    """

    async def permission_checker(user: CurrentUserDep) -> UserResponse:
        if not has_permission(user.role, permission):
            raise PermissionDeniedError(permission.value)
        return user

    return permission_checker


def ensure_post_access(
    user: UserResponse,
    post: PostResponse,
    any_permission: Permission,
    own_permission: Permission,
) -> None:
    """
    Allow a change to ``post`` through the broad permission, or the narrow one on own posts.

    Raises:
        PermissionDeniedError: Neither permission applies.
    """
    if has_permission(user.role, any_permission):
        return
    if post.author_id == user.id and has_permission(user.role, own_permission):
        return
    raise PermissionDeniedError(any_permission.value)
