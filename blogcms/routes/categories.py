"""Dashboard Category Routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from blogcms.auth.permissions import Permission
from blogcms.dependencies import CategoryServiceDep, require_permission
from blogcms.schemas import CategoryCreate, CategoryResponse, CategoryUpdate, UserResponse

router = APIRouter(prefix="/api/dashboard/categories", tags=["🏷️ Categories"])


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=CategoryResponse,
    status_code=HTTP_201_CREATED,
    summary="Create category",
    responses={
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {"example": {"detail": "Category with this name already exists"}},
            },
        },
    },
    operation_id="dashboard_create_category",
)
async def create_category(
    category: CategoryCreate,
    categories: CategoryServiceDep,
    user: Annotated[UserResponse, Depends(require_permission(Permission.CREATE_CATEGORY))],
) -> CategoryResponse:
    return await categories.create_category(category)


@router.put(
    "/{category_id}",
    response_class=ORJSONResponse,
    response_model=CategoryResponse,
    summary="Rename category",
    operation_id="dashboard_rename_category",
)
async def rename_category(
    category_id: UUID,
    category: CategoryUpdate,
    categories: CategoryServiceDep,
    user: Annotated[UserResponse, Depends(require_permission(Permission.EDIT_CATEGORY))],
) -> CategoryResponse:
    return await categories.rename_category(category_id, category)


@router.delete(
    "/{category_id}",
    response_class=ORJSONResponse,
    summary="Delete category",
    responses={
        200: {"content": {"application/json": {"example": {"detached_posts": 3}}}},
    },
    operation_id="dashboard_delete_category",
)
async def delete_category(
    category_id: UUID,
    categories: CategoryServiceDep,
    user: Annotated[UserResponse, Depends(require_permission(Permission.DELETE_CATEGORY))],
) -> ORJSONResponse:
    """Delete a category; its posts stay, uncategorised."""
    detached = await categories.delete_category(category_id)
    return ORJSONResponse({"detached_posts": detached})
