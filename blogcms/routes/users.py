"""Dashboard User Routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from blogcms.auth.permissions import Permission
from blogcms.dependencies import UserServiceDep, require_permission
from blogcms.schemas import RoleAssignment, UserResponse

router = APIRouter(prefix="/api/dashboard/users", tags=["👥 Users"])


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[UserResponse],
    summary="List users",
    operation_id="dashboard_list_users",
)
async def list_users(
    users: UserServiceDep,
    user: Annotated[UserResponse, Depends(require_permission(Permission.VIEW_USERS))],
) -> list[UserResponse]:
    return await users.list_users()


@router.put(
    "/{user_id}/role",
    response_class=ORJSONResponse,
    response_model=UserResponse,
    summary="Assign role",
    responses={
        403: {
            "description": "Forbidden",
            "content": {"application/json": {"example": {"detail": "Missing permission: assign_roles"}}},
        },
    },
    operation_id="dashboard_assign_role",
)
async def assign_role(
    user_id: UUID,
    assignment: RoleAssignment,
    users: UserServiceDep,
    user: Annotated[UserResponse, Depends(require_permission(Permission.ASSIGN_ROLES))],
) -> UserResponse:
    """
    Change a user's role.

    Parameters
    ----------
    user_id : UUID
        User to change.
    assignment : RoleAssignment
        New role, one of `admin`, `editor`, `author` or `user`.
    users : UserService
        User service dependency.
    user : UserResponse
        Caller holding `assign_roles`.

    Returns
    -------
    UserResponse
        The updated user.
    """
    return await users.assign_role(user_id, assignment.role)
