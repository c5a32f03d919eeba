"""
Auth Routes.

Registration and password login. Both are rate limited per client; the
first account ever registered is made an administrator.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from starlette.status import HTTP_201_CREATED

from blogcms.dependencies import CurrentUserDep, UserServiceDep
from blogcms.managers.rate_limiter import limiter
from blogcms.schemas import RegistrationResponse, Token, UserCreate, UserResponse

router = APIRouter(prefix="/api/auth", tags=["🔑 Auth"])


@router.post(
    "/register",
    response_class=ORJSONResponse,
    response_model=RegistrationResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a user",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "User registered successfully",
                        "user": {
                            "id": "5f0c6c1e-3a55-4c5e-9a43-7c8f1a1c2b3d",
                            "name": "Jane",
                            "email": "jane@example.com",
                            "role": "admin",
                        },
                    },
                },
            },
        },
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {"example": {"detail": "A user with this email already exists"}},
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="auth_register",
)
@limiter.limit("5/hour")
async def register_user(
    request: Request,
    user_create: UserCreate,
    users: UserServiceDep,
) -> RegistrationResponse:
    """
    Register a new account.

    Parameters
    ----------
    request : Request
        Current request context, used by the rate limiter.
    user_create : UserCreate
        Name, email and password.
    users : UserService
        User service dependency.

    Returns
    -------
    RegistrationResponse
        Confirmation message and the created user.
    """
    return await users.register(user_create)


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=Token,
    summary="Login for access token",
    description="Authenticate with email (as `username`) and password to obtain a bearer token.",
    responses={
        401: {
            "description": "Unauthorized",
            "content": {"application/json": {"example": {"detail": "Invalid email or password"}}},
        },
    },
    operation_id="auth_login",
)
@limiter.limit("5/minute")
async def login_for_access_token(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    users: UserServiceDep,
) -> Token:
    return await users.authenticate({"email": form_data.username, "password": form_data.password})


@router.get(
    "/me",
    response_class=ORJSONResponse,
    response_model=UserResponse,
    summary="Current user",
    operation_id="auth_me",
)
async def read_current_user(user: CurrentUserDep) -> UserResponse:
    return user
