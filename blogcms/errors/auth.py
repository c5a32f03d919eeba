"""Authentication and authorisation errors."""

from logging import getLogger

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from blogcms.configs import file_logger
from blogcms.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class InvalidCredentialsError(UserAuthenticationError):
    """Raised when credentials are invalid."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password", HTTP_401_UNAUTHORIZED)


class PermissionDeniedError(UserAuthenticationError):
    """Raised when the caller's role lacks a required permission."""

    def __init__(self, permission: str) -> None:
        super().__init__(f"Missing permission: {permission}", HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
