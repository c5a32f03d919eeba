from collections.abc import Awaitable, Callable
from logging import Logger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blogcms.utils.helpers import host

BASE_EXCEPTION = (
    OSError,
    PermissionError,
    MemoryError,
    RuntimeError,
    ConnectionError,
    TimeoutError,
)


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", "Internal Server Error")

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        # Extra public attributes (e.g. field errors) travel with the detail
        content = {"detail": detail}
        content.update(
            {
                k: v
                for k, v in exc.__dict__.items()
                if k not in ("status_code", "detail") and not k.startswith("_")
            },
        )

        return ORJSONResponse(content=content, status_code=status_code)

    return handler
