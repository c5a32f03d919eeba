"""Rate limiter configuration using slowapi."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from blogcms.configs import LimiterConfig, file_logger

logger = file_logger(getLogger(__name__))


def get_identifier(request: Request) -> str:
    """
    Rate limit key: the bearer token when present, otherwise the client IP.

    Args:
        request: FastAPI request object.
    """
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return f"token:{authorization.removeprefix('Bearer ')[-16:]}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Answer 429 with the exceeded limit and the retry delay."""
    http_exc = cast(RateLimitExceeded, exc)
    response = _rate_limit_exceeded_handler(request, http_exc)
    logger.warning(f"Rate limit exceeded for {get_identifier(request)} on {request.url.path}")
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content={
            "detail": "Rate limit exceeded",
            "allowed_requests": http_exc.detail,
            "retry_after": f"{response.headers.get('retry-after', '60')} seconds",
        },
    )
