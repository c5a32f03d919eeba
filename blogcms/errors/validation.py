"""Custom validation error handling for FastAPI."""

from logging import getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError
from starlette.status import HTTP_422_UNPROCESSABLE_CONTENT

from blogcms.configs import file_logger
from blogcms.errors.base import BaseAppError, create_exception_handler
from blogcms.utils.helpers import host

logger = file_logger(getLogger(__name__))


class InputValidationError(BaseAppError):
    """Malformed mutation input, rejected before any write."""

    def __init__(
        self,
        detail: str = "Validation Error",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_422_UNPROCESSABLE_CONTENT)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "InputValidationError":
        """Build from a pydantic error, keeping the first message as detail."""
        errors = format_errors(exc.errors(), skip_body=False)
        detail = errors[0]["message"] if errors else "Validation Error"
        return cls(detail=detail, errors=errors)


def format_errors(raw: Any, *, skip_body: bool = True) -> list[dict[str, Any]]:  # noqa: ANN401
    """
    Flatten pydantic error dicts into field/message/type triples.

    Args:
        raw: Sequence of pydantic error dicts.
        skip_body: Drop the leading ``body`` location segment.

    Returns:
        List of JSON-serialisable error dicts.
    """
    formatted: list[dict[str, Any]] = []
    for error in raw:
        loc = list(error.get("loc", []))
        if skip_body and loc:
            loc = loc[1:]
        formatted.append(
            {
                "field": ".".join(str(part) for part in loc),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            },
        )
    return formatted


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle request validation errors with cleaner response format.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    exec_error = cast(RequestValidationError, exc)
    formatted_errors = format_errors(exec_error.errors())

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        content={
            "detail": "Validation failed",
            "errors": formatted_errors,
        },
    )


input_validation_exception_handler = create_exception_handler(logger)
