"""Errors raised by best-effort collaborators (indexing API, cache invalidation)."""

from logging import getLogger

from starlette.status import HTTP_502_BAD_GATEWAY

from blogcms.configs import file_logger
from blogcms.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class ExternalServiceError(BaseAppError):
    """
    Failure of a side-effect collaborator.

    Logged and swallowed by mutation handlers; only surfaces on endpoints
    that call the collaborator directly.
    """

    def __init__(
        self,
        detail: str = "External service error",
        status_code: int = HTTP_502_BAD_GATEWAY,
    ) -> None:
        super().__init__(detail, status_code)


class IndexingServiceError(ExternalServiceError):
    """Indexing API rejected a submission or the token exchange failed."""

    def __init__(
        self,
        detail: str = "Indexing API error",
        code: int | None = None,
        status: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.code = code
        self.status = status


class InvalidationError(ExternalServiceError):
    """A cache tag or path could not be invalidated."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f"Failed to invalidate {target}: {reason}")
        self.target = target


external_service_exception_handler = create_exception_handler(logger)
