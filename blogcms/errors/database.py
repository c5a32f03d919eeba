from logging import getLogger

from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from blogcms.configs import file_logger
from blogcms.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    """
    Raised when the database cannot be reached.

    Transient: the connection cache retries lazily on the next call.
    """

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class DatabaseConfigurationError(DatabaseError):
    """
    Raised when required database settings are missing or invalid.

    Fatal: never retried.
    """

    def __init__(
        self,
        detail: str = "Invalid database configuration",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class DatabaseInitializationError(DatabaseError):
    """Exception raised when database initialization fails."""

    def __init__(
        self,
        detail: str = "Failed to initialize database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class DuplicateEntryError(DatabaseError):
    """Exception raised when attempting to create a duplicate entry."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


database_exception_handler = create_exception_handler(logger)
