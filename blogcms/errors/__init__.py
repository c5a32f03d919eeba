from blogcms.errors.auth import (
    InvalidCredentialsError,
    PermissionDeniedError,
    UserAuthenticationError,
    auth_exception_handler,
)
from blogcms.errors.base import BASE_EXCEPTION, BaseAppError, create_exception_handler
from blogcms.errors.cache import (
    CacheDeserializationError,
    CacheExceptionError,
    CacheKeyError,
    CacheSerializationError,
    cache_exception_handler,
)
from blogcms.errors.database import (
    DatabaseConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    RecordNotFoundError,
    database_exception_handler,
)
from blogcms.errors.external import (
    ExternalServiceError,
    IndexingServiceError,
    InvalidationError,
    external_service_exception_handler,
)
from blogcms.errors.validation import (
    InputValidationError,
    input_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "BASE_EXCEPTION",
    "BaseAppError",
    "CacheDeserializationError",
    "CacheExceptionError",
    "CacheKeyError",
    "CacheSerializationError",
    "DatabaseConfigurationError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "ExternalServiceError",
    "IndexingServiceError",
    "InputValidationError",
    "InvalidCredentialsError",
    "InvalidationError",
    "PermissionDeniedError",
    "RecordNotFoundError",
    "UserAuthenticationError",
    "auth_exception_handler",
    "cache_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "external_service_exception_handler",
    "input_validation_exception_handler",
    "validation_exception_handler",
]
