"""Helpers shared by the mutation and query services."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from blogcms.context import AppContext
from blogcms.errors import ExternalServiceError, InputValidationError
from blogcms.monitoring import get_logger
from blogcms.schemas.indexing import IndexingResult, NotificationType

logger = get_logger(__name__)


def validate_input[SchemaT: BaseModel](
    schema: type[SchemaT],
    data: SchemaT | Mapping[str, Any],
) -> SchemaT:
    """
    Validate raw input before any write.

    Raises:
        InputValidationError: With the first failure as detail and every
            failure listed.
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise InputValidationError.from_pydantic(e) from e


class BaseService:
    """Gives services the context collaborators by name."""

    def __init__(self, context: AppContext) -> None:
        self.context = context
        self.db = context.database
        self.cache = context.tagged_cache
        self.invalidation = context.invalidation

    async def notify_indexing(
        self,
        url: str,
        notification_type: NotificationType = NotificationType.URL_UPDATED,
    ) -> IndexingResult | None:
        """Best-effort indexing notification; failures are logged, never raised."""
        try:
            return await self.context.indexing.submit_url(url, notification_type)
        except (ExternalServiceError, InputValidationError) as e:
            logger.warning("indexing notification failed", url=url, error=str(e))
            return None
