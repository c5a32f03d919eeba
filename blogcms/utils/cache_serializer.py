"""
Serialization helpers for cached values.

orjson handles datetimes natively; anything else it cannot encode is
stringified.
"""

from logging import getLogger
from typing import Any

from orjson import OPT_NON_STR_KEYS, JSONDecodeError
from orjson import dumps as orjson_dumps
from orjson import loads as orjson_loads
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from blogcms.configs import file_logger
from blogcms.errors import CacheDeserializationError, CacheSerializationError

logger = file_logger(getLogger(__name__))


def _default(value: object) -> Any:  # noqa: ANN401
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return str(value)


def serialize(value: object) -> str:
    """
    Serialize value to JSON string.

    Args:
        value: Value to serialize.

    Returns:
        JSON serialized string.

    Raises:
        CacheSerializationError: If serialization fails.
    """
    try:
        return orjson_dumps(value, default=_default, option=OPT_NON_STR_KEYS).decode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.exception("Serialization failed")
        raise CacheSerializationError from e


def deserialize(value: str | bytes) -> Any:  # noqa: ANN401
    """
    Deserialize JSON string to value.

    Raises:
        CacheDeserializationError: If the payload is not valid JSON.
    """
    try:
        return orjson_loads(value)
    except (JSONDecodeError, TypeError) as e:
        logger.exception("Deserialization failed")
        raise CacheDeserializationError from e
