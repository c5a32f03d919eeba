"""Cache manager over Redis with an in-memory fallback."""

from logging import DEBUG, getLogger
from typing import Any

from redis.exceptions import RedisError

from blogcms.clients.memory_client import MemoryClient
from blogcms.clients.protocols import CacheClientProtocol
from blogcms.clients.redis_client import RedisClient
from blogcms.configs import CacheConfig, file_logger, settings
from blogcms.errors import BASE_EXCEPTION, CacheDeserializationError, CacheKeyError, CacheSerializationError
from blogcms.managers.cache_statistics import CacheStatistics
from blogcms.utils.cache_serializer import deserialize, serialize

logger = file_logger(getLogger(__name__))

CACHE_ERRORS = (RedisError, CacheSerializationError, CacheDeserializationError, *BASE_EXCEPTION)


class CacheManager:
    """
    Namespaced JSON cache.

    Features:
        - Redis when enabled and reachable, in-memory otherwise
        - Runtime fallback to memory when Redis drops
        - TTL capped by ``CacheConfig.max_ttl``
        - Hit/miss statistics

    Every backend failure surfaces as ``CacheKeyError`` so callers can decide
    to degrade.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        redis_client: RedisClient | None = None,
        memory_client: MemoryClient | None = None,
    ) -> None:
        self.cache_config = config or CacheConfig()
        self.redis_client = redis_client or RedisClient()
        self.memory_client = memory_client or MemoryClient()
        self._client: CacheClientProtocol = self.memory_client
        self.is_redis_available = False
        self.statistics = CacheStatistics()

    @property
    def backend(self) -> str:
        return "redis" if self.is_redis_available else "in-memory"

    async def initialize(self) -> None:
        """Connect to Redis when enabled, falling back to the in-memory cache."""
        if not settings.REDIS_ENABLED:
            logger.info("Redis disabled. Using in-memory cache.")
            return
        try:
            await self.redis_client.connect()
        except RedisError as e:
            logger.warning(f"Redis connection failed: {e}. Falling back to in-memory cache.")
            return
        self._client = self.redis_client
        self.is_redis_available = True
        logger.info("Cache manager initialized with Redis.")

    async def shutdown(self) -> None:
        await self.redis_client.close()
        await self.memory_client.close()
        logger.info("Cache manager shutdown successfully.")

    def _build_key(self, key: str, namespace: str | None = None) -> str:
        prefix = self.cache_config.key_prefix
        return f"{prefix}:{namespace}:{key}" if namespace else f"{prefix}:{key}"

    async def _fallback_to_memory(self) -> None:
        if self.is_redis_available:
            logger.warning("Redis connection lost. Falling back to in-memory cache.")
            self._client = self.memory_client
            self.is_redis_available = False

    async def _fail(self, operation: str, key: object, error: Exception) -> CacheKeyError:
        logger.exception(f"Cache {operation} failed for {key}")
        self.statistics.record_error()
        if isinstance(error, RedisError):
            await self._fallback_to_memory()
        return CacheKeyError(f"Cache {operation} failed for {key}")

    async def get(self, key: str, namespace: str | None = None) -> Any:  # noqa: ANN401
        """
        Read and decode a cached value.

        Returns:
            The decoded value, or None on a miss.

        Raises:
            CacheKeyError: The backend or decoding failed.
        """
        full_key = self._build_key(key, namespace)
        try:
            if logger.isEnabledFor(DEBUG):
                logger.debug("Getting from cache: %s", full_key)
            raw = await self._client.get(full_key)
            if raw is None:
                self.statistics.record_miss()
                return None
            value = deserialize(raw)
        except CACHE_ERRORS as e:
            raise await self._fail("get", full_key, e) from e
        self.statistics.record_hit()
        return value

    async def set(
        self,
        key: str,
        value: object,
        ttl: int | None = None,
        namespace: str | None = None,
    ) -> bool:
        """Encode and store a value; ``ttl`` defaults to the configured TTL."""
        full_key = self._build_key(key, namespace)
        ex = ttl if ttl is not None else self.cache_config.default_ttl
        ex = min(ex, self.cache_config.max_ttl)
        try:
            stored = await self._client.set(full_key, serialize(value), ex=ex)
        except CACHE_ERRORS as e:
            raise await self._fail("set", full_key, e) from e
        self.statistics.record_set()
        return stored

    async def delete(self, *keys: str, namespace: str | None = None) -> int:
        full_keys = [self._build_key(key, namespace) for key in keys]
        try:
            deleted = await self._client.delete(*full_keys)
        except CACHE_ERRORS as e:
            raise await self._fail("delete", keys, e) from e
        if deleted:
            self.statistics.record_delete()
        return deleted

    async def exists(self, *keys: str, namespace: str | None = None) -> int:
        full_keys = [self._build_key(key, namespace) for key in keys]
        try:
            return await self._client.exists(*full_keys)
        except CACHE_ERRORS as e:
            raise await self._fail("exists", keys, e) from e

    async def ttl(self, key: str, namespace: str | None = None) -> int:
        full_key = self._build_key(key, namespace)
        try:
            return await self._client.ttl(full_key)
        except CACHE_ERRORS as e:
            raise await self._fail("ttl", full_key, e) from e

    async def clear(self, namespace: str | None = None) -> int:
        """
        Delete every key under the prefix, or under one namespace.

        Returns:
            Number of keys removed.
        """
        prefix = self.cache_config.key_prefix
        pattern = f"{prefix}:{namespace}:*" if namespace else f"{prefix}:*"
        deleted = 0
        batch: list[str] = []
        try:
            async for key in self._client.scan_iter(pattern):
                batch.append(key)
                if len(batch) >= 1000:
                    deleted += await self._client.delete(*batch)
                    batch = []
            if batch:
                deleted += await self._client.delete(*batch)
        except CACHE_ERRORS as e:
            raise await self._fail("clear", pattern, e) from e
        logger.info("Cleared %d keys for pattern '%s'.", deleted, pattern)
        return deleted

    async def ping(self) -> bool:
        try:
            return await self._client.ping()
        except CACHE_ERRORS:
            logger.exception("Cache ping failed")
            return False

    async def health_check(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "backend": self.backend,
            "statistics": self.get_statistics(),
        }
        try:
            result["status"] = "healthy" if await self._client.ping() else "unhealthy"
            result["info"] = await self._client.info()
        except CACHE_ERRORS as e:
            result["status"] = "unhealthy"
            result["error"] = str(e)
        return result

    def get_statistics(self) -> dict[str, Any]:
        return self.statistics.to_dict()
