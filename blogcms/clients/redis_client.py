"""Redis client module for cache operations."""

from collections.abc import AsyncGenerator, Awaitable
from logging import getLogger
from typing import Any

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from blogcms.configs import file_logger, pool_kwargs

logger = file_logger(getLogger(__name__))


class RedisClient:
    """Async Redis client wrapper with connection pooling."""

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or pool_kwargs()
        self._pool: ConnectionPool | None = None
        self._redis: Redis | None = None

    async def connect(self) -> None:
        """
        Open the pool and verify it with PING.

        Raises:
            RedisConnectionError: The server is unreachable.
        """
        try:
            self._pool = ConnectionPool(**self.config)
            self._redis = Redis(connection_pool=self._pool)
            if not await self._redis.ping():
                mssg = "Redis ping returned False"
                raise RedisConnectionError(mssg)
        except RedisError as e:
            logger.exception("Failed to connect to Redis")
            mssg = f"Cannot connect to Redis at {self.config.get('host')}:{self.config.get('port')}"
            raise RedisConnectionError(mssg) from e
        logger.info("Redis connection successful. Cache is using Redis.")

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis connection closed.")

    @property
    def client(self) -> Redis:
        if self._redis is None:
            mssg = "Redis client not initialized. Call connect() first."
            raise RuntimeError(mssg)
        return self._redis

    async def _run[T](self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except RedisError as e:
            logger.exception(f"Redis {operation} failed")
            mssg = f"Cache {operation} operation failed: {e}"
            raise RedisConnectionError(mssg) from e

    async def get(self, key: str) -> str | None:
        return await self._run("get", self.client.get(key))

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        return bool(await self._run("set", self.client.set(key, value, ex=ex)))

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return await self._run("delete", self.client.delete(*keys))

    async def exists(self, *keys: str) -> int:
        return await self._run("exists", self.client.exists(*keys))

    async def ttl(self, key: str) -> int:
        return await self._run("ttl", self.client.ttl(key))

    async def ping(self) -> bool:
        return bool(await self._run("ping", self.client.ping()))

    async def info(self) -> dict[str, Any]:
        info = await self._run("info", self.client.info())
        return info if isinstance(info, dict) else {}

    async def scan_iter(self, pattern: str, count: int = 100) -> AsyncGenerator[str]:
        """Yield keys matching the pattern without loading them all."""
        cursor = 0
        while True:
            cursor, keys = await self._run(
                "scan",
                self.client.scan(cursor, match=pattern, count=count),
            )
            for key in keys:
                yield key.decode("utf-8") if isinstance(key, bytes) else key
            if cursor == 0:
                break
