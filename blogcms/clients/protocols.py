"""Protocol definitions for cache client implementations."""

from collections.abc import AsyncIterator, Awaitable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheClientProtocol(Protocol):
    """
    Interface shared by ``RedisClient`` and ``MemoryClient``.

    Values are always JSON strings; serialization happens in the cache
    manager.
    """

    def get(self, key: str) -> Awaitable[str | None]: ...

    def set(self, key: str, value: str, ex: int | None = None) -> Awaitable[bool]: ...

    def delete(self, *keys: str) -> Awaitable[int]: ...

    def exists(self, *keys: str) -> Awaitable[int]: ...

    def ttl(self, key: str) -> Awaitable[int]: ...

    def ping(self) -> Awaitable[bool]: ...

    def info(self) -> Awaitable[dict[str, Any]]: ...

    def scan_iter(self, pattern: str, count: int = 100) -> AsyncIterator[str]: ...

    def close(self) -> Awaitable[None]: ...
