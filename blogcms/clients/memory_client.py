"""In-memory cache client used when Redis is disabled or unreachable."""

from asyncio import Lock
from collections import OrderedDict
from collections.abc import AsyncGenerator
from fnmatch import fnmatch
from logging import getLogger
from time import monotonic

from blogcms.configs import file_logger

logger = file_logger(getLogger(__name__))


class MemoryClient:
    """
    Async dict-backed cache mimicking the subset of Redis the app uses.

    Expiry is lazy: an expired key is dropped when it is next touched.
    Once ``max_entries`` is reached the least recently used key is evicted.
    """

    DEFAULT_MAX_ENTRIES: int = 10_000

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self._cache: OrderedDict[str, str] = OrderedDict()
        self._expires: dict[str, float] = {}
        self._max_entries = max_entries
        self._lock = Lock()
        self.is_connected = True

    def _expired(self, key: str) -> bool:
        deadline = self._expires.get(key)
        return deadline is not None and monotonic() >= deadline

    def _drop(self, *keys: str) -> int:
        count = 0
        for key in keys:
            if self._cache.pop(key, None) is not None:
                count += 1
            self._expires.pop(key, None)
        return count

    def _live(self, key: str) -> bool:
        if self._expired(key):
            self._drop(key)
            return False
        return key in self._cache

    async def get(self, key: str) -> str | None:
        async with self._lock:
            if not self._live(key):
                return None
            self._cache.move_to_end(key)
            return self._cache[key]

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        """Store a value; like Redis SET, a write without ``ex`` clears any TTL."""
        async with self._lock:
            if key not in self._cache:
                while len(self._cache) >= self._max_entries:
                    oldest, _ = self._cache.popitem(last=False)
                    self._expires.pop(oldest, None)
            self._cache[key] = value
            self._cache.move_to_end(key)
            if ex:
                self._expires[key] = monotonic() + ex
            else:
                self._expires.pop(key, None)
            return True

    async def delete(self, *keys: str) -> int:
        async with self._lock:
            return self._drop(*keys)

    async def exists(self, *keys: str) -> int:
        async with self._lock:
            return sum(1 for key in keys if self._live(key))

    async def ttl(self, key: str) -> int:
        """Remaining seconds, -1 without expiry, -2 when missing."""
        async with self._lock:
            if not self._live(key):
                return -2
            deadline = self._expires.get(key)
            if deadline is None:
                return -1
            return max(0, int(deadline - monotonic()))

    async def ping(self) -> bool:
        return self.is_connected

    async def info(self) -> dict[str, str | int]:
        async with self._lock:
            return {
                "server": "In-Memory Cache",
                "total_keys": len(self._cache),
                "max_entries": self._max_entries,
            }

    async def scan_iter(self, pattern: str, count: int = 100) -> AsyncGenerator[str]:  # noqa: ARG002
        """Yield keys matching a glob pattern."""
        async with self._lock:
            keys = [key for key in self._cache if not self._expired(key)]
        for key in keys:
            if fnmatch(key, pattern):
                yield key

    async def close(self) -> None:
        async with self._lock:
            self.is_connected = False
            self._cache.clear()
            self._expires.clear()
