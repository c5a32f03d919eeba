"""
Tag-versioned read-through cache.

Each tag owns a random version token stored in the cache. Entry keys embed
the current token of every tag they carry, so invalidating a tag is a single
write of a fresh token: every entry built under the old token becomes
unreachable and ages out through its TTL.

Misses are loaded through the request deduplicator keyed by the versioned
key. A read that starts after an invalidation therefore never joins a load
that started before it.
"""

from collections.abc import Awaitable, Callable, Iterable
from functools import partial, wraps
from hashlib import sha256
from logging import getLogger
from typing import Any
from uuid import uuid4

from orjson import OPT_NON_STR_KEYS, OPT_SORT_KEYS
from orjson import dumps as orjson_dumps
from pydantic import TypeAdapter

from blogcms.configs import file_logger
from blogcms.errors import CacheKeyError
from blogcms.managers.cache_manager import CacheManager
from blogcms.managers.request_deduplicator import RequestDeduplicator

logger = file_logger(getLogger(__name__))

TAG_NAMESPACE = "tags"
ENTRY_NAMESPACE = "data"

type Loader = Callable[..., Awaitable[Any]]


def path_tags(path: str) -> list[str]:
    """
    Tags an entry rendered for ``path`` depends on.

    Besides the page tag, every ancestor layout is included so that
    invalidating the ``/`` layout reaches every page.

    Example:
        >>> path_tags("/blog/hello")
        ['path:/blog/hello', 'layout:/', 'layout:/blog', 'layout:/blog/hello']
    """
    segments = [part for part in path.split("/") if part]
    layouts = ["/"] + ["/" + "/".join(segments[: i + 1]) for i in range(len(segments))]
    return [f"path:{path}", *(f"layout:{layout}" for layout in layouts)]


def _digest(*parts: object) -> str:
    raw = orjson_dumps(parts, default=str, option=OPT_SORT_KEYS | OPT_NON_STR_KEYS)
    return sha256(raw).hexdigest()[:16]


class TaggedCache:
    """
    Read-through cache with tag and path invalidation.

    Args:
        cache: Backing cache manager.
        deduplicator: Shares concurrent misses of the same versioned key.
        default_ttl: Entry TTL in seconds when ``cached`` is not given one.
    """

    def __init__(
        self,
        cache: CacheManager,
        deduplicator: RequestDeduplicator,
        default_ttl: int | None = None,
    ) -> None:
        self.cache = cache
        self.deduplicator = deduplicator
        self.default_ttl = default_ttl or cache.cache_config.default_ttl

    async def tag_version(self, tag: str) -> str:
        """Current version token of a tag, created on first use."""
        token = await self.cache.get(tag, namespace=TAG_NAMESPACE)
        if token is None:
            # Concurrent first readers must agree on one token
            token = await self.deduplicator.dedupe(f"tag:{tag}", partial(self._create_token, tag))
        return str(token)

    async def _create_token(self, tag: str) -> str:
        token = await self.cache.get(tag, namespace=TAG_NAMESPACE)
        if token is None:
            token = uuid4().hex
            await self.cache.set(
                tag,
                token,
                ttl=self.cache.cache_config.max_ttl,
                namespace=TAG_NAMESPACE,
            )
        return str(token)

    async def invalidate_tag(self, tag: str) -> None:
        """
        Make every entry carrying ``tag`` unreachable.

        Raises:
            CacheKeyError: The new token could not be written.
        """
        await self.cache.set(
            tag,
            uuid4().hex,
            ttl=self.cache.cache_config.max_ttl,
            namespace=TAG_NAMESPACE,
        )
        logger.info(f"Invalidated cache tag {tag}")

    async def invalidate_path(self, path: str, *, layout: bool = False) -> None:
        """
        Invalidate entries rendered for a path.

        Args:
            path: Site path such as ``/blog``.
            layout: Also reach every page nested under ``path``.
        """
        await self.invalidate_tag(f"layout:{path}" if layout else f"path:{path}")

    def cached[T](
        self,
        fn: Callable[..., Awaitable[T]],
        key: Iterable[str],
        *,
        ttl: int | None = None,
        tags: Iterable[str] = (),
        paths: Iterable[str] = (),
        response_model: Any = None,  # noqa: ANN401
    ) -> Callable[..., Awaitable[T]]:
        """
        Wrap an async loader with tagged caching.

        Args:
            fn: Loader to call on a miss.
            key: Key parts identifying the loader.
            ttl: Entry lifetime in seconds.
            tags: Invalidation tags the entry carries.
            paths: Site paths the entry is rendered for.
            response_model: Type used to dump results to JSON and rebuild
                them on a hit, so hits and misses return the same shape.

        Returns:
            Async callable with the same arguments as ``fn``.
        """
        key_parts = list(key)
        all_tags = [*tags, *(tag for path in paths for tag in path_tags(path))]
        adapter = TypeAdapter(response_model) if response_model is not None else None
        entry_ttl = ttl or self.default_ttl

        @wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:  # noqa: ANN401
            try:
                versions = [await self.tag_version(tag) for tag in all_tags]
                cache_key = ":".join([*key_parts, _digest(args, kwargs), _digest(versions)])
                hit = await self.cache.get(cache_key, namespace=ENTRY_NAMESPACE)
            except CacheKeyError:
                logger.warning(f"Cache unavailable for {':'.join(key_parts)}, loading directly")
                return await fn(*args, **kwargs)

            if isinstance(hit, dict) and "v" in hit:
                return adapter.validate_python(hit["v"]) if adapter else hit["v"]

            loader = partial(self._load, fn, args, kwargs, cache_key, entry_ttl, adapter)
            return await self.deduplicator.dedupe(cache_key, loader)

        return wrapper

    async def _load(
        self,
        fn: Loader,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        cache_key: str,
        ttl: int,
        adapter: TypeAdapter | None,
    ) -> Any:  # noqa: ANN401
        value = await fn(*args, **kwargs)
        payload = adapter.dump_python(value, mode="json") if adapter else value
        try:
            # Wrapped so that a cached None is distinguishable from a miss
            await self.cache.set(cache_key, {"v": payload}, ttl=ttl, namespace=ENTRY_NAMESPACE)
        except CacheKeyError:
            logger.warning(f"Could not store cache entry {cache_key}")
        return value
