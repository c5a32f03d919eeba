"""
Process-wide collaborators.

One ``AppContext`` is built by the application lifespan and stored on
``app.state.context``. Services receive it explicitly instead of reaching
for module-level singletons.
"""

from dataclasses import dataclass
from logging import getLogger

from blogcms.clients.indexing_client import IndexingClient
from blogcms.configs import file_logger, settings
from blogcms.db import ConnectionCache, Database
from blogcms.errors import DatabaseConfigurationError, DatabaseError
from blogcms.managers import (
    CacheManager,
    InvalidationCoordinator,
    RequestDeduplicator,
    TaggedCache,
)

logger = file_logger(getLogger(__name__))


@dataclass
class AppContext:
    database: Database
    cache: CacheManager
    deduplicator: RequestDeduplicator
    tagged_cache: TaggedCache
    invalidation: InvalidationCoordinator
    indexing: IndexingClient

    @classmethod
    def create(
        cls,
        *,
        database: Database | None = None,
        cache: CacheManager | None = None,
        indexing: IndexingClient | None = None,
        dedup_timeout: float | None = None,
    ) -> "AppContext":
        """Wire the default collaborators, accepting overrides for any of them."""
        database = database or Database(ConnectionCache())
        cache = cache or CacheManager()
        deduplicator = RequestDeduplicator(timeout=dedup_timeout)
        tagged_cache = TaggedCache(cache, deduplicator, default_ttl=settings.CACHE_DEFAULT_TTL)
        return cls(
            database=database,
            cache=cache,
            deduplicator=deduplicator,
            tagged_cache=tagged_cache,
            invalidation=InvalidationCoordinator(tagged_cache),
            indexing=indexing or IndexingClient(),
        )

    async def startup(self) -> None:
        """
        Initialise the cache and create tables.

        An unreachable database does not abort startup: the connection cache
        retries lazily on the first request that needs it.
        """
        await self.cache.initialize()
        try:
            await self.database.init_db()
        except DatabaseConfigurationError:
            logger.warning("DATABASE_URL is not configured; database routes will fail")
        except DatabaseError:
            logger.exception("Database unavailable at startup; will retry on demand")

    async def shutdown(self) -> None:
        await self.indexing.aclose()
        await self.database.close()
        await self.cache.shutdown()
        self.deduplicator.clear()


__all__ = ["AppContext"]
