from blogcms.clients.indexing_client import IndexingClient, validate_url
from blogcms.clients.memory_client import MemoryClient
from blogcms.clients.protocols import CacheClientProtocol
from blogcms.clients.redis_client import RedisClient

__all__ = ["CacheClientProtocol", "IndexingClient", "MemoryClient", "RedisClient", "validate_url"]
