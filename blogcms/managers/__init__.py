from blogcms.managers.cache_manager import CacheManager
from blogcms.managers.invalidation import (
    CacheInvalidator,
    InvalidationCoordinator,
    InvalidationReport,
    category_tags,
    post_tags,
    settings_tags,
)
from blogcms.managers.request_deduplicator import RequestDeduplicator
from blogcms.managers.tagged_cache import TaggedCache, path_tags

__all__ = [
    "CacheInvalidator",
    "CacheManager",
    "InvalidationCoordinator",
    "InvalidationReport",
    "RequestDeduplicator",
    "TaggedCache",
    "category_tags",
    "path_tags",
    "post_tags",
    "settings_tags",
]
