from blogcms.configs.settings import (
    CacheConfig,
    DatabaseConfig,
    LimiterConfig,
    RedisConfig,
    Settings,
    file_logger,
    pool_kwargs,
    settings,
)

__all__ = [
    "CacheConfig",
    "DatabaseConfig",
    "LimiterConfig",
    "RedisConfig",
    "Settings",
    "file_logger",
    "pool_kwargs",
    "settings",
]
