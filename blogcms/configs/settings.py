"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the BlogCMS backend application.
"""

from logging import INFO, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pythonjsonlogger.json import JsonFormatter

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Constants ---
MIN_PASSWORD_LENGTH = 6
MAX_TITLE_LENGTH = 200
MAX_EXCERPT_LENGTH = 500
MAX_CATEGORY_NAME_LENGTH = 100
RECENT_POSTS_LIMIT = 5

# Sitemap / robots defaults
DEFAULT_SITE_URL = "http://localhost:3000"
INDEXING_SUBMIT_DELAY = 0.1  # seconds between sequential submissions


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "BlogCMS Backend"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_FILE: str = "logs/blogcms.log"
    PRODUCTION_FRONTEND_URL: str | None = None

    # Database
    DATABASE_URL: str | None = None
    DATABASE_ECHO: bool = False
    POOL_SIZE: int = 10
    MAX_OVERFLOW: int = 5
    POOL_RECYCLE: int = 1800  # seconds
    DB_CONNECT_TIMEOUT: float = 10.0  # seconds
    DB_SOCKET_TIMEOUT: float = 45.0  # seconds
    DB_RETRY_READS: bool = True
    DB_RETRY_WRITES: bool = True

    # Redis Configuration (optional)
    REDIS_ENABLED: bool = False
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None

    # Caching
    CACHE_DEFAULT_TTL: int = 3600  # 1 hour
    CACHE_MAX_TTL: int = 86400  # 24 hours
    CACHE_KEY_PREFIX: str = "blogcms"
    DEDUP_TIMEOUT_SECONDS: float = 5.0

    # Public site
    SITE_URL: str | None = None
    DEPLOYMENT_HOST: str | None = None

    # Search engine indexing (service account)
    GOOGLE_SERVICE_ACCOUNT_EMAIL: str | None = None
    GOOGLE_PRIVATE_KEY: SecretStr | None = None
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_INDEXING_URL: str = "https://indexing.googleapis.com/v3/urlNotifications:publish"
    INDEXING_TIMEOUT: float = 10.0  # seconds

    # Authentication
    SECRET_KEY: SecretStr = SecretStr("change-me-in-production")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    JWT_ISSUER: str = "blogcms"
    JWT_AUDIENCE: str = "blogcms-dashboard"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @field_validator("GOOGLE_PRIVATE_KEY", mode="before")
    @classmethod
    def unescape_private_key(cls, value: object) -> object:
        """Turn literal ``\\n`` sequences from env files into newlines."""
        if isinstance(value, str):
            return value.replace("\\n", "\n")
        return value


settings = Settings()


class DatabaseConfig(BaseSettings):
    """Connection options handed to the database connection cache."""

    model_config = SettingsConfigDict(env_prefix="DB_", case_sensitive=False, extra="ignore")

    url: str | None = settings.DATABASE_URL
    echo: bool = settings.DATABASE_ECHO
    pool_size: int = settings.POOL_SIZE
    max_overflow: int = settings.MAX_OVERFLOW
    pool_recycle: int = settings.POOL_RECYCLE
    connect_timeout: float = settings.DB_CONNECT_TIMEOUT
    socket_timeout: float = settings.DB_SOCKET_TIMEOUT
    retry_reads: bool = settings.DB_RETRY_READS
    retry_writes: bool = settings.DB_RETRY_WRITES


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", case_sensitive=False, extra="ignore")

    host: str = settings.REDIS_HOST
    port: int = settings.REDIS_PORT
    db: int = settings.REDIS_DB
    password: str | None = settings.REDIS_PASSWORD
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    socket_keepalive: bool = True
    health_check_interval: int = 30
    max_connections: int = 50
    decode_responses: bool = True
    encoding: str = "utf-8"


class CacheConfig(BaseSettings):
    """Cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_", case_sensitive=False, extra="ignore")

    default_ttl: int = settings.CACHE_DEFAULT_TTL
    max_ttl: int = settings.CACHE_MAX_TTL
    key_prefix: str = settings.CACHE_KEY_PREFIX


class LimiterConfig(BaseSettings):
    """Keyword arguments for the slowapi limiter."""

    model_config = SettingsConfigDict(env_prefix="LIMITER_", case_sensitive=False, extra="ignore")

    enabled: bool = settings.RATE_LIMIT_ENABLED
    storage_uri: str = settings.RATE_LIMIT_STORAGE_URI
    headers_enabled: bool = False


def pool_kwargs() -> dict[str, object]:
    """Keyword arguments for the redis connection pool."""
    return RedisConfig().model_dump()


def file_logger(logger: Logger) -> Logger:
    """
    Attach the rotating JSON file handler to a logger.

    Args:
        logger: Logger to extend.

    Returns:
        The same logger, for inline use at module level.
    """
    if not settings.LOG_TO_FILE:
        return logger
    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return logger

    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setLevel(INFO)
    handler.setFormatter(JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
