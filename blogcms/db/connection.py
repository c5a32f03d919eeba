"""
Process-wide database connection cache.

One ``ConnectionCache`` lives on the application context. It hands out a
single live ``ConnectionHandle`` and guarantees that concurrent callers
never open more than one connection attempt at a time.
"""

from asyncio import Lock, Task, create_task, shield
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from logging import getLogger
from typing import Any

from sqlalchemy import event, make_url, text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from blogcms.configs import DatabaseConfig, file_logger, settings
from blogcms.errors import DatabaseConfigurationError, DatabaseConnectionError
from blogcms.utils.helpers import utc_now

logger = file_logger(getLogger(__name__))


class ReadinessState(StrEnum):
    CONNECTING = "connecting"
    READY = "ready"
    DISCONNECTED = "disconnected"
    FAILED = "failed"


@dataclass
class ConnectionHandle:
    """A connected engine plus the session factory bound to it."""

    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]
    state: ReadinessState = ReadinessState.READY
    created_at: datetime = field(default_factory=utc_now)

    @property
    def is_ready(self) -> bool:
        return self.state is ReadinessState.READY

    def mark_dead(self) -> None:
        """Flag the handle so the next lookup reconnects."""
        if self.state is ReadinessState.READY:
            logger.warning("Database connection marked as disconnected")
        self.state = ReadinessState.DISCONNECTED

    async def dispose(self) -> None:
        self.state = ReadinessState.DISCONNECTED
        await self.engine.dispose()


type Connector = Callable[[DatabaseConfig], Awaitable[ConnectionHandle]]


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Log pool activity; only wired in debug mode."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkin")
    def on_checkin(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("Connection returned to pool")


def engine_options(config: DatabaseConfig) -> dict[str, Any]:
    """
    Build ``create_async_engine`` keyword arguments for a config.

    Pool sizing and driver timeouts only apply to PostgreSQL; SQLite uses a
    single-connection pool that rejects them.

    Args:
        config: Database connection options.

    Returns:
        Keyword arguments for the engine factory.
    """
    options: dict[str, Any] = {
        "echo": config.echo,
        # Liveness probe on checkout replaces dropped connections transparently
        "pool_pre_ping": config.retry_reads or config.retry_writes,
    }
    if config.url and make_url(config.url).get_backend_name() == "postgresql":
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_recycle=config.pool_recycle,
            pool_timeout=config.connect_timeout,
            connect_args={
                "timeout": config.connect_timeout,
                "command_timeout": config.socket_timeout,
            },
        )
    return options


async def connect(config: DatabaseConfig) -> ConnectionHandle:
    """
    Open an engine and prove it with a round trip.

    Raises:
        Whatever the driver raises when the server is unreachable.
    """
    engine = create_async_engine(config.url, **engine_options(config))
    if settings.DEBUG:
        _configure_engine_events(engine)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        await engine.dispose()
        raise

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return ConnectionHandle(engine=engine, session_maker=session_maker)


class ConnectionCache:
    """
    Lazily connects and shares one handle across the process.

    A failed attempt is never cached: every waiter of that attempt receives
    the same ``DatabaseConnectionError`` and the next call starts over.
    """

    def __init__(
        self,
        config: DatabaseConfig | None = None,
        connector: Connector | None = None,
    ) -> None:
        self.config = config or DatabaseConfig()
        self._connector = connector or connect
        self._handle: ConnectionHandle | None = None
        self._pending: Task[ConnectionHandle] | None = None
        self._failed = False
        self._lock = Lock()
        self.attempts = 0

    @property
    def state(self) -> ReadinessState:
        if self._pending is not None:
            return ReadinessState.CONNECTING
        if self._handle is not None:
            return self._handle.state
        if self._failed:
            return ReadinessState.FAILED
        return ReadinessState.DISCONNECTED

    async def get_connection(self) -> ConnectionHandle:
        """
        Return the live handle, connecting if needed.

        Returns:
            A handle in the ``ready`` state.

        Raises:
            DatabaseConfigurationError: No database URL is configured.
            DatabaseConnectionError: The connection attempt failed.
        """
        if not self.config.url:
            mssg = "DATABASE_URL is not configured"
            raise DatabaseConfigurationError(mssg)

        handle = self._handle
        if handle is not None and handle.is_ready:
            return handle

        async with self._lock:
            handle = self._handle
            if handle is not None and handle.is_ready:
                return handle
            if handle is not None:
                logger.info(f"Discarding database handle in state {handle.state}")
                self._handle = None
                await handle.dispose()
            if self._pending is None:
                self._pending = create_task(self._attempt())
            pending = self._pending

        # A cancelled caller must not abort the attempt other callers share
        return await shield(pending)

    async def _attempt(self) -> ConnectionHandle:
        self.attempts += 1
        try:
            handle = await self._connector(self.config)
        except DatabaseConnectionError:
            self._failed = True
            logger.exception("Database connection attempt failed")
            raise
        except Exception as e:
            self._failed = True
            logger.exception("Database connection attempt failed")
            raise DatabaseConnectionError from e
        finally:
            self._pending = None

        self._failed = False
        self._handle = handle
        logger.info("Database connection established")
        return handle

    async def close(self) -> None:
        """Dispose the cached handle, if any."""
        async with self._lock:
            handle, self._handle = self._handle, None
        if handle is not None:
            await handle.dispose()
            logger.info("Database connections closed")
