"""Session and transaction management on top of the connection cache."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger

from sqlalchemy.exc import DBAPIError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from blogcms.configs import file_logger
from blogcms.db.connection import ConnectionCache, ConnectionHandle
from blogcms.errors import BaseAppError, DatabaseConnectionError, DatabaseInitializationError

logger = file_logger(getLogger(__name__))


class Database:
    """
    Entry point for every database access.

    Sessions are always opened against the handle returned by the
    connection cache, so a dropped connection is replaced lazily on the
    next call instead of failing the process.
    """

    def __init__(self, connections: ConnectionCache | None = None) -> None:
        self.connections = connections or ConnectionCache()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession]:
        """
        Open a session whose work is committed as one unit.

        Yields:
            AsyncSession: Commits on successful exit, rolls back on exception.

        Raises:
            DatabaseConnectionError: The connection dropped mid-transaction.
        """
        handle = await self.connections.get_connection()
        async with handle.session_maker() as session:
            try:
                yield session
                await session.commit()
            except DBAPIError as e:
                await _safe_rollback(session)
                if e.connection_invalidated:
                    handle.mark_dead()
                    raise DatabaseConnectionError from e
                logger.exception("Transaction error")
                raise
            except BaseAppError:
                await session.rollback()
                raise
            except Exception:
                await session.rollback()
                logger.exception("Transaction error")
                raise

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Read-only session; nothing is committed."""
        handle = await self.connections.get_connection()
        async with handle.session_maker() as session:
            try:
                yield session
            except DBAPIError as e:
                if e.connection_invalidated:
                    handle.mark_dead()
                    raise DatabaseConnectionError from e
                raise

    async def init_db(self) -> None:
        """
        Create all tables registered on the SQLModel metadata.

        Raises:
            DatabaseInitializationError: Table creation failed.
        """
        # Registers every table on the metadata
        from blogcms import models  # noqa: F401, PLC0415

        handle: ConnectionHandle = await self.connections.get_connection()
        try:
            async with handle.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        except DBAPIError as e:
            logger.exception("Failed to initialize database")
            raise DatabaseInitializationError from e
        logger.info("Database initialized successfully!")

    async def close(self) -> None:
        await self.connections.close()


async def _safe_rollback(session: AsyncSession) -> None:
    # Rolling back on a dead connection raises again; the original error wins
    try:
        await session.rollback()
    except DBAPIError:
        logger.warning("Rollback failed on a broken connection")
