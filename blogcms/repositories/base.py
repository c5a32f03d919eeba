"""Base repository for database operations."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from blogcms.errors import DatabaseError, DuplicateEntryError, RecordNotFoundError
from blogcms.utils.helpers import utc_now

type FilterValue = str | int | float | bool | UUID | datetime | None


class BaseRepository[ModelT: SQLModel]:
    """
    Common CRUD operations bound to one session.

    Repositories never commit: the caller's ``Database.transaction()``
    decides when the unit of work ends.

    Attributes:
        model: The SQLModel table model.
        id_field: Name of the primary key field.
        duplicate_detail: Message used when a unique constraint trips.
    """

    model: type[ModelT]
    id_field: str = "id"
    duplicate_detail: str = "A record with this value already exists"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        """
        Insert a new record.

        Args:
            data: Column values.

        Returns:
            ModelT: Persisted record with defaults populated.
        """
        record = self.model(**data)
        return await self._add_and_refresh(record)

    async def get_by_id(self, record_id: UUID | int) -> ModelT | None:
        id_column = getattr(self.model, self.id_field)
        result = await self.session.execute(select(self.model).where(id_column == record_id))
        return result.scalar_one_or_none()

    async def get_by_field(self, field_name: str, value: FilterValue) -> ModelT | None:
        field = getattr(self.model, field_name)
        result = await self.session.execute(select(self.model).where(field == value))
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: UUID | int) -> ModelT:
        """
        Get a record by ID or raise an exception if not found.

        Raises:
            RecordNotFoundError: If record is not found
        """
        record = await self.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(
                detail=f"{self.model.__name__.removesuffix('DB')} with ID {record_id} not found",
            )
        return record

    async def update(self, record: ModelT, data: Mapping[str, Any]) -> ModelT:
        """
        Apply field values to a loaded record and stamp ``updated_at``.

        Args:
            record: Record loaded through this session.
            data: Fields to overwrite.

        Returns:
            ModelT: The refreshed record.
        """
        for key, value in data.items():
            setattr(record, key, value)
        if hasattr(record, "updated_at"):
            record.updated_at = utc_now()
        return await self._add_and_refresh(record)

    async def delete(self, record: ModelT) -> None:
        await self.session.delete(record)
        await self.session.flush()

    async def count(self, *criteria: Any) -> int:  # noqa: ANN401
        """Count records, optionally filtered by SQL criteria."""
        statement = select(func.count()).select_from(self.model)
        if criteria:
            statement = statement.where(*criteria)
        result = await self.session.execute(statement)
        return result.scalar() or 0

    async def exists_by_field(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Check if another record already uses a field value.

        Args:
            field_name: Name of the field to check
            value: Value to check for
            exclude_id: Optional ID to exclude from check (for updates)
        """
        field = getattr(self.model, field_name)
        statement = select(1).where(field == value)
        if exclude_id is not None:
            statement = statement.where(getattr(self.model, self.id_field) != exclude_id)
        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Flush a record and reload it.

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            DatabaseError: For other integrity errors
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            error_msg = str(e.orig) if e.orig else str(e)
            if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
                raise DuplicateEntryError(detail=self.duplicate_detail) from e
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e
        return record
