"""Post repository for database operations."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import desc, select, update

from blogcms.configs.settings import RECENT_POSTS_LIMIT
from blogcms.models import PostDB
from blogcms.repositories.base import BaseRepository
from blogcms.utils.helpers import utc_now


class PostRepository(BaseRepository[PostDB]):
    model = PostDB
    duplicate_detail = "A post with this slug already exists"

    async def get_published_by_slug(self, slug: str) -> PostDB | None:
        statement = select(PostDB).where(PostDB.slug == slug, PostDB.published.is_(True))
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_all(self) -> list[PostDB]:
        """Every post, drafts included, newest first."""
        result = await self.session.execute(select(PostDB).order_by(desc(PostDB.created_at)))
        return list(result.scalars().all())

    async def list_published(self, category_id: UUID | None = None) -> list[PostDB]:
        """
        Published posts, newest first.

        Args:
            category_id: Restrict to one category.
        """
        statement = select(PostDB).where(PostDB.published.is_(True))
        if category_id is not None:
            statement = statement.where(PostDB.category_id == category_id)
        result = await self.session.execute(statement.order_by(desc(PostDB.created_at)))
        return list(result.scalars().all())

    async def list_for_sitemap(
        self,
        updated_since: datetime | None = None,
        limit: int | None = None,
    ) -> list[PostDB]:
        """
        Published posts ordered by most recent update.

        Args:
            updated_since: Only posts updated at or after this instant.
            limit: Maximum number of posts.
        """
        statement = select(PostDB).where(PostDB.published.is_(True))
        if updated_since is not None:
            statement = statement.where(PostDB.updated_at >= updated_since)
        statement = statement.order_by(desc(PostDB.updated_at))
        if limit is not None:
            statement = statement.limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def recent(self, limit: int = RECENT_POSTS_LIMIT) -> list[PostDB]:
        statement = select(PostDB).order_by(desc(PostDB.created_at)).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_many(self, ids: Sequence[UUID]) -> list[PostDB]:
        result = await self.session.execute(select(PostDB).where(PostDB.id.in_(ids)))
        return list(result.scalars().all())

    async def touch_dates(self, ids: Sequence[UUID]) -> int:
        """
        Set created and updated timestamps of the given posts to now.

        Returns:
            int: Number of rows changed.
        """
        now = utc_now()
        statement = (
            update(PostDB)
            .where(PostDB.id.in_(ids))
            .values(created_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        return result.rowcount or 0

    async def detach_category(self, category_id: UUID) -> int:
        """Clear the category of every post in it."""
        statement = (
            update(PostDB)
            .where(PostDB.category_id == category_id)
            .values(category_id=None, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        return result.rowcount or 0

    async def count_published(self) -> int:
        return await self.count(PostDB.published.is_(True))

    async def count_drafts(self) -> int:
        return await self.count(PostDB.published.is_(False))
