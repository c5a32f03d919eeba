"""Category repository."""

from sqlalchemy import select

from blogcms.models import CategoryDB
from blogcms.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[CategoryDB]):
    model = CategoryDB
    duplicate_detail = "Category with this name already exists"

    async def list_sorted(self) -> list[CategoryDB]:
        result = await self.session.execute(select(CategoryDB).order_by(CategoryDB.name))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> CategoryDB | None:
        return await self.get_by_field("name", name)
