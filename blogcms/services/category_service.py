"""Category mutations and the cached category listing."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from blogcms.managers.invalidation import CATEGORY_PATHS, CATEGORIES_TAG, category_tags, post_tags
from blogcms.monitoring import get_logger
from blogcms.repositories import CategoryRepository, PostRepository
from blogcms.schemas import CategoryCreate, CategoryResponse, CategoryUpdate
from blogcms.services.base import BaseService, validate_input

logger = get_logger(__name__)


class CategoryService(BaseService):
    async def create_category(self, data: CategoryCreate | Mapping[str, Any]) -> CategoryResponse:
        """
        Create a category.

        Raises:
            InputValidationError: Missing or oversized name.
            DuplicateEntryError: The name is taken.
        """
        payload = validate_input(CategoryCreate, data)
        async with self.db.transaction() as session:
            category = await CategoryRepository(session).create(payload.model_dump())
            created = CategoryResponse.model_validate(category)

        logger.info("category created", category_id=str(created.id))
        await self.invalidation.invalidate(tags=category_tags(), paths=CATEGORY_PATHS)
        return created

    async def rename_category(
        self,
        category_id: UUID,
        data: CategoryUpdate | Mapping[str, Any],
    ) -> CategoryResponse:
        payload = validate_input(CategoryUpdate, data)
        async with self.db.transaction() as session:
            repo = CategoryRepository(session)
            category = await repo.get_or_raise(category_id)
            renamed = CategoryResponse.model_validate(await repo.update(category, payload.model_dump()))

        await self.invalidation.invalidate(
            tags=[*category_tags(), *post_tags([category_id])],
            paths=CATEGORY_PATHS,
        )
        return renamed

    async def delete_category(self, category_id: UUID) -> int:
        """
        Delete a category and detach its posts.

        Returns:
            int: Number of posts that lost their category.
        """
        async with self.db.transaction() as session:
            repo = CategoryRepository(session)
            category = await repo.get_or_raise(category_id)
            detached = await PostRepository(session).detach_category(category_id)
            await repo.delete(category)

        logger.info("category deleted", category_id=str(category_id), detached_posts=detached)
        await self.invalidation.invalidate(
            tags=[*category_tags(), *post_tags([category_id])],
            paths=CATEGORY_PATHS,
        )
        return detached

    async def _load_categories(self) -> list[CategoryResponse]:
        async with self.db.session() as session:
            categories = await CategoryRepository(session).list_sorted()
        return [CategoryResponse.model_validate(category) for category in categories]

    async def list_categories(self) -> list[CategoryResponse]:
        """Categories sorted by name."""
        load = self.cache.cached(
            self._load_categories,
            ["categories", "list"],
            tags=[CATEGORIES_TAG],
            response_model=list[CategoryResponse],
        )
        return await load()
