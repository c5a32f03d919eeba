"""Blog post mutations and cached reads."""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from blogcms.errors import DuplicateEntryError, InputValidationError
from blogcms.managers.invalidation import (
    ALL_POSTS_TAG,
    POST_PATHS,
    POSTS_TAG,
    ROOT_LAYOUT,
    InvalidationReport,
    category_tag,
    post_tags,
)
from blogcms.monitoring import get_logger
from blogcms.repositories import CategoryRepository, PostRepository
from blogcms.schemas import (
    BulkDateUpdate,
    BulkUpdateResult,
    NotificationType,
    PostCreate,
    PostResponse,
    PostSummary,
    PostUpdate,
)
from blogcms.services.base import BaseService, validate_input
from blogcms.utils.helpers import post_url

logger = get_logger(__name__)


# Fields an update may explicitly clear
NULLABLE_FIELDS = frozenset({"excerpt", "featured_image", "category_id"})


def _post_paths(*slugs: str | None) -> list[str]:
    return [*POST_PATHS, *(f"/blog/{slug}" for slug in slugs if slug)]


class PostService(BaseService):
    """
    Create, edit, publish and delete posts.

    Every mutation commits first and only then invalidates the cache and
    notifies the indexing API; neither side effect can fail the mutation.
    """

    async def _invalidate(
        self,
        category_ids: Sequence[UUID | None],
        slugs: Sequence[str | None] = (),
        *,
        layout: bool = False,
    ) -> InvalidationReport:
        return await self.invalidation.invalidate(
            tags=post_tags(category_ids),
            paths=_post_paths(*slugs),
            layouts=[ROOT_LAYOUT] if layout else [],
        )

    async def _check_category(self, repo: CategoryRepository, category_id: UUID | None) -> None:
        if category_id is not None:
            await repo.get_or_raise(category_id)

    async def create_post(
        self,
        data: PostCreate | Mapping[str, Any],
        author_id: UUID | None = None,
    ) -> PostResponse:
        """
        Create a post.

        Raises:
            InputValidationError: Invalid payload, nothing written.
            DuplicateEntryError: The slug is taken.
            RecordNotFoundError: The category does not exist.
        """
        payload = validate_input(PostCreate, data)
        async with self.db.transaction() as session:
            repo = PostRepository(session)
            if await repo.exists_by_field("slug", payload.slug):
                raise DuplicateEntryError(detail=f"A post with slug '{payload.slug}' already exists")
            await self._check_category(CategoryRepository(session), payload.category_id)
            post = await repo.create({**payload.model_dump(), "author_id": author_id})
            created = PostResponse.model_validate(post)

        logger.info("post created", post_id=str(created.id), published=created.published)
        await self._invalidate([created.category_id], [created.slug])
        if created.published:
            await self.notify_indexing(post_url(created.slug))
        return created

    async def update_post(self, post_id: UUID, data: PostUpdate | Mapping[str, Any]) -> PostResponse:
        """Apply a partial update; both the old and new category are invalidated."""
        payload = validate_input(PostUpdate, data)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }

        async with self.db.transaction() as session:
            repo = PostRepository(session)
            post = await repo.get_or_raise(post_id)
            previous = PostResponse.model_validate(post)
            new_slug = changes.get("slug")
            if new_slug and new_slug != post.slug and await repo.exists_by_field("slug", new_slug, post_id):
                raise DuplicateEntryError(detail=f"A post with slug '{new_slug}' already exists")
            if "category_id" in changes:
                await self._check_category(CategoryRepository(session), changes["category_id"])
            updated = PostResponse.model_validate(await repo.update(post, changes))

        await self._invalidate(
            [previous.category_id, updated.category_id],
            [previous.slug, updated.slug],
        )
        await self._sync_indexing(previous, updated)
        return updated

    async def toggle_published(self, post_id: UUID, current: bool | None = None) -> PostResponse:
        """
        Flip the published flag.

        Args:
            post_id: Post to flip.
            current: State the caller saw; the stored state is used when omitted.
        """
        async with self.db.transaction() as session:
            repo = PostRepository(session)
            post = await repo.get_or_raise(post_id)
            previous = PostResponse.model_validate(post)
            published = not (post.published if current is None else current)
            updated = PostResponse.model_validate(await repo.update(post, {"published": published}))

        logger.info("post publish state changed", post_id=str(post_id), published=published)
        await self._invalidate([updated.category_id], [updated.slug])
        await self._sync_indexing(previous, updated)
        return updated

    async def delete_post(self, post_id: UUID) -> None:
        async with self.db.transaction() as session:
            repo = PostRepository(session)
            post = await repo.get_or_raise(post_id)
            deleted = PostResponse.model_validate(post)
            await repo.delete(post)

        logger.info("post deleted", post_id=str(post_id))
        await self._invalidate([deleted.category_id], [deleted.slug])
        if deleted.published:
            await self.notify_indexing(post_url(deleted.slug), NotificationType.URL_DELETED)

    async def bulk_update_post_dates(self, post_ids: Sequence[UUID | str]) -> BulkUpdateResult:
        """
        Re-stamp posts with the current time.

        The cache is invalidated whether or not the update succeeds, since a
        failure part-way may still have changed rows.

        Raises:
            InputValidationError: Empty list or a malformed id.
        """
        if not post_ids:
            mssg = "No post IDs provided"
            raise InputValidationError(mssg)
        payload = validate_input(BulkDateUpdate, {"ids": list(post_ids)})

        category_ids: list[UUID | None] = []
        try:
            async with self.db.transaction() as session:
                repo = PostRepository(session)
                category_ids = [post.category_id for post in await repo.get_many(payload.ids)]
                updated = await repo.touch_dates(payload.ids)
        finally:
            await self._invalidate(category_ids, layout=True)

        logger.info("post dates updated", count=updated)
        return BulkUpdateResult(updated=updated)

    async def _sync_indexing(self, previous: PostResponse, current: PostResponse) -> None:
        if current.published:
            if previous.published and previous.slug != current.slug:
                await self.notify_indexing(post_url(previous.slug), NotificationType.URL_DELETED)
            await self.notify_indexing(post_url(current.slug))
        elif previous.published:
            await self.notify_indexing(post_url(previous.slug), NotificationType.URL_DELETED)

    # Reads

    async def _load_all(self) -> list[PostSummary]:
        async with self.db.session() as session:
            posts = await PostRepository(session).list_all()
        return [PostSummary.model_validate(post) for post in posts]

    async def _load_published(self, category_id: UUID | None = None) -> list[PostSummary]:
        async with self.db.session() as session:
            posts = await PostRepository(session).list_published(category_id)
        return [PostSummary.model_validate(post) for post in posts]

    async def _load_by_slug(self, slug: str) -> PostResponse | None:
        async with self.db.session() as session:
            post = await PostRepository(session).get_published_by_slug(slug)
        return PostResponse.model_validate(post) if post else None

    async def get_post(self, post_id: UUID) -> PostResponse:
        """Any post by id, drafts included; never cached since it feeds the editor."""
        async with self.db.session() as session:
            post = await PostRepository(session).get_or_raise(post_id)
        return PostResponse.model_validate(post)

    async def published_urls(
        self,
        updated_since: datetime | None = None,
        limit: int | None = None,
    ) -> list[str]:
        """Canonical URLs of published posts, most recently updated first."""
        async with self.db.session() as session:
            posts = await PostRepository(session).list_for_sitemap(updated_since, limit)
        return [post_url(post.slug) for post in posts]

    async def list_all_posts(self) -> list[PostSummary]:
        """Dashboard listing, drafts included."""
        load = self.cache.cached(
            self._load_all,
            ["posts", "all"],
            tags=[ALL_POSTS_TAG],
            paths=["/dashboard/blog"],
            response_model=list[PostSummary],
        )
        return await load()

    async def list_published_posts(self, category_id: UUID | None = None) -> list[PostSummary]:
        tags = [POSTS_TAG]
        if category_id is not None:
            tags.append(category_tag(category_id))
        load = self.cache.cached(
            self._load_published,
            ["posts", "published"],
            tags=tags,
            paths=["/blog"],
            response_model=list[PostSummary],
        )
        return await load(category_id)

    async def get_published_post(self, slug: str) -> PostResponse | None:
        load = self.cache.cached(
            self._load_by_slug,
            ["posts", "slug"],
            tags=[POSTS_TAG],
            paths=[f"/blog/{slug}"],
            response_model=PostResponse | None,
        )
        return await load(slug)
