"""
Post-write cache invalidation.

Mutations call the coordinator only after their transaction has committed.
Every tag and path is attempted; failures are logged and reported but never
raised, so a flaky cache can never turn a committed write into an error.
"""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from functools import partial
from typing import Protocol
from uuid import UUID

from blogcms.errors import InvalidationError
from blogcms.monitoring import get_logger

logger = get_logger(__name__)

POSTS_TAG = "posts"
ALL_POSTS_TAG = "all-posts"
CATEGORIES_TAG = "categories"
SITE_SETTINGS_TAG = "site-settings"
USERS_TAG = "users"

POST_PATHS: tuple[str, ...] = ("/dashboard/blog", "/blog", "/sitemap-posts.xml")
CATEGORY_PATHS: tuple[str, ...] = ("/dashboard/category", "/blog")
SETTINGS_PATHS: tuple[str, ...] = ("/robots.txt", "/dashboard/settings")
ROOT_LAYOUT = "/"


def category_tag(category_id: UUID | str) -> str:
    return f"category-{category_id}"


def post_tags(category_ids: Iterable[UUID | str | None] = ()) -> list[str]:
    """
    Tags touched by a post mutation.

    Args:
        category_ids: Categories the post belonged to before and after the
            write; ``None`` entries are skipped.
    """
    tags = [POSTS_TAG, ALL_POSTS_TAG]
    for category_id in dict.fromkeys(category_ids):
        if category_id is not None:
            tags.append(category_tag(category_id))
    return tags


def category_tags() -> list[str]:
    return [CATEGORIES_TAG]


def settings_tags() -> list[str]:
    return [SITE_SETTINGS_TAG]


class CacheInvalidator(Protocol):
    async def invalidate_tag(self, tag: str) -> None: ...

    async def invalidate_path(self, path: str, *, layout: bool = False) -> None: ...


@dataclass
class InvalidationReport:
    """What was attempted and what failed."""

    tags: list[str] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)
    failures: list[InvalidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class InvalidationCoordinator:
    """Fans a mutation out to tag and path invalidations."""

    def __init__(self, invalidator: CacheInvalidator) -> None:
        self.invalidator = invalidator

    async def invalidate(
        self,
        tags: Iterable[str] = (),
        paths: Iterable[str] = (),
        layouts: Iterable[str] = (),
    ) -> InvalidationReport:
        """
        Invalidate every tag, path and layout, continuing past failures.

        Args:
            tags: Cache tags to invalidate.
            paths: Single pages to invalidate.
            layouts: Paths whose whole subtree is invalidated.

        Returns:
            InvalidationReport: Never raises.
        """
        report = InvalidationReport()

        for tag in dict.fromkeys(tags):
            report.tags.append(tag)
            await self._attempt(report, f"tag {tag}", partial(self.invalidator.invalidate_tag, tag))

        for path in dict.fromkeys(paths):
            report.paths.append(path)
            await self._attempt(
                report,
                f"path {path}",
                partial(self.invalidator.invalidate_path, path),
            )

        for layout in dict.fromkeys(layouts):
            report.paths.append(layout)
            await self._attempt(
                report,
                f"layout {layout}",
                partial(self.invalidator.invalidate_path, layout, layout=True),
            )

        if report.failures:
            logger.warning(
                "cache invalidation incomplete",
                failed=[failure.target for failure in report.failures],
            )
        return report

    async def _attempt(
        self,
        report: InvalidationReport,
        target: str,
        call: Callable[[], Awaitable[None]],
    ) -> None:
        try:
            await call()
        except Exception as e:  # noqa: BLE001
            report.failures.append(InvalidationError(target, str(e)))
            logger.warning("cache invalidation failed", target=target, error=str(e))
