"""Tests for dashboard statistics."""

from unittest.mock import MagicMock

from blogcms.context import AppContext
from blogcms.errors import DatabaseConnectionError
from blogcms.schemas import UserResponse
from blogcms.services import CategoryService, DashboardService, PostService


async def test_counts(context: AppContext, admin: UserResponse) -> None:  # noqa: ARG001
    posts = PostService(context)
    await CategoryService(context).create_category({"name": "News"})
    await posts.create_post({"title": "Live", "content": "Body", "published": True})
    await posts.create_post({"title": "Draft", "content": "Body"})

    stats = await DashboardService(context).get_stats()

    assert stats.total_posts == 2
    assert stats.published_posts == 1
    assert stats.draft_posts == 1
    assert stats.total_categories == 1
    assert stats.total_users == 1
    assert {post.slug for post in stats.recent_posts} == {"live", "draft"}


async def test_zeros_when_database_unavailable(context: AppContext) -> None:
    broken = MagicMock()
    broken.session.side_effect = DatabaseConnectionError
    service = DashboardService(context)
    service.db = broken

    stats = await service.get_stats()

    assert stats.total_posts == 0
    assert stats.recent_posts == []
