"""Tests for post mutations, cached reads and their side effects."""

from dataclasses import replace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import AsyncClient, MockTransport, Response

from blogcms.clients.indexing_client import IndexingClient
from blogcms.context import AppContext
from blogcms.errors import (
    CacheKeyError,
    DuplicateEntryError,
    IndexingServiceError,
    InputValidationError,
    RecordNotFoundError,
)
from blogcms.schemas import NotificationType
from blogcms.services import CategoryService, PostService

POST = {"title": "Hello World", "content": "First post body"}
URL = "https://blog.example.com/blog/hello-world"


@pytest.fixture
def posts(context: AppContext) -> PostService:
    return PostService(context)


async def test_create_derives_slug_from_title(posts: PostService) -> None:
    created = await posts.create_post(POST)
    assert created.slug == "hello-world"
    assert created.published is False


async def test_create_rejects_invalid_input_before_writing(posts: PostService) -> None:
    with pytest.raises(InputValidationError):
        await posts.create_post({"title": "", "content": "body"})
    assert await posts.list_all_posts() == []


async def test_create_rejects_duplicate_slug(posts: PostService) -> None:
    await posts.create_post(POST)
    with pytest.raises(DuplicateEntryError):
        await posts.create_post({**POST, "content": "Another body"})


async def test_create_with_unknown_category_fails(posts: PostService) -> None:
    with pytest.raises(RecordNotFoundError):
        await posts.create_post({**POST, "category_id": str(uuid4())})


async def test_read_after_write_is_fresh(posts: PostService) -> None:
    assert await posts.list_published_posts() == []

    created = await posts.create_post({**POST, "published": True})

    listed = await posts.list_published_posts()
    assert [post.id for post in listed] == [created.id]
    assert (await posts.get_published_post("hello-world")).id == created.id


async def test_failed_invalidation_does_not_fail_the_write(
    posts: PostService,
    context: AppContext,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(context.tagged_cache, "invalidate_tag", AsyncMock(side_effect=CacheKeyError("down")))

    created = await posts.create_post(POST)

    assert (await posts.get_post(created.id)).title == "Hello World"


async def test_publishing_notifies_indexing(posts: PostService, context: AppContext) -> None:
    created = await posts.create_post(POST)
    context.indexing.submit_url.assert_not_awaited()

    await posts.toggle_published(created.id)

    context.indexing.submit_url.assert_awaited_once_with(URL, NotificationType.URL_UPDATED)


async def test_unpublishing_notifies_deletion(posts: PostService, context: AppContext) -> None:
    created = await posts.create_post({**POST, "published": True})
    context.indexing.submit_url.reset_mock()

    toggled = await posts.toggle_published(created.id, current=True)

    assert toggled.published is False
    context.indexing.submit_url.assert_awaited_once_with(URL, NotificationType.URL_DELETED)


async def test_indexing_failure_does_not_fail_the_write(posts: PostService, context: AppContext) -> None:
    context.indexing.submit_url.side_effect = IndexingServiceError("quota")

    created = await posts.create_post({**POST, "published": True})

    assert created.published is True


async def test_malformed_token_response_does_not_fail_the_write(context: AppContext) -> None:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048).private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    indexing = IndexingClient(
        AsyncClient(transport=MockTransport(lambda _: Response(200, text="<html>maintenance</html>"))),
        service_account_email="indexer@project.iam.gserviceaccount.com",
        private_key=key.decode(),
        token_url="https://oauth.test/token",
        submit_delay=0,
    )
    posts = PostService(replace(context, indexing=indexing))

    created = await posts.create_post({**POST, "published": True})

    assert created.published is True
    assert (await posts.get_published_post("hello-world")).id == created.id
    toggled = await posts.toggle_published(created.id)
    assert toggled.published is False
    await posts.delete_post(created.id)


async def test_update_keeps_unsent_fields(posts: PostService) -> None:
    created = await posts.create_post({**POST, "excerpt": "Short"})

    updated = await posts.update_post(created.id, {"title": "Hello Again", "content": None})

    assert updated.title == "Hello Again"
    assert updated.content == "First post body"
    assert updated.excerpt == "Short"


async def test_update_can_clear_nullable_fields(posts: PostService) -> None:
    created = await posts.create_post({**POST, "excerpt": "Short"})
    updated = await posts.update_post(created.id, {"excerpt": None})
    assert updated.excerpt is None


async def test_moving_category_refreshes_both_listings(posts: PostService, context: AppContext) -> None:
    categories = CategoryService(context)
    news = await categories.create_category({"name": "News"})
    tech = await categories.create_category({"name": "Tech"})
    created = await posts.create_post({**POST, "published": True, "category_id": str(news.id)})
    assert len(await posts.list_published_posts(news.id)) == 1
    assert await posts.list_published_posts(tech.id) == []

    await posts.update_post(created.id, {"category_id": str(tech.id)})

    assert await posts.list_published_posts(news.id) == []
    assert len(await posts.list_published_posts(tech.id)) == 1


async def test_slug_change_rejects_existing_slug(posts: PostService) -> None:
    await posts.create_post(POST)
    second = await posts.create_post({"title": "Second", "content": "Body"})

    with pytest.raises(DuplicateEntryError):
        await posts.update_post(second.id, {"slug": "hello-world"})


async def test_delete_published_post(posts: PostService, context: AppContext) -> None:
    created = await posts.create_post({**POST, "published": True})
    assert await posts.get_published_post("hello-world") is not None

    await posts.delete_post(created.id)

    assert await posts.get_published_post("hello-world") is None
    context.indexing.submit_url.assert_awaited_with(URL, NotificationType.URL_DELETED)


async def test_delete_missing_post(posts: PostService) -> None:
    with pytest.raises(RecordNotFoundError):
        await posts.delete_post(uuid4())


async def test_bulk_date_update(posts: PostService) -> None:
    first = await posts.create_post(POST)
    second = await posts.create_post({"title": "Second", "content": "Body"})

    result = await posts.bulk_update_post_dates([first.id, second.id])

    assert result.updated == 2
    refreshed = await posts.get_post(first.id)
    assert refreshed.updated_at >= first.updated_at


async def test_bulk_date_update_requires_ids(posts: PostService) -> None:
    with pytest.raises(InputValidationError, match="No post IDs provided"):
        await posts.bulk_update_post_dates([])


async def test_bulk_date_update_rejects_malformed_ids(posts: PostService) -> None:
    with pytest.raises(InputValidationError):
        await posts.bulk_update_post_dates(["not-a-uuid"])


async def test_published_urls(posts: PostService) -> None:
    await posts.create_post({**POST, "published": True})
    await posts.create_post({"title": "Draft", "content": "Body"})

    assert await posts.published_urls() == [URL]
