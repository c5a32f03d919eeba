"""Tests for the public blog endpoints."""

from httpx import AsyncClient

from blogcms.context import AppContext
from blogcms.services import CategoryService, PostService


async def test_lists_only_published_posts(client: AsyncClient, context: AppContext) -> None:
    posts = PostService(context)
    await posts.create_post({"title": "Live", "content": "Body", "published": True})
    await posts.create_post({"title": "Draft", "content": "Body"})

    response = await client.get("/api/posts")

    assert response.status_code == 200
    assert [post["slug"] for post in response.json()] == ["live"]
    assert "content" not in response.json()[0]


async def test_filter_by_category(client: AsyncClient, context: AppContext) -> None:
    news = await CategoryService(context).create_category({"name": "News"})
    posts = PostService(context)
    await posts.create_post({"title": "Filed", "content": "Body", "published": True, "category_id": str(news.id)})
    await posts.create_post({"title": "Loose", "content": "Body", "published": True})

    response = await client.get("/api/posts", params={"category_id": str(news.id)})

    assert [post["slug"] for post in response.json()] == ["filed"]


async def test_get_post_by_slug(client: AsyncClient, context: AppContext) -> None:
    await PostService(context).create_post({"title": "Live", "content": "Body", "published": True})

    response = await client.get("/api/posts/live")

    assert response.status_code == 200
    assert response.json()["content"] == "Body"


async def test_draft_is_not_found(client: AsyncClient, context: AppContext) -> None:
    await PostService(context).create_post({"title": "Draft", "content": "Body"})

    response = await client.get("/api/posts/draft")

    assert response.status_code == 404
    assert response.json()["detail"] == "Post 'draft' not found"


async def test_categories(client: AsyncClient, context: AppContext) -> None:
    await CategoryService(context).create_category({"name": "News"})

    response = await client.get("/api/categories")

    assert [category["name"] for category in response.json()] == ["News"]


async def test_site_settings_before_first_save(client: AsyncClient) -> None:
    response = await client.get("/api/site-settings")
    assert response.status_code == 200
    assert response.json() is None


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "ready"
    assert body["indexing"] == "configured"
    assert body["timestamp"].endswith("+05:00")
    assert response.headers["X-Request-ID"]
