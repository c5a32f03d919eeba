"""Tests for the authenticated dashboard endpoints and their permissions."""

from uuid import uuid4

import pytest
from conftest import auth_headers, make_user
from httpx import AsyncClient

from blogcms.auth.permissions import Role
from blogcms.context import AppContext
from blogcms.schemas import IndexingResult, NotificationType, SubmissionStatus, UserResponse


@pytest.fixture
async def author(context: AppContext, admin: UserResponse) -> UserResponse:  # noqa: ARG001
    return await make_user(context, "author@example.com", Role.AUTHOR)


@pytest.fixture
async def reader(context: AppContext, admin: UserResponse) -> UserResponse:  # noqa: ARG001
    return await make_user(context, "reader@example.com", Role.USER)


async def create_post(client: AsyncClient, headers: dict[str, str], **fields: object) -> dict:
    response = await client.post(
        "/api/dashboard/posts",
        json={"title": "Hello World", "content": "Body", **fields},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_dashboard_requires_login(client: AsyncClient) -> None:
    assert (await client.get("/api/dashboard/posts")).status_code == 401


async def test_admin_creates_published_post(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    post = await create_post(client, admin_headers, published=True)

    assert post["published"] is True
    public = await client.get("/api/posts")
    assert [item["slug"] for item in public.json()] == ["hello-world"]


async def test_invalid_post_payload(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post("/api/dashboard/posts", json={"title": "", "content": "Body"}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["detail"] == "Validation failed"


async def test_duplicate_slug_conflicts(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await create_post(client, admin_headers)

    response = await client.post(
        "/api/dashboard/posts",
        json={"title": "Hello World", "content": "Other"},
        headers=admin_headers,
    )

    assert response.status_code == 409


async def test_author_cannot_publish_on_create(client: AsyncClient, author: UserResponse) -> None:
    post = await create_post(client, auth_headers(author), published=True)

    assert post["published"] is False
    assert post["author_id"] == str(author.id)


async def test_reader_cannot_create(client: AsyncClient, reader: UserResponse) -> None:
    response = await client.post(
        "/api/dashboard/posts",
        json={"title": "Nope", "content": "Body"},
        headers=auth_headers(reader),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Missing permission: create_post"


async def test_author_edits_own_post_only(
    client: AsyncClient,
    author: UserResponse,
    admin_headers: dict[str, str],
) -> None:
    headers = auth_headers(author)
    own = await create_post(client, headers)
    other = await create_post(client, admin_headers, title="Admin Post")

    edited = await client.put(f"/api/dashboard/posts/{own['id']}", json={"title": "Edited"}, headers=headers)
    denied = await client.put(f"/api/dashboard/posts/{other['id']}", json={"title": "Edited"}, headers=headers)

    assert edited.status_code == 200
    assert edited.json()["title"] == "Edited"
    assert denied.status_code == 403


async def test_author_update_cannot_publish(client: AsyncClient, author: UserResponse) -> None:
    headers = auth_headers(author)
    post = await create_post(client, headers)

    response = await client.put(f"/api/dashboard/posts/{post['id']}", json={"published": True}, headers=headers)

    assert response.status_code == 200
    assert response.json()["published"] is False


async def test_update_is_visible_immediately(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    post = await create_post(client, admin_headers, published=True)
    assert (await client.get("/api/posts/hello-world")).json()["title"] == "Hello World"

    await client.put(f"/api/dashboard/posts/{post['id']}", json={"title": "Renamed"}, headers=admin_headers)

    assert (await client.get("/api/posts/hello-world")).json()["title"] == "Renamed"


async def test_toggle(client: AsyncClient, admin_headers: dict[str, str], context: AppContext) -> None:
    post = await create_post(client, admin_headers)

    response = await client.patch(
        f"/api/dashboard/posts/{post['id']}/toggle",
        json={"current": False},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["published"] is True
    context.indexing.submit_url.assert_awaited_once_with(
        "https://blog.example.com/blog/hello-world",
        NotificationType.URL_UPDATED,
    )


async def test_delete(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    post = await create_post(client, admin_headers)

    response = await client.delete(f"/api/dashboard/posts/{post['id']}", headers=admin_headers)

    assert response.status_code == 204
    missing = await client.get(f"/api/dashboard/posts/{post['id']}", headers=admin_headers)
    assert missing.status_code == 404


async def test_delete_missing_post(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.delete(f"/api/dashboard/posts/{uuid4()}", headers=admin_headers)
    assert response.status_code == 404


async def test_bulk_dates(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    post = await create_post(client, admin_headers)

    response = await client.post(
        "/api/dashboard/posts/bulk-dates",
        json={"ids": [post["id"]]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"updated": 1}


async def test_bulk_dates_empty(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post("/api/dashboard/posts/bulk-dates", json={"ids": []}, headers=admin_headers)
    assert response.status_code == 422


async def test_category_lifecycle(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    created = await client.post("/api/dashboard/categories", json={"name": "News"}, headers=admin_headers)
    assert created.status_code == 201
    category_id = created.json()["id"]
    await create_post(client, admin_headers, category_id=category_id)

    renamed = await client.put(
        f"/api/dashboard/categories/{category_id}",
        json={"name": "Updates"},
        headers=admin_headers,
    )
    assert renamed.json()["name"] == "Updates"
    assert [c["name"] for c in (await client.get("/api/categories")).json()] == ["Updates"]

    deleted = await client.delete(f"/api/dashboard/categories/{category_id}", headers=admin_headers)
    assert deleted.json() == {"detached_posts": 1}
    assert (await client.get("/api/categories")).json() == []


async def test_users_and_roles(client: AsyncClient, admin_headers: dict[str, str], reader: UserResponse) -> None:
    listed = await client.get("/api/dashboard/users", headers=admin_headers)
    assert {user["email"] for user in listed.json()} == {"admin@example.com", "reader@example.com"}

    promoted = await client.put(
        f"/api/dashboard/users/{reader.id}/role",
        json={"role": "editor"},
        headers=admin_headers,
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "editor"


async def test_reader_cannot_list_users(client: AsyncClient, reader: UserResponse) -> None:
    response = await client.get("/api/dashboard/users", headers=auth_headers(reader))
    assert response.status_code == 403


async def test_stats(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await create_post(client, admin_headers, published=True)

    response = await client.get("/api/dashboard/stats", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["published_posts"] == 1
    assert response.json()["total_users"] == 1


async def test_settings(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    updated = await client.put(
        "/api/dashboard/settings",
        json={"site_name": "Field Notes", "robots_index": False},
        headers=admin_headers,
    )
    assert updated.status_code == 200

    current = await client.get("/api/dashboard/settings", headers=admin_headers)
    assert current.json()["site_name"] == "Field Notes"
    assert "noindex" in (await client.get("/robots.txt")).text


async def test_settings_require_permission(client: AsyncClient, author: UserResponse) -> None:
    response = await client.put("/api/dashboard/settings", json={"site_name": "Mine"}, headers=auth_headers(author))
    assert response.status_code == 403


async def test_submit_url(client: AsyncClient, admin_headers: dict[str, str], context: AppContext) -> None:
    context.indexing.submit_url.side_effect = None
    context.indexing.submit_url.return_value = IndexingResult(
        url="https://blog.example.com/blog/x",
        type=NotificationType.URL_UPDATED,
        status=SubmissionStatus.RATE_LIMITED,
    )

    response = await client.post(
        "/api/indexing",
        json={"url": "https://blog.example.com/blog/x"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "rate_limited"


async def test_submit_batch(client: AsyncClient, admin_headers: dict[str, str], context: AppContext) -> None:
    context.indexing.submit_urls.return_value = 2

    response = await client.post(
        "/api/indexing/batch",
        json={"urls": ["https://blog.example.com/a", "https://blog.example.com/b"]},
        headers=admin_headers,
    )

    assert response.json() == {"submitted": 2, "total": 2}
