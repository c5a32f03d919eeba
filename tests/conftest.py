# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Must happen before blogcms is imported anywhere
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_TO_FILE"] = "false"
os.environ["REDIS_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-entropy"
os.environ["SITE_URL"] = "https://blog.example.com/"

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import timedelta  # noqa: E402
from pathlib import Path  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from blogcms.auth.permissions import Role  # noqa: E402
from blogcms.clients.indexing_client import IndexingClient  # noqa: E402
from blogcms.configs import DatabaseConfig  # noqa: E402
from blogcms.context import AppContext  # noqa: E402
from blogcms.db import ConnectionCache, Database  # noqa: E402
from blogcms.managers import CacheManager  # noqa: E402
from blogcms.managers.token_manager import create_access_token  # noqa: E402
from blogcms.schemas import IndexingResult, NotificationType, SubmissionStatus, UserResponse  # noqa: E402
from blogcms.services import UserService  # noqa: E402


def sqlite_config(path: Path) -> DatabaseConfig:
    return DatabaseConfig(url=f"sqlite+aiosqlite:///{path}")


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database]:
    """File-backed SQLite database with every table created."""
    db = Database(ConnectionCache(sqlite_config(tmp_path / "blog.db")))
    await db.init_db()
    yield db
    await db.close()


@pytest.fixture
async def cache_manager() -> AsyncGenerator[CacheManager]:
    manager = CacheManager()
    await manager.initialize()
    yield manager
    await manager.shutdown()


@pytest.fixture
def indexing() -> MagicMock:
    """Indexing client double that records submissions."""

    async def submit(url: str, notification_type: NotificationType = NotificationType.URL_UPDATED) -> IndexingResult:
        return IndexingResult(url=url, type=notification_type, status=SubmissionStatus.SUBMITTED)

    client = MagicMock(spec=IndexingClient)
    client.configured = True
    client.submit_url = AsyncMock(side_effect=submit)
    client.submit_urls = AsyncMock(return_value=0)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def context(database: Database, cache_manager: CacheManager, indexing: MagicMock) -> AppContext:
    return AppContext.create(database=database, cache=cache_manager, indexing=indexing)


@pytest.fixture
async def client(context: AppContext) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to an app sharing the test context."""
    from blogcms.main import create_app  # noqa: PLC0415

    app = create_app(context)
    async with AsyncClient(base_url="http://test", transport=ASGITransport(app=app)) as ac:
        yield ac


async def make_user(
    context: AppContext,
    email: str,
    role: Role = Role.USER,
    password: str = "secret123",
) -> UserResponse:
    """Register a user and give it ``role``."""
    users = UserService(context)
    registered = await users.register({"name": email.split("@")[0], "email": email, "password": password})
    if registered.user.role != role.value:
        return await users.assign_role(registered.user.id, role)
    return registered.user


def auth_headers(user: UserResponse) -> dict[str, str]:
    token = create_access_token(user.id, user.role, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin(context: AppContext) -> UserResponse:
    return await make_user(context, "admin@example.com", Role.ADMIN)


@pytest.fixture
def admin_headers(admin: UserResponse) -> dict[str, str]:
    return auth_headers(admin)
