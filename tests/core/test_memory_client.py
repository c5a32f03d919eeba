"""Tests for the in-memory cache backend."""

from unittest.mock import patch

from blogcms.clients.memory_client import MemoryClient


async def test_get_set() -> None:
    client = MemoryClient()
    await client.set("key", "value")
    assert await client.get("key") == "value"
    assert await client.ttl("key") == -1


async def test_expiry() -> None:
    client = MemoryClient()
    with patch("blogcms.clients.memory_client.monotonic", return_value=100.0):
        await client.set("key", "value", ex=10)
    with patch("blogcms.clients.memory_client.monotonic", return_value=105.0):
        assert await client.ttl("key") == 5
    with patch("blogcms.clients.memory_client.monotonic", return_value=110.0):
        assert await client.get("key") is None
        assert await client.ttl("key") == -2


async def test_evicts_least_recently_used() -> None:
    client = MemoryClient(max_entries=2)
    await client.set("a", "1")
    await client.set("b", "2")
    await client.get("a")
    await client.set("c", "3")

    assert await client.exists("a", "b", "c") == 2
    assert await client.get("b") is None


async def test_scan_iter_matches_pattern() -> None:
    client = MemoryClient()
    await client.set("blog:tags:posts", "1")
    await client.set("blog:data:x", "2")

    assert [key async for key in client.scan_iter("blog:tags:*")] == ["blog:tags:posts"]


async def test_delete_counts_removed_keys() -> None:
    client = MemoryClient()
    await client.set("a", "1")
    assert await client.delete("a", "missing") == 1
