"""Tests for sitemap and robots.txt generation."""

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from xml.etree.ElementTree import fromstring

import pytest

from blogcms.context import AppContext
from blogcms.errors import DatabaseConnectionError
from blogcms.schemas import ChangeFrequency
from blogcms.services import CategoryService, PostService, SeoService, SiteSettingsService
from blogcms.services.seo import SITEMAP_NS, recency, render_robots

NS = {"sm": SITEMAP_NS}
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def seo(context: AppContext) -> SeoService:
    return SeoService(context)


def locations(xml: str) -> list[str]:
    root = fromstring(xml.split("\n", 1)[1])
    return [node.text for node in root.iterfind(".//sm:loc", NS)]


@pytest.mark.parametrize(
    ("age", "expected"),
    [
        (timedelta(days=2), (ChangeFrequency.DAILY, 0.9)),
        (timedelta(days=7), (ChangeFrequency.DAILY, 0.9)),
        (timedelta(days=20), (ChangeFrequency.WEEKLY, 0.8)),
        (timedelta(days=200), (ChangeFrequency.MONTHLY, 0.6)),
        (timedelta(days=800), (ChangeFrequency.YEARLY, 0.5)),
    ],
)
def test_recency(age: timedelta, expected: tuple[ChangeFrequency, float]) -> None:
    assert recency(NOW - age, NOW) == expected


def test_sitemap_index_lists_child_sitemaps(seo: SeoService) -> None:
    xml = seo.sitemap_index(NOW)

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert locations(xml) == [
        "https://blog.example.com/sitemap-posts.xml",
        "https://blog.example.com/sitemap-pages.xml",
        "https://blog.example.com/sitemap-categories.xml",
    ]
    assert "<lastmod>2024-06-01T17:00:00.000+05:00</lastmod>" in xml


async def test_posts_sitemap_lists_published_posts(seo: SeoService, context: AppContext) -> None:
    posts = PostService(context)
    await posts.create_post({"title": "Live", "content": "Body", "published": True})
    await posts.create_post({"title": "Draft", "content": "Body"})

    xml = await seo.posts_sitemap()

    assert locations(xml) == [
        "https://blog.example.com",
        "https://blog.example.com/blog",
        "https://blog.example.com/blog/live",
    ]
    assert "<changefreq>daily</changefreq>" in xml


async def test_posts_sitemap_sees_new_post(seo: SeoService, context: AppContext) -> None:
    assert len(locations(await seo.posts_sitemap())) == 2

    await PostService(context).create_post({"title": "Fresh", "content": "Body", "published": True})

    assert "https://blog.example.com/blog/fresh" in locations(await seo.posts_sitemap())


async def test_posts_sitemap_falls_back_to_static_pages(seo: SeoService) -> None:
    broken = MagicMock()
    broken.session.side_effect = DatabaseConnectionError
    seo.db = broken

    xml = await seo.posts_sitemap()

    assert locations(xml) == ["https://blog.example.com", "https://blog.example.com/blog"]


def test_pages_sitemap(seo: SeoService) -> None:
    assert locations(seo.pages_sitemap(NOW)) == ["https://blog.example.com", "https://blog.example.com/blog"]


async def test_categories_sitemap(seo: SeoService, context: AppContext) -> None:
    news = await CategoryService(context).create_category({"name": "News"})

    xml = await seo.categories_sitemap()

    assert locations(xml) == [f"https://blog.example.com/blog?category={news.id}"]
    assert "<priority>0.6</priority>" in xml


def test_default_robots() -> None:
    assert render_robots() == (
        "User-agent: *\n"
        "Allow: /\n"
        "Disallow: /dashboard/\n"
        "Disallow: /api/\n"
        "\n"
        "Sitemap: https://blog.example.com/sitemap.xml\n"
    )


def test_restrictive_robots() -> None:
    robots = render_robots(robots_index=False, robots_follow=False, revisit_days=7)

    assert "noindex, nofollow" in robots
    assert "Crawl-delay: 7" in robots


async def test_robots_follows_site_settings(seo: SeoService, context: AppContext) -> None:
    assert "noindex" not in await seo.robots_txt()

    await SiteSettingsService(context).update_settings({"robots_index": False})

    robots = await seo.robots_txt()
    assert "noindex" in robots
    assert "nofollow" not in robots


async def test_robots_defaults_when_settings_unavailable(context: AppContext) -> None:
    broken = MagicMock()
    broken.session.side_effect = DatabaseConnectionError
    seo = SeoService(replace(context, database=broken))

    assert await seo.robots_txt() == render_robots()
