"""
Sitemaps and robots.txt.

Every generator degrades instead of failing: a crawler asking for a sitemap
while the database is down still gets a valid document with the static
pages.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from xml.etree.ElementTree import Element, SubElement, indent, tostring

from sqlalchemy.exc import SQLAlchemyError

from blogcms.errors import BASE_EXCEPTION, CacheKeyError, DatabaseError
from blogcms.managers.invalidation import CATEGORIES_TAG, POSTS_TAG
from blogcms.monitoring import get_logger
from blogcms.repositories import CategoryRepository, PostRepository
from blogcms.schemas import ChangeFrequency, SitemapCategory, SitemapPost, SitemapUrl
from blogcms.services.base import BaseService
from blogcms.services.site_settings_service import SiteSettingsService
from blogcms.utils.helpers import post_url, site_url
from blogcms.utils.timezone import to_pkt_iso, to_utc

logger = get_logger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
SITEMAP_FILES = ("sitemap-posts.xml", "sitemap-pages.xml", "sitemap-categories.xml")
SITEMAP_TTL = 3600  # seconds

# (max age, changefreq, priority), checked in order
RECENCY_RULES: tuple[tuple[timedelta, ChangeFrequency, float], ...] = (
    (timedelta(days=7), ChangeFrequency.DAILY, 0.9),
    (timedelta(days=30), ChangeFrequency.WEEKLY, 0.8),
    (timedelta(days=365), ChangeFrequency.MONTHLY, 0.6),
)
STALE_RULE = (ChangeFrequency.YEARLY, 0.5)

GENERATION_ERRORS = (DatabaseError, SQLAlchemyError, CacheKeyError, *BASE_EXCEPTION)


def recency(last_modified: datetime, now: datetime) -> tuple[ChangeFrequency, float]:
    """
    Crawl hints for a post last modified at ``last_modified``.

    Example:
        >>> recency(datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 3, tzinfo=UTC))
        (<ChangeFrequency.DAILY: 'daily'>, 0.9)
    """
    age = to_utc(now) - to_utc(last_modified)
    for max_age, changefreq, priority in RECENCY_RULES:
        if age <= max_age:
            return changefreq, priority
    return STALE_RULE


def static_pages(now: datetime) -> list[SitemapUrl]:
    """Home and blog index, present in every posts sitemap."""
    base = site_url()
    lastmod = to_pkt_iso(now)
    return [
        SitemapUrl(loc=base, lastmod=lastmod, changefreq=ChangeFrequency.DAILY, priority=1.0),
        SitemapUrl(loc=f"{base}/blog", lastmod=lastmod, changefreq=ChangeFrequency.DAILY, priority=0.9),
    ]


def render_urlset(urls: Iterable[SitemapUrl]) -> str:
    root = Element("urlset", xmlns=SITEMAP_NS)
    for url in urls:
        node = SubElement(root, "url")
        SubElement(node, "loc").text = url.loc
        SubElement(node, "lastmod").text = url.lastmod
        SubElement(node, "changefreq").text = url.changefreq.value
        SubElement(node, "priority").text = f"{url.priority:.1f}"
    indent(root)
    return XML_DECLARATION + tostring(root, encoding="unicode") + "\n"


def render_sitemap_index(locations: Iterable[str], lastmod: str) -> str:
    root = Element("sitemapindex", xmlns=SITEMAP_NS)
    for location in locations:
        node = SubElement(root, "sitemap")
        SubElement(node, "loc").text = location
        SubElement(node, "lastmod").text = lastmod
    indent(root)
    return XML_DECLARATION + tostring(root, encoding="unicode") + "\n"


def render_robots(
    *,
    robots_index: bool = True,
    robots_follow: bool = True,
    revisit_days: int = 1,
) -> str:
    """
    Build robots.txt.

    Args:
        robots_index: ``False`` adds a ``noindex`` directive.
        robots_follow: ``False`` adds a ``nofollow`` directive.
        revisit_days: Emitted as ``Crawl-delay`` when greater than one.
    """
    lines = ["User-agent: *", "Allow: /", "Disallow: /dashboard/", "Disallow: /api/"]
    directives = [
        directive
        for directive, enabled in (("noindex", not robots_index), ("nofollow", not robots_follow))
        if enabled
    ]
    if directives:
        lines += ["", ", ".join(directives)]
    if revisit_days > 1:
        lines.append(f"Crawl-delay: {revisit_days}")
    lines += ["", f"Sitemap: {site_url()}/sitemap.xml"]
    return "\n".join(lines) + "\n"


class SeoService(BaseService):
    """Generates the crawler-facing documents."""

    async def _load_posts(self) -> list[SitemapPost]:
        async with self.db.session() as session:
            posts = await PostRepository(session).list_for_sitemap()
        return [SitemapPost.model_validate(post) for post in posts]

    async def _load_categories(self) -> list[SitemapCategory]:
        async with self.db.session() as session:
            categories = await CategoryRepository(session).list_sorted()
        return [SitemapCategory.model_validate(category) for category in categories]

    def sitemap_index(self, now: datetime | None = None) -> str:
        base = site_url()
        lastmod = to_pkt_iso(now or datetime.now(UTC))
        return render_sitemap_index((f"{base}/{name}" for name in SITEMAP_FILES), lastmod)

    async def posts_sitemap(self, now: datetime | None = None) -> str:
        """
        Home, blog index and every published post, most recently updated first.

        Falls back to the two static pages when posts cannot be loaded.
        """
        now = now or datetime.now(UTC)
        urls = static_pages(now)
        load = self.cache.cached(
            self._load_posts,
            ["sitemap", "posts"],
            ttl=SITEMAP_TTL,
            tags=[POSTS_TAG],
            paths=["/sitemap-posts.xml"],
            response_model=list[SitemapPost],
        )
        try:
            posts = await load()
        except GENERATION_ERRORS:
            logger.exception("posts sitemap fell back to static pages")
            return render_urlset(urls)

        for post in posts:
            last_modified = post.updated_at or post.created_at
            changefreq, priority = recency(last_modified, now)
            urls.append(
                SitemapUrl(
                    loc=post_url(post.slug),
                    lastmod=to_pkt_iso(last_modified),
                    changefreq=changefreq,
                    priority=priority,
                ),
            )
        return render_urlset(urls)

    def pages_sitemap(self, now: datetime | None = None) -> str:
        return render_urlset(static_pages(now or datetime.now(UTC)))

    async def categories_sitemap(self, now: datetime | None = None) -> str:
        """Filtered blog listing per category; empty when categories cannot be loaded."""
        now = now or datetime.now(UTC)
        load = self.cache.cached(
            self._load_categories,
            ["sitemap", "categories"],
            ttl=SITEMAP_TTL,
            tags=[CATEGORIES_TAG],
            response_model=list[SitemapCategory],
        )
        try:
            categories = await load()
        except GENERATION_ERRORS:
            logger.exception("categories sitemap unavailable")
            categories = []

        base = site_url()
        return render_urlset(
            SitemapUrl(
                loc=f"{base}/blog?category={category.id}",
                lastmod=to_pkt_iso(category.updated_at or now),
                changefreq=ChangeFrequency.WEEKLY,
                priority=0.6,
            )
            for category in categories
        )

    async def robots_txt(self) -> str:
        """robots.txt from site settings, or the permissive default on any failure."""
        try:
            site = await SiteSettingsService(self.context).get_settings()
        except GENERATION_ERRORS:
            logger.exception("robots.txt fell back to defaults")
            return render_robots()
        if site is None:
            return render_robots()
        return render_robots(
            robots_index=site.robots_index,
            robots_follow=site.robots_follow,
            revisit_days=site.revisit_days,
        )
