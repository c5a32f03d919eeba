from collections.abc import MutableMapping
from datetime import UTC, datetime
from re import sub
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route

from blogcms.configs import settings
from blogcms.configs.settings import DEFAULT_SITE_URL


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def utc_now() -> datetime:
    """Return an aware UTC timestamp truncated to milliseconds."""
    now = datetime.now(tz=UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def slugify(text: str) -> str:
    """
    Build a URL slug from free text.

    Args:
        text: Source text, usually a title.

    Returns:
        Lowercase alphanumeric words joined by single hyphens.
    """
    slug = text.lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-+", "-", slug)
    return slug.strip("-")


def site_url() -> str:
    """
    Resolve the public base URL of the blog.

    ``SITE_URL`` wins (trailing slash removed), then the deployment host,
    then the local development address.
    """
    if settings.SITE_URL:
        return settings.SITE_URL.rstrip("/")
    if settings.DEPLOYMENT_HOST:
        return f"https://{settings.DEPLOYMENT_HOST}"
    return DEFAULT_SITE_URL


def post_url(slug: str) -> str:
    """Canonical public URL of a post."""
    return f"{site_url()}/blog/{slug}"


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        if type(route) is APIRoute and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if type(route) is Route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary
