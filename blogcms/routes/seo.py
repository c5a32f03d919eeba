"""
SEO Routes.

Sitemap index, the three sitemaps it lists and robots.txt. These answer 200
with a usable document even when the database is unavailable.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from blogcms.dependencies import SeoServiceDep

router = APIRouter(tags=["🔎 SEO"])

XML_MEDIA_TYPE = "application/xml; charset=utf-8"
NO_STORE = {"Cache-Control": "public, s-maxage=0, must-revalidate"}
HOURLY = {"Cache-Control": "public, s-maxage=3600, stale-while-revalidate=86400"}


@router.get("/sitemap.xml", response_class=Response, summary="Sitemap index", operation_id="sitemap_index")
async def sitemap_index(seo: SeoServiceDep) -> Response:
    return Response(seo.sitemap_index(), media_type=XML_MEDIA_TYPE, headers=NO_STORE)


@router.get(
    "/sitemap-posts.xml",
    response_class=Response,
    summary="Posts sitemap",
    operation_id="sitemap_posts",
)
async def sitemap_posts(seo: SeoServiceDep) -> Response:
    return Response(await seo.posts_sitemap(), media_type=XML_MEDIA_TYPE, headers=HOURLY)


@router.get(
    "/sitemap-pages.xml",
    response_class=Response,
    summary="Static pages sitemap",
    operation_id="sitemap_pages",
)
async def sitemap_pages(seo: SeoServiceDep) -> Response:
    return Response(seo.pages_sitemap(), media_type=XML_MEDIA_TYPE, headers=HOURLY)


@router.get(
    "/sitemap-categories.xml",
    response_class=Response,
    summary="Categories sitemap",
    operation_id="sitemap_categories",
)
async def sitemap_categories(seo: SeoServiceDep) -> Response:
    return Response(await seo.categories_sitemap(), media_type=XML_MEDIA_TYPE, headers=HOURLY)


@router.get("/robots.txt", response_class=PlainTextResponse, summary="robots.txt", operation_id="robots_txt")
async def robots_txt(seo: SeoServiceDep) -> PlainTextResponse:
    return PlainTextResponse(await seo.robots_txt())
