"""
Indexing Routes.

Manual submission of URLs to the search engine Indexing API. A 429 from the
API is reported as `rate_limited` with status 200; any other API error is a
502.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from blogcms.auth.permissions import Permission
from blogcms.dependencies import ContextDep, require_permission
from blogcms.schemas import (
    BatchIndexingRequest,
    BatchIndexingResult,
    IndexingRequest,
    IndexingResult,
    UserResponse,
)

router = APIRouter(prefix="/api/indexing", tags=["📡 Indexing"])

CanSubmit = Annotated[UserResponse, Depends(require_permission(Permission.SUBMIT_INDEXING))]


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=IndexingResult,
    summary="Submit URL for indexing",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "url": "https://example.com/blog/hello",
                        "type": "URL_UPDATED",
                        "status": "rate_limited",
                        "detail": "Rate limit exceeded; the URL will be indexed on the next crawl",
                    },
                },
            },
        },
        502: {
            "description": "Indexing API error",
            "content": {"application/json": {"example": {"detail": "Indexing API error: Permission denied"}}},
        },
    },
    operation_id="indexing_submit",
)
async def submit_url(body: IndexingRequest, context: ContextDep, user: CanSubmit) -> IndexingResult:
    return await context.indexing.submit_url(body.url, body.type)


@router.post(
    "/batch",
    response_class=ORJSONResponse,
    response_model=BatchIndexingResult,
    summary="Submit several URLs",
    operation_id="indexing_submit_batch",
)
async def submit_batch(
    body: BatchIndexingRequest,
    context: ContextDep,
    user: CanSubmit,
) -> BatchIndexingResult:
    """Submitted one at a time; failures of single URLs are skipped."""
    submitted = await context.indexing.submit_urls(body.urls, body.type)
    return BatchIndexingResult(submitted=submitted, total=len(body.urls))
