"""Indexing API request/response schemas."""

from enum import StrEnum

from pydantic import BaseModel, Field


class NotificationType(StrEnum):
    URL_UPDATED = "URL_UPDATED"
    URL_DELETED = "URL_DELETED"


class SubmissionStatus(StrEnum):
    SUBMITTED = "submitted"
    RATE_LIMITED = "rate_limited"
    SKIPPED = "skipped"


class IndexingRequest(BaseModel):
    url: str = Field(..., examples=["https://example.com/blog/caching-in-fastapi"])
    type: NotificationType = NotificationType.URL_UPDATED


class IndexingResult(BaseModel):
    """Outcome of one submission; ``rate_limited`` is not an error."""

    url: str
    type: NotificationType
    status: SubmissionStatus
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SubmissionStatus.SUBMITTED


class BatchIndexingRequest(BaseModel):
    urls: list[str] = Field(..., min_length=1)
    type: NotificationType = NotificationType.URL_UPDATED


class BatchIndexingResult(BaseModel):
    submitted: int
    total: int
