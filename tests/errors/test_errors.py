"""Tests for application errors and their HTTP rendering."""

from logging import getLogger

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field, ValidationError

from blogcms.errors import (
    BaseAppError,
    DatabaseConnectionError,
    DuplicateEntryError,
    IndexingServiceError,
    InputValidationError,
    InvalidCredentialsError,
    InvalidationError,
    PermissionDeniedError,
    RecordNotFoundError,
    create_exception_handler,
)
from blogcms.errors.validation import format_errors


class Sample(BaseModel):
    name: str = Field(min_length=1)
    count: int


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (DuplicateEntryError(), 409),
        (RecordNotFoundError(), 404),
        (DatabaseConnectionError(), 503),
        (InputValidationError(), 422),
        (InvalidCredentialsError(), 401),
        (PermissionDeniedError("edit_post"), 403),
        (IndexingServiceError(), 502),
    ],
)
def test_status_codes(error: BaseAppError, status_code: int) -> None:
    assert error.status_code == status_code


def test_str_is_detail() -> None:
    assert str(RecordNotFoundError("Post with ID 1 not found")) == "Post with ID 1 not found"


def test_invalidation_error_keeps_target() -> None:
    error = InvalidationError("tag posts", "connection reset")
    assert error.target == "tag posts"
    assert "connection reset" in error.detail


def test_input_validation_from_pydantic() -> None:
    with pytest.raises(ValidationError) as exc_info:
        Sample.model_validate({"name": "", "count": "many"})

    error = InputValidationError.from_pydantic(exc_info.value)

    assert [item["field"] for item in error.errors] == ["name", "count"]
    assert error.detail == error.errors[0]["message"]


def test_format_errors_strips_body_segment() -> None:
    raw = [{"loc": ("body", "title"), "msg": "Field required", "type": "missing"}]
    assert format_errors(raw) == [{"field": "title", "message": "Field required", "type": "missing"}]


async def test_handler_renders_detail_and_extras() -> None:
    app = FastAPI()
    app.add_exception_handler(IndexingServiceError, create_exception_handler(getLogger("test")))

    @app.get("/boom")
    async def boom() -> None:
        raise IndexingServiceError("Indexing API error: quota", code=403, status="PERMISSION_DENIED")

    async with AsyncClient(base_url="http://test", transport=ASGITransport(app=app)) as client:
        response = await client.get("/boom")

    assert response.status_code == 502
    assert response.json() == {
        "detail": "Indexing API error: quota",
        "code": 403,
        "status": "PERMISSION_DENIED",
    }
