"""Tests for the Indexing API client against a mocked transport."""

from collections.abc import Callable
from json import loads
from urllib.parse import parse_qs

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import AsyncClient, ConnectError, MockTransport, Request, Response
from jose import jwt

from blogcms.clients.indexing_client import INDEXING_SCOPE, IndexingClient
from blogcms.errors import IndexingServiceError, InputValidationError
from blogcms.schemas import NotificationType, SubmissionStatus

TOKEN_URL = "https://oauth.test/token"
INDEXING_URL = "https://indexing.test/v3/urlNotifications:publish"
EMAIL = "indexer@project.iam.gserviceaccount.com"
PAGE = "https://blog.example.com/blog/hello-world"

type Handler = Callable[[Request], Response]


@pytest.fixture(scope="module")
def private_key() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


class FakeGoogle:
    """Token endpoint plus indexing endpoint answering with a scripted response."""

    def __init__(self, publish: Response | None = None) -> None:
        self.publish = publish or Response(200, json={"urlNotificationMetadata": {"url": PAGE}})
        self.token_requests: list[Request] = []
        self.publish_requests: list[Request] = []

    def __call__(self, request: Request) -> Response:
        if str(request.url) == TOKEN_URL:
            self.token_requests.append(request)
            return Response(200, json={"access_token": "ya29.token", "expires_in": 3600})
        self.publish_requests.append(request)
        return self.publish


def make_client(handler: Handler, private_key: str | None, **kwargs: object) -> IndexingClient:
    return IndexingClient(
        AsyncClient(transport=MockTransport(handler)),
        service_account_email=EMAIL,
        private_key=private_key,
        token_url=TOKEN_URL,
        indexing_url=INDEXING_URL,
        submit_delay=0,
        **kwargs,
    )


async def test_submit_url(private_key: str) -> None:
    google = FakeGoogle()
    client = make_client(google, private_key)

    result = await client.submit_url(PAGE)

    assert result.status is SubmissionStatus.SUBMITTED
    [publish] = google.publish_requests
    assert publish.headers["Authorization"] == "Bearer ya29.token"
    assert loads(publish.content) == {"url": PAGE, "type": "URL_UPDATED"}


async def test_assertion_claims(private_key: str) -> None:
    google = FakeGoogle()
    client = make_client(google, private_key, clock=lambda: 1_700_000_000.0)

    await client.submit_url(PAGE, NotificationType.URL_DELETED)

    form = parse_qs(google.token_requests[0].content.decode())
    assert form["grant_type"] == ["urn:ietf:params:oauth:grant-type:jwt-bearer"]
    claims = jwt.get_unverified_claims(form["assertion"][0])
    assert claims["iss"] == EMAIL
    assert claims["aud"] == TOKEN_URL
    assert claims["scope"] == INDEXING_SCOPE
    assert claims["exp"] - claims["iat"] == 3600


async def test_token_is_reused_until_expiry(private_key: str) -> None:
    now = [1_700_000_000.0]
    google = FakeGoogle()
    client = make_client(google, private_key, clock=lambda: now[0])

    await client.submit_url(PAGE)
    await client.submit_url(PAGE)
    assert len(google.token_requests) == 1

    now[0] += 3600
    await client.submit_url(PAGE)
    assert len(google.token_requests) == 2


async def test_rate_limit_is_not_an_error(private_key: str) -> None:
    google = FakeGoogle(
        Response(429, json={"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}}),
    )
    client = make_client(google, private_key)

    result = await client.submit_url(PAGE)

    assert result.status is SubmissionStatus.RATE_LIMITED
    assert not result.ok


async def test_api_error_raises(private_key: str) -> None:
    google = FakeGoogle(
        Response(403, json={"error": {"code": 403, "message": "Permission denied", "status": "PERMISSION_DENIED"}}),
    )
    client = make_client(google, private_key)

    with pytest.raises(IndexingServiceError, match="Permission denied") as exc_info:
        await client.submit_url(PAGE)
    assert exc_info.value.code == 403
    assert exc_info.value.status == "PERMISSION_DENIED"


async def test_token_exchange_failure(private_key: str) -> None:
    client = make_client(lambda _: Response(400, text="invalid_grant"), private_key)

    with pytest.raises(IndexingServiceError, match="invalid_grant"):
        await client.submit_url(PAGE)


@pytest.mark.parametrize(
    "token_response",
    [
        Response(200, text="<html>maintenance</html>"),
        Response(200, json={"token_type": "Bearer"}),
        Response(200, json=["ya29.token"]),
    ],
)
async def test_malformed_token_response(private_key: str, token_response: Response) -> None:
    google = FakeGoogle()
    client = make_client(lambda request: token_response if str(request.url) == TOKEN_URL else google(request), private_key)

    with pytest.raises(IndexingServiceError, match="Malformed token response"):
        await client.submit_url(PAGE)
    assert google.publish_requests == []


async def test_unreachable_endpoint(private_key: str) -> None:
    def refuse(request: Request) -> Response:
        raise ConnectError("refused", request=request)

    client = make_client(refuse, private_key)

    with pytest.raises(IndexingServiceError, match="token endpoint"):
        await client.submit_url(PAGE)


async def test_unconfigured_client_skips() -> None:
    google = FakeGoogle()
    client = IndexingClient(
        AsyncClient(transport=MockTransport(google)),
        service_account_email="",
        private_key="",
        submit_delay=0,
    )

    result = await client.submit_url(PAGE)

    assert result.status is SubmissionStatus.SKIPPED
    assert google.publish_requests == []


async def test_rejects_relative_url(private_key: str) -> None:
    client = make_client(FakeGoogle(), private_key)

    with pytest.raises(InputValidationError, match="must start with http"):
        await client.submit_url("/blog/hello-world")


async def test_submit_urls_counts_successes(private_key: str) -> None:
    google = FakeGoogle()
    client = make_client(google, private_key)

    submitted = await client.submit_urls([PAGE, "ftp://nope", f"{PAGE}-2"])

    assert submitted == 2
    assert len(google.publish_requests) == 2
