"""
Search engine Indexing API client.

Authenticates as a service account: a self-signed RS256 assertion is
exchanged at the OAuth2 token endpoint for a short-lived bearer token, which
is then used to publish URL notifications.

A 429 answer is an expected outcome, not a fault: the URL will still be
picked up on the next regular crawl.
"""

from asyncio import sleep
from collections.abc import Callable, Iterable
from time import time
from typing import Any

from httpx import AsyncClient, HTTPError, Response
from jose import jwt
from jose.exceptions import JWTError
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from blogcms.configs import settings
from blogcms.configs.settings import INDEXING_SUBMIT_DELAY
from blogcms.decorators import with_retry
from blogcms.errors import IndexingServiceError, InputValidationError
from blogcms.monitoring import get_logger
from blogcms.schemas.indexing import IndexingResult, NotificationType, SubmissionStatus

logger = get_logger(__name__)

INDEXING_SCOPE = "https://www.googleapis.com/auth/indexing"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME = 3600  # seconds
TOKEN_REFRESH_MARGIN = 60  # seconds


def validate_url(url: str) -> str:
    """
    Ensure a URL is absolute http(s).

    Raises:
        InputValidationError: For any other scheme or a bare path.
    """
    if not url.startswith(("http://", "https://")):
        mssg = f"Invalid URL format: {url}. URL must start with http:// or https://"
        raise InputValidationError(mssg)
    return url


class IndexingClient:
    """
    Publishes URL_UPDATED / URL_DELETED notifications.

    Args:
        http_client: Shared httpx client; one is created when omitted.
        service_account_email: Defaults to ``GOOGLE_SERVICE_ACCOUNT_EMAIL``.
        private_key: PEM key, defaults to ``GOOGLE_PRIVATE_KEY``.
        clock: Wall-clock source in seconds, injectable for tests.
    """

    def __init__(
        self,
        http_client: AsyncClient | None = None,
        *,
        service_account_email: str | None = None,
        private_key: str | None = None,
        token_url: str | None = None,
        indexing_url: str | None = None,
        submit_delay: float = INDEXING_SUBMIT_DELAY,
        clock: Callable[[], float] = time,
    ) -> None:
        self._owns_client = http_client is None
        self.http = http_client or AsyncClient(timeout=settings.INDEXING_TIMEOUT)
        self.service_account_email = service_account_email or settings.GOOGLE_SERVICE_ACCOUNT_EMAIL
        if private_key is None and settings.GOOGLE_PRIVATE_KEY is not None:
            private_key = settings.GOOGLE_PRIVATE_KEY.get_secret_value()
        self._private_key = private_key
        self.token_url = token_url or settings.GOOGLE_TOKEN_URL
        self.indexing_url = indexing_url or settings.GOOGLE_INDEXING_URL
        self.submit_delay = submit_delay
        self._clock = clock
        self._token: str | None = None
        self._token_expires_at = 0.0

    @property
    def configured(self) -> bool:
        return bool(self.service_account_email and self._private_key)

    def build_assertion(self) -> str:
        """Sign the service-account JWT presented at the token endpoint."""
        now = int(self._clock())
        claims = {
            "iss": self.service_account_email,
            "sub": self.service_account_email,
            "aud": self.token_url,
            "scope": INDEXING_SCOPE,
            "iat": now,
            "exp": now + ASSERTION_LIFETIME,
        }
        try:
            return jwt.encode(claims, self._private_key, algorithm="RS256")
        except JWTError as e:
            mssg = f"Could not sign service account assertion: {e}"
            raise IndexingServiceError(mssg) from e

    @with_retry(max_retries=3)
    async def _exchange(self, assertion: str) -> Response:
        return await self.http.post(
            self.token_url,
            data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
        )

    async def access_token(self) -> str:
        """
        Return a bearer token, reusing the cached one until shortly before expiry.

        Raises:
            IndexingServiceError: The token endpoint refused the assertion,
                could not be reached or answered without a usable token.
        """
        if self._token and self._clock() < self._token_expires_at - TOKEN_REFRESH_MARGIN:
            return self._token

        try:
            response = await self._exchange(self.build_assertion())
        except HTTPError as e:
            mssg = f"Failed to reach token endpoint: {e}"
            raise IndexingServiceError(mssg) from e

        if not response.is_success:
            mssg = f"Failed to get access token: {response.text}"
            raise IndexingServiceError(mssg, code=response.status_code)

        try:
            data = response.json()
            token = data["access_token"]
            expires_in = float(data.get("expires_in", ASSERTION_LIFETIME))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            mssg = f"Malformed token response: {response.text[:200]}"
            raise IndexingServiceError(mssg, code=response.status_code) from e

        self._token = token
        self._token_expires_at = self._clock() + expires_in
        return self._token

    async def submit_url(
        self,
        url: str,
        notification_type: NotificationType = NotificationType.URL_UPDATED,
    ) -> IndexingResult:
        """
        Publish one URL notification.

        Args:
            url: Absolute http(s) URL.
            notification_type: ``URL_UPDATED`` or ``URL_DELETED``.

        Returns:
            IndexingResult: ``submitted``, ``rate_limited`` or ``skipped``.

        Raises:
            InputValidationError: The URL is not absolute http(s).
            IndexingServiceError: The API answered with any other error.
        """
        if not self.configured:
            logger.warning("indexing not configured, skipping submission", url=url)
            return IndexingResult(
                url=url,
                type=notification_type,
                status=SubmissionStatus.SKIPPED,
                detail="Indexing credentials are not configured",
            )

        validate_url(url)
        token = await self.access_token()

        try:
            response = await self.http.post(
                self.indexing_url,
                json={"url": url, "type": notification_type.value},
                headers={"Authorization": f"Bearer {token}"},
            )
        except HTTPError as e:
            mssg = f"Indexing API unreachable: {e}"
            raise IndexingServiceError(mssg) from e

        if response.is_success:
            logger.info("url submitted for indexing", url=url, type=notification_type.value)
            return IndexingResult(url=url, type=notification_type, status=SubmissionStatus.SUBMITTED)

        error = _error_envelope(response)
        code = error.get("code", response.status_code)
        if code == HTTP_429_TOO_MANY_REQUESTS or response.status_code == HTTP_429_TOO_MANY_REQUESTS:
            logger.warning("indexing rate limit reached", url=url)
            return IndexingResult(
                url=url,
                type=notification_type,
                status=SubmissionStatus.RATE_LIMITED,
                detail="Rate limit exceeded; the URL will be indexed on the next crawl",
            )

        message = error.get("message") or "Unknown error"
        logger.error("indexing api error", url=url, code=code, status=error.get("status"))
        raise IndexingServiceError(
            f"Indexing API error: {message}",
            code=code,
            status=error.get("status"),
        )

    async def submit_urls(
        self,
        urls: Iterable[str],
        notification_type: NotificationType = NotificationType.URL_UPDATED,
    ) -> int:
        """
        Submit URLs one at a time with a short pause between calls.

        Failures of individual URLs are logged and skipped.

        Returns:
            int: Number of URLs actually submitted.
        """
        submitted = 0
        for url in urls:
            try:
                result = await self.submit_url(url, notification_type)
            except (IndexingServiceError, InputValidationError) as e:
                logger.warning("indexing submission failed", url=url, error=str(e))
            else:
                submitted += result.ok
            await sleep(self.submit_delay)
        return submitted

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()


def _error_envelope(response: Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    error = body.get("error") if isinstance(body, dict) else None
    return error if isinstance(error, dict) else {}
