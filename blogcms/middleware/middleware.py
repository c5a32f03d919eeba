"""
Middleware components for the BlogCMS application.

Security headers, request logging with a request id, CORS, and the lifespan
handler that builds the application context and tears it down.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.logging import RichHandler
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from blogcms.configs import file_logger, settings
from blogcms.context import AppContext
from blogcms.monitoring import bind_request_id, clear_context
from blogcms.utils.helpers import get_summary, host

REQUEST_ID_HEADER = "X-Request-ID"

# --- Logging Configuration ---
logger = file_logger(getLogger("rich"))
if not any(isinstance(h, RichHandler) for h in logger.handlers):
    logger.addHandler(RichHandler(rich_tracebacks=True, show_path=False))
logger.setLevel(settings.LOG_LEVEL.upper())
logger.propagate = False

install()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Build the application context on startup and release it on shutdown.

    A context placed on ``app.state`` before startup (tests) is used as is.
    """
    logger.info(f"Starting {app.title}...")

    context: AppContext | None = getattr(app.state, "context", None)
    if context is None:
        context = AppContext.create()
        app.state.context = context

    try:
        await context.startup()
        logger.info(f"Cache backend: {context.cache.backend}")
        logger.info(f"Indexing configured: {context.indexing.configured}")
        logger.info("Services initialized successfully")
    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")
    try:
        await context.shutdown()
        logger.info("Services cleaned up successfully")
    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:3000",  # Next.js development
        "http://127.0.0.1:3000",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing, tagging every log line with a request id."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_request_id(request_id)

        start_time = perf_counter()
        route_info = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}, from ip: {host(request)}")

        try:
            response = await call_next(request)
        finally:
            clear_context()

        duration = perf_counter() - start_time
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {duration:.2f}s",
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
