"""BlogCMS Backend - blog content management API with tag-versioned caching."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded

from blogcms.configs import settings
from blogcms.context import AppContext
from blogcms.errors import (
    CacheExceptionError,
    DatabaseError,
    ExternalServiceError,
    InputValidationError,
    UserAuthenticationError,
    auth_exception_handler,
    cache_exception_handler,
    database_exception_handler,
    external_service_exception_handler,
    input_validation_exception_handler,
    validation_exception_handler,
)
from blogcms.managers.rate_limiter import limiter, rate_limit_exceeded_handler
from blogcms.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blogcms.monitoring import configure_logging
from blogcms.routes import (
    auth_router,
    blog_router,
    categories_router,
    dashboard_router,
    indexing_router,
    posts_router,
    seo_router,
    users_router,
)
from blogcms.schemas import HealthCheckResponse
from blogcms.utils.timezone import to_pkt_iso

VERSION = "1.0.0"

routes = [
    seo_router,
    blog_router,
    auth_router,
    posts_router,
    categories_router,
    users_router,
    dashboard_router,
    indexing_router,
]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (CacheExceptionError, cache_exception_handler),
    (DatabaseError, database_exception_handler),
    (ExternalServiceError, external_service_exception_handler),
    (InputValidationError, input_validation_exception_handler),
    (UserAuthenticationError, auth_exception_handler),
    (RequestValidationError, validation_exception_handler),
]


def create_app(context: AppContext | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        context: Pre-built collaborators; the lifespan creates the default
            context when omitted.
    """
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Blog CMS API: posts, categories, users, sitemaps and search indexing",
        version=VERSION,
        lifespan=lifespan,
        swagger_ui_parameters={"docExpansion": "none", "operationsSorter": "method"},
    )
    if context is not None:
        app.state.context = context

    configure_cors(app)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    _ = [app.include_router(router) for router in routes]
    _ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

    app.state.limiter = limiter
    app.add_api_route(
        "/health",
        health_check,
        methods=["GET"],
        tags=["🩺 Health"],
        summary="Health check endpoint",
        response_model=HealthCheckResponse,
        response_class=ORJSONResponse,
        operation_id="health_check",
    )
    return app


async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    ORJSONResponse
        Database readiness, cache health and indexing configuration.
    """
    context: AppContext = request.app.state.context
    cache_health = await context.cache.health_check()
    database = context.database.connections.state.value

    response = HealthCheckResponse(
        version=request.app.version,
        status="ok" if database == "ready" and cache_health["status"] == "healthy" else "degraded",
        timestamp=to_pkt_iso(),
        database=database,
        indexing="configured" if context.indexing.configured else "not_configured",
        cache=cache_health,
    )
    return ORJSONResponse(response.model_dump())


app = create_app()
