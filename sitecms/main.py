"""Main FastAPI application module."""

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette import status

from sitecms.api.v1.router import router as v1_router
from sitecms.core.config import Settings, settings
from sitecms.core.events import lifespan
from sitecms.core.logging import configure_logging
from sitecms.middleware.correlation import CorrelationMiddleware
from sitecms.middleware.errors import ErrorHandlingMiddleware
from sitecms.middleware.metrics import MetricsMiddleware
from sitecms.middleware.security import SecurityHeadersMiddleware


def add_middleware(app: FastAPI, config: Settings) -> None:
    """Install the middleware stack.

    Starlette wraps each added middleware around the previous ones, so the
    order below runs from innermost to outermost:
    error handling, metrics, correlation, security headers, CORS.
    """
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        SecurityHeadersMiddleware,
        no_cache_prefixes=(
            f"{config.api_prefix}/sync",
            f"{config.api_prefix}/admin",
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application; services are created by the lifespan."""
    app = FastAPI(
        title=config.app_name,
        description="Content consistency and media integrity service",
        version=config.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        default_response_class=JSONResponse,
        lifespan=lifespan,
    )
    add_middleware(app, config)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose Prometheus metrics."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", include_in_schema=False)
    async def root_redirect() -> Response:
        """Redirect root path to docs."""
        return RedirectResponse(
            url="/docs", status_code=status.HTTP_307_TEMPORARY_REDIRECT
        )

    app.include_router(v1_router, prefix=config.api_prefix)
    return app


configure_logging(
    testing=settings.TESTING, level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS
)
app = create_app()
