"""FastAPI application factory and main entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import __version__
from api.config import Settings, get_settings
from api.exceptions import ReadinessError
from api.logging import setup_logging
from readiness.scoring.catalog import SIGNAL_CATALOG

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    settings: Settings = app.state.settings
    logger.info(
        "Starting Gap Score API",
        env=settings.env,
        version=__version__,
        catalog_version=SIGNAL_CATALOG.version,
        compliance_model=settings.compliance_model,
        include_carbon=settings.include_carbon,
    )

    yield

    logger.info("Shutting down Gap Score API")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Gap Score API",
        description="Indicative public-sector bid readiness scoring",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware (order matters - first added = last executed)
    # CORS must be last (first to process)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["POST"],
        allow_headers=["content-type", "x-key"],
    )

    from api.middleware import LoggingMiddleware, RequestIDMiddleware

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    from api.routers import gap_score, health

    app.include_router(health.router, prefix="/api")
    app.include_router(gap_score.router, prefix="/api")

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(ReadinessError)
    async def readiness_error_handler(request: Request, exc: ReadinessError) -> ORJSONResponse:
        """Handle application exceptions."""
        logger.warning(
            "Application error",
            error_code=exc.code,
            message=exc.message,
            path=request.url.path,
        )
        return ORJSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Wrap routing errors (404, 405) in the standard envelope."""
        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": "method_not_allowed"
                    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
                    else "http_error",
                    "message": str(exc.detail),
                }
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        """Handle unhandled exceptions without leaking their details."""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "server_error",
                    "message": "An unexpected error occurred",
                }
            },
        )


app = create_app()
