"""FastAPI application factory and configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from filmlog import __version__
from filmlog.api.deps import DBSession
from filmlog.api.v1.router import api_router
from filmlog.clients.tmdb import TMDBClient
from filmlog.config import Settings, get_settings
from filmlog.core import background
from filmlog.core.exceptions import register_exception_handlers
from filmlog.core.logging import get_logger, setup_logging
from filmlog.core.middleware import RequestLoggingMiddleware
from filmlog.database import engine

logger = get_logger("app")


def build_tmdb_client(settings: Settings) -> TMDBClient:
    return TMDBClient(
        settings.tmdb_api_key,
        base_url=settings.tmdb_base_url,
        language=settings.tmdb_language,
        timeout=settings.tmdb_timeout,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the shared TMDB client on startup; on shutdown waits briefly for
    detached tasks, then closes the client and the engine.
    """
    settings = get_settings()
    logger.info(
        "Starting %s v%s",
        settings.app_name,
        __version__,
        extra={"environment": settings.environment, "debug": settings.debug},
    )
    if not settings.tmdb_api_key:
        logger.warning("TMDB_API_KEY is not set; movie lookups will fail")

    app.state.tmdb_client = build_tmdb_client(settings)
    try:
        yield
    finally:
        logger.info("Shutting down...")
        await background.drain(timeout=5.0)
        await app.state.tmdb_client.aclose()
        await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_file)

    app = FastAPI(
        title=settings.app_name,
        description="Log, rate and review films, keep ranked lists and a watchlist.",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [settings.frontend_url],
        allow_credentials=not settings.debug,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "healthy"}

    @app.get("/ready", tags=["System"], response_model=None)
    async def readiness_check(session: DBSession) -> dict[str, str] | JSONResponse:
        """Readiness probe: the database must answer."""
        try:
            await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            logger.exception("Readiness check failed")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not ready", "database": "unreachable"},
            )
        return {"status": "ready", "database": "connected"}

    return app


# Application instance
app = create_app()
