"""FastAPI application initialization and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .core.config import settings
from .core.database import close_db, engine, init_db
from .core.dependencies import DatabaseSession
from .core.exceptions import (
    CatalogUnavailableError,
    ProblemDetailsException,
    generic_exception_handler,
    problem_details_handler,
    request_validation_handler,
)
from .core.middleware import setup_middleware
from .core.observability import (
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_metrics,
    setup_structured_logging,
    setup_tracing,
)
from .routers import metrics, tour

# Configure structured logging; stdlib records are rendered through structlog
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    handlers=[setup_structured_logging()],
)

logger = logging.getLogger(__name__)

SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Sets up tracing and the database on startup and releases connections on shutdown.
    """
    logger.info("Starting tour catalog API")
    logger.info(f"Environment: {settings.environment}")

    try:
        setup_tracing()
        setup_metrics()
        instrument_sqlalchemy(engine)
        logger.info("Observability setup completed")

        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down tour catalog API")
    await close_db()
    logger.info("Database connections closed")


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as RFC 9457 Problem Details."""
    app.add_exception_handler(ProblemDetailsException, problem_details_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Tour Catalog API",
        description="Browse, filter and search published tours",
        version=SERVICE_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS", "HEAD"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "traceparent", "tracestate"],
    )

    setup_middleware(app, enable_logging=True)

    instrument_fastapi(app)

    register_exception_handlers(app)

    @app.get(
        "/health",
        status_code=status.HTTP_200_OK,
        tags=["Health"],
        summary="Health Check",
        description="Check if the service is responsive",
        response_model=dict,
    )
    async def health_check():
        """Liveness probe; does not touch the database."""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "version": SERVICE_VERSION,
            "environment": settings.environment,
        }

    @app.get(
        "/ready",
        status_code=status.HTTP_200_OK,
        tags=["Health"],
        summary="Readiness Check",
        description="Check that the tour catalog database answers queries",
        response_model=dict,
    )
    async def readiness_check(db: AsyncSession = DatabaseSession):
        """Readiness probe; runs a trivial query against the catalog database."""
        try:
            await db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Readiness check failed", extra={"error": str(e)})
            raise CatalogUnavailableError(detail="The tour catalog database is not reachable") from e

        return {
            "status": "ready",
            "service": settings.service_name,
            "checks": {"database": "ok"},
        }

    @app.get(
        "/info",
        status_code=status.HTTP_200_OK,
        tags=["Info"],
        summary="Service Information",
        response_model=dict,
    )
    async def service_info():
        """Service information endpoint."""
        return {
            "service": settings.service_name,
            "version": SERVICE_VERSION,
            "description": "Public tour discovery: paginated listing, featured tours and search suggestions",
            "environment": settings.environment,
            "endpoints": {
                "tours": "/tours",
                "featured": "/tours/featured",
                "suggestions": "/tours/suggestions",
                "health": "/health",
                "readiness": "/ready",
                "metrics": "/metrics",
                "docs": "/docs" if settings.debug else None,
            },
        }

    app.include_router(tour.router)
    app.include_router(metrics.router)

    logger.info("FastAPI application created and configured")

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tour_catalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
