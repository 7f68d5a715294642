"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medexplain import __version__
from medexplain.api import (
    admin_router,
    evidence_router,
    me_router,
    query_router,
    saved_answers_router,
)
from medexplain.core.config import settings
from medexplain.core.errors import register_exception_handlers
from medexplain.core.logging import get_logger, request_context_middleware, setup_logging
from medexplain.db import dispose_engine

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    setup_logging()
    logger.info("MedExplain API starting", environment=settings.environment)
    yield
    # Shutdown
    await dispose_engine()


def create_app() -> FastAPI:
    """Application factory for creating the FastAPI instance."""
    app = FastAPI(
        title="MedExplain API",
        description=(
            "Plain-language pharmacogenomics lookups for patients and clinicians.\n\n"
            "## Features\n"
            "- **Query**: Ask how a gene affects a drug, within a monthly quota\n"
            "- **Saved Answers**: Keep snapshots of answers\n"
            "- **Evidence**: Browse guidelines and their citations\n"
            "- **Admin**: Manage sources, trigger ingestion, read the audit log\n"
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_context_middleware)

    register_exception_handlers(app)

    # Register routers
    app.include_router(
        query_router,
        prefix="/api/v1",
        tags=["Query"],
    )
    app.include_router(
        saved_answers_router,
        prefix="/api/v1/saved-answers",
        tags=["Saved Answers"],
    )
    app.include_router(
        evidence_router,
        prefix="/api/v1/evidence",
        tags=["Evidence"],
    )
    app.include_router(
        me_router,
        prefix="/api/v1/me",
        tags=["Me"],
    )
    app.include_router(
        admin_router,
        prefix="/api/v1/admin",
        tags=["Admin"],
    )

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {"status": "healthy", "version": __version__}

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint with API information."""
        return {
            "service": "MedExplain API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# Create the app instance
app = create_app()
