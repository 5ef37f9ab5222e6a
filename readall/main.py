"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from readall import __version__
from readall.api.routes import documents, health
from readall.config import get_settings
from readall.logging_config import setup_logging
from readall.services.storage import DocumentStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    settings = get_settings()
    setup_logging(settings)
    await DocumentStorage(settings.documents_path).ensure_directory()
    logger.info("%s started, documents in %s", settings.app_name, settings.documents_path)
    yield
    logger.info("%s shutting down", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="RSVP Speed-Reading Application",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_id = str(uuid.uuid4())[:8]
        logger.exception("Unhandled exception [%s]: %s", error_id, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "error_id": error_id},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(documents.router, prefix="/api/documents", tags=["documents"])

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "service": "Readall API",
            "version": __version__,
            "docs": "/docs" if settings.debug else None,
        }

    return app


app = create_app()
