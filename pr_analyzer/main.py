"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.
It sets up routes, exception handlers and operational endpoints.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from pr_analyzer import __version__
from pr_analyzer.api import router as analysis_router
from pr_analyzer.config import get_settings
from pr_analyzer.logging_config import get_logger, setup_logging
from pr_analyzer.services.ai_engine import close_ai_engine

# Initialize logging first
setup_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events for the application.
    """
    settings = get_settings()
    logger.info(
        "Starting PR Analyzer",
        host=settings.host,
        port=settings.port
    )

    missing = settings.missing_secrets
    if missing:
        logger.warning("Configuration incomplete", missing=missing)
    else:
        logger.info("Configuration validated successfully")

    yield

    await close_ai_engine()
    logger.info("Shutting down PR Analyzer")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="PR Analyzer",
        description="Relay that reviews GitHub pull request diffs with an LLM",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.include_router(analysis_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__
            }
        )

    @app.get("/")
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": "PR Analyzer",
            "version": __version__,
            "status": "running",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        Returns basic health status for load balancers and monitors.
        """
        return {
            "status": "healthy",
            "service": "pr-analyzer",
            "version": __version__
        }

    @app.get("/ready")
    async def readiness_check():
        """
        Readiness check endpoint.

        Reports not ready while any required secret is unset.
        """
        missing = get_settings().missing_secrets
        if missing:
            logger.error("Readiness check failed", missing=missing)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Not ready: missing {', '.join(missing)}"
            )

        return {
            "status": "ready",
            "service": "pr-analyzer"
        }

    return app


# Create the application instance
app = create_app()
