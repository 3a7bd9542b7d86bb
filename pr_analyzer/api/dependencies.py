"""
FastAPI dependency providers.

Settings are built once per process and handed to the services here, so
tests can substitute any of them through ``app.dependency_overrides``.
"""

from fastapi import Depends, HTTPException, status
from pydantic import ValidationError

from pr_analyzer.config import Settings, get_settings
from pr_analyzer.logging_config import get_logger
from pr_analyzer.services.ai_engine import AnalysisEngine, get_ai_engine
from pr_analyzer.services.github_client import GitHubClient

logger = get_logger(__name__)


def load_settings() -> Settings:
    """Get application settings, failing the request if they are invalid."""
    try:
        return get_settings()
    except ValidationError as e:
        logger.error("Configuration loading failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


def get_github_client(settings: Settings = Depends(load_settings)) -> GitHubClient:
    return GitHubClient(settings)


def get_analysis_engine(settings: Settings = Depends(load_settings)) -> AnalysisEngine:
    return get_ai_engine(settings)
