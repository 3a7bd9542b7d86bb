"""
Data Models Module

This module defines the Pydantic models exchanged over the HTTP API.

Design Decisions:
- Validate path components before they are placed in a GitHub URL
- Keep model_type a free string so unknown tags reach the dispatcher
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class ModelType(str, Enum):
    """LLM backends that can perform an analysis."""
    OPENAI = "openai"
    CLAUDE = "claude"


# =============================================================================
# API Models
# =============================================================================

class AnalysisRequest(BaseModel):
    """
    Request to analyze a pull request.

    Attributes:
        owner: Repository owner (user or organization login)
        repo: Repository name
        pr_number: Pull request number
        model_type: Provider tag selecting the LLM backend
    """
    owner: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    repo: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    pr_number: int = Field(ge=1, strict=True)
    model_type: str

    @field_validator("owner", "repo")
    @classmethod
    def reject_dot_segments(cls, v: str) -> str:
        if v in {".", ".."}:
            raise ValueError(f"Invalid path component: {v}")
        return v

    @property
    def full_repo_name(self) -> str:
        """Get the full repository name (owner/repo)."""
        return f"{self.owner}/{self.repo}"


class AnalysisResponse(BaseModel):
    """Result of a pull request analysis."""
    analysis: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    model_used: str
