"""
Configuration Management Module

This module handles all application configuration using Pydantic Settings.
Configuration is loaded from environment variables with strong typing and validation.

Design Decisions:
- Build settings once per process and inject them where needed
- Secrets default to an empty string when unset
- Empty environment values fall back to the field default
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive values are loaded from environment variables only,
    never hardcoded or logged.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )

    # =========================================================================
    # Service Authentication
    # =========================================================================
    api_key: str = Field(
        default="",
        description="Shared secret expected in the X-API-Key header"
    )

    # =========================================================================
    # GitHub Configuration
    # =========================================================================
    github_token: str = Field(
        default="",
        description="Bearer token for the GitHub API"
    )

    github_api_base: str = Field(
        default="https://api.github.com",
        description="GitHub API base URL"
    )

    github_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for GitHub API requests"
    )

    # =========================================================================
    # OpenAI Configuration
    # =========================================================================
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key"
    )

    openai_model: str = Field(
        default="gpt-4",
        description="OpenAI model used for code review"
    )

    openai_base_url: Optional[str] = Field(
        default=None,
        description="Override for the OpenAI API base URL"
    )

    openai_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Timeout in seconds for OpenAI requests"
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server"
    )

    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port to bind the server"
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    log_json_format: bool = Field(
        default=True,
        description="Enable JSON logging format"
    )

    log_requests: bool = Field(
        default=False,
        description="Enable request/response logging"
    )

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("github_api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================
    @property
    def missing_secrets(self) -> list:
        """Names of required secrets that are not configured."""
        required = {
            "API_KEY": self.api_key,
            "GITHUB_TOKEN": self.github_token,
            "OPENAI_API_KEY": self.openai_api_key,
        }
        return [name for name, value in required.items() if not value]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once,
    which is important for performance and consistency.

    Returns:
        Settings instance
    """
    return Settings()
