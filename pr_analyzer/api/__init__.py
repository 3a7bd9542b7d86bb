"""
API Package

This package contains the HTTP API components:
- handler: FastAPI route handlers
- security: API key verification
- dependencies: settings and service providers
"""

from pr_analyzer.api.handler import router

__all__ = ["router"]
