"""
Services Package

This package contains the outbound service modules:
- github_client: GitHub pull request diff fetching
- ai_engine: LLM analysis dispatch
"""

from pr_analyzer.services.ai_engine import (
    AnalysisEngine,
    AnalysisError,
    AnalyzerNotImplementedError,
    UnsupportedModelError,
)
from pr_analyzer.services.github_client import GitHubClient, GitHubFetchError


__all__ = [
    "AnalysisEngine",
    "AnalysisError",
    "AnalyzerNotImplementedError",
    "UnsupportedModelError",
    "GitHubClient",
    "GitHubFetchError",
]
