"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

from types import SimpleNamespace
from typing import Generator, List, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pr_analyzer.api.dependencies import (
    get_analysis_engine,
    get_github_client,
    load_settings,
)
from pr_analyzer.config import Settings, get_settings
from pr_analyzer.main import create_app
from pr_analyzer.models import ModelType
from pr_analyzer.services.ai_engine import AnalysisEngine, OpenAIBackend
from pr_analyzer.services.github_client import GitHubClient

API_KEY = "test-api-key"

SETTINGS_ENV_VARS = (
    "API_KEY", "GITHUB_TOKEN", "OPENAI_API_KEY", "PORT", "HOST",
    "LOG_LEVEL", "GITHUB_API_BASE", "OPENAI_MODEL",
)


class GitHubStub:
    """Records requests and answers them with a fixed response."""

    def __init__(self, status_code: int = 200, body: str = ""):
        self.status_code = status_code
        self.body = body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered as separate chunks, optionally failing at the end."""

    def __init__(self, chunks: List[bytes], error: Optional[Exception] = None):
        self.chunks = chunks
        self.error = error

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error


def completion(*contents: Optional[str]) -> SimpleNamespace:
    """Build a chat completion shaped like the OpenAI SDK response."""
    return SimpleNamespace(
        choices=[
            SimpleNamespace(index=i, message=SimpleNamespace(role="assistant", content=c))
            for i, c in enumerate(contents)
        ]
    )


def make_openai_client(response: SimpleNamespace = None) -> MagicMock:
    """Create a stand-in for AsyncOpenAI returning a fixed completion."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=response if response is not None else completion("A")
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def settings() -> Settings:
    """Settings with every secret configured."""
    return Settings(
        _env_file=None,
        api_key=API_KEY,
        github_token="ghp_test_token",
        openai_api_key="sk-test-key",
    )


@pytest.fixture
def github_stub() -> GitHubStub:
    """GitHub API stub returning a small diff."""
    return GitHubStub(body="T")


@pytest.fixture
def openai_client() -> MagicMock:
    """OpenAI client stub returning the completion "A"."""
    return make_openai_client()


@pytest.fixture
def app(settings: Settings, github_stub: GitHubStub, openai_client: MagicMock) -> Generator[FastAPI, None, None]:
    """Application wired to the GitHub and OpenAI stubs."""
    application = create_app()
    application.dependency_overrides[load_settings] = lambda: settings
    application.dependency_overrides[get_github_client] = lambda: GitHubClient(
        settings, transport=httpx.MockTransport(github_stub)
    )
    application.dependency_overrides[get_analysis_engine] = lambda: AnalysisEngine(
        settings,
        backends={ModelType.OPENAI: OpenAIBackend(settings, client=openai_client)}
    )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create a test client for synchronous tests."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch, None, None]:
    """Remove settings variables from the environment and reset the settings cache."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def sample_diff() -> str:
    """Sample unified diff for a pull request."""
    return '''diff --git a/app.py b/app.py
index 83db48f..bf269f4 100644
--- a/app.py
+++ b/app.py
@@ -1,5 +1,7 @@
 import os
+import sys

 def main():
-    print("Hello")
+    name = input("Enter name: ")
+    print(f"Hello, {name}! Café ✓")
     return 0
'''
