"""
AI Analysis Engine Module

This module sends pull request diffs to an LLM provider for review.
Each supported provider is a backend behind a common interface, and the
engine dispatches on the request's model type.

Design Decisions:
- Closed set of backends keyed by ModelType
- Unknown tags fail with an error naming the tag
- No retries and no local size cap on the diff
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from pr_analyzer.config import Settings
from pr_analyzer.logging_config import get_logger
from pr_analyzer.models import ModelType

logger = get_logger(__name__)


class AnalysisError(Exception):
    """Custom exception for AI analysis errors."""
    pass


class UnsupportedModelError(AnalysisError):
    """Raised when the requested model type has no backend."""
    pass


class AnalyzerNotImplementedError(AnalysisError):
    """Raised by backends that are recognized but not built yet."""
    pass


class ReviewBackend(ABC):
    """A provider capable of reviewing a diff."""

    model_type: ModelType

    @abstractmethod
    async def analyze(self, diff: str) -> str:
        """
        Review a diff.

        Args:
            diff: Unified diff text

        Returns:
            The model's free-text analysis

        Raises:
            AnalysisError: If the provider call fails
        """

    async def aclose(self) -> None:
        """Release any client resources held by the backend."""


class OpenAIBackend(ReviewBackend):
    """
    Code review via the OpenAI chat completions API.

    Usage:
        backend = OpenAIBackend(settings)
        analysis = await backend.analyze(diff)
    """

    model_type = ModelType.OPENAI

    PROMPT_PREFIX = (
        "Please analyze the following code changes and provide a detailed review:\n\n"
    )

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.settings = settings
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        """Create the OpenAI client on first use."""
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    api_key=self.settings.openai_api_key or None,
                    base_url=self.settings.openai_base_url,
                    timeout=self.settings.openai_timeout,
                    max_retries=0
                )
            except OpenAIError as e:
                raise AnalysisError(f"OpenAI client unavailable: {e}") from e
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    def build_messages(self, diff: str) -> list:
        """Build the single-turn chat request for a diff."""
        return [{"role": "user", "content": self.PROMPT_PREFIX + diff}]

    async def analyze(self, diff: str) -> str:
        client = self._get_client()

        logger.info(
            "Sending code review request to OpenAI",
            model=self.settings.openai_model,
            diff_length=len(diff)
        )

        try:
            response = await client.chat.completions.create(
                model=self.settings.openai_model,
                messages=self.build_messages(diff)
            )
        except OpenAIError as e:
            logger.error(
                "OpenAI request failed",
                error=str(e),
                error_type=type(e).__name__
            )
            raise AnalysisError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise AnalysisError("OpenAI returned no completion choices")

        content = response.choices[0].message.content
        if content is None:
            raise AnalysisError("Empty response from OpenAI")

        logger.info(
            "OpenAI analysis completed",
            model=self.settings.openai_model,
            response_length=len(content)
        )

        return content


class ClaudeBackend(ReviewBackend):
    """
    Placeholder for Anthropic Claude.

    The tag is accepted but every call fails with a "not implemented" error.
    """

    model_type = ModelType.CLAUDE

    async def analyze(self, diff: str) -> str:
        raise AnalyzerNotImplementedError("Claude integration not implemented yet")


class AnalysisEngine:
    """
    Dispatches a diff to the backend selected by a model type tag.

    Usage:
        engine = AnalysisEngine(settings)
        analysis = await engine.analyze(diff, "openai")
    """

    def __init__(
        self,
        settings: Settings,
        backends: Optional[Dict[ModelType, ReviewBackend]] = None
    ):
        self.settings = settings
        self.backends: Dict[ModelType, ReviewBackend] = {
            ModelType.OPENAI: OpenAIBackend(settings),
            ModelType.CLAUDE: ClaudeBackend(),
        }
        if backends:
            self.backends.update(backends)

    def resolve(self, model_type: str) -> ReviewBackend:
        """
        Get the backend for a model type tag.

        Raises:
            UnsupportedModelError: If the tag names no known backend
        """
        try:
            return self.backends[ModelType(model_type)]
        except (ValueError, KeyError):
            raise UnsupportedModelError(f"unsupported model type: {model_type}") from None

    async def analyze(self, diff: str, model_type: str) -> str:
        """
        Analyze a diff with the selected backend.

        Args:
            diff: Unified diff text
            model_type: Provider tag

        Returns:
            The model's analysis

        Raises:
            AnalysisError: If the tag is unsupported or the backend fails
        """
        backend = self.resolve(model_type)

        logger.info("Dispatching analysis", model_type=backend.model_type.value)

        try:
            return await backend.analyze(diff)
        except AnalysisError as e:
            logger.error(
                "AI analysis failed",
                model_type=backend.model_type.value,
                error=str(e),
                error_type=type(e).__name__
            )
            raise

    async def aclose(self) -> None:
        """Close every backend's client."""
        for backend in self.backends.values():
            await backend.aclose()


# Singleton instance
_engine_instance: Optional[AnalysisEngine] = None


def get_ai_engine(settings: Settings) -> AnalysisEngine:
    """Get the process-wide AnalysisEngine, so provider clients are reused."""
    global _engine_instance
    if _engine_instance is None or _engine_instance.settings is not settings:
        _engine_instance = AnalysisEngine(settings)
    return _engine_instance


async def close_ai_engine() -> None:
    """Close the shared engine's clients and drop it."""
    global _engine_instance
    if _engine_instance is not None:
        await _engine_instance.aclose()
        _engine_instance = None
