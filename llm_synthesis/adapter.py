"""LLM adapters for narrative generation.

Provides a base interface, an Anthropic Messages API adapter over HTTP,
an OpenAI-compatible adapter, and a deterministic mock for testing.
Each adapter makes exactly one request per call.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests
from openai import OpenAI, OpenAIError

from app.config import LLMSettings
from llm_synthesis.prompt_builder import prompt_kind

logger = logging.getLogger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"


class LLMRequestError(RuntimeError):
    """Raised when the narrative service cannot be reached or rejects a request."""


class BaseLLMAdapter(ABC):
    """Abstract base for all LLM adapters."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a prompt to the LLM and return the raw response text.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Raw string response from the model (expected to be JSON).
        """


class AnthropicLLMAdapter(BaseLLMAdapter):
    """Adapter for the Anthropic Messages API using plain HTTP."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 2000,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
        anthropic_version: str = "2023-06-01",
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = base_url or ANTHROPIC_MESSAGES_URL
        self._model = model
        self._max_tokens = max_tokens
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._anthropic_version = anthropic_version
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """Call the Messages API once and return the first text block.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Text content of the first response block.

        Raises:
            LLMRequestError: On network failure, non-2xx status, or an
                unexpected response envelope.
        """
        headers = {
            "Content-Type": "application/json",
            "anthropic-version": self._anthropic_version,
        }
        if self._api_key:
            headers["x-api-key"] = self._api_key

        body = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        try:
            response = self._session.post(
                self._url,
                headers=headers,
                json=body,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise LLMRequestError(f"API request failed: {exc}") from exc

        if not response.ok:
            raise LLMRequestError(
                f"API request failed: {response.status_code} {response.reason}"
            )

        try:
            envelope = response.json()
            return envelope["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise LLMRequestError("API response did not contain message text.") from exc


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for OpenAI-compatible chat completion APIs.

    Configured for deterministic, non-streaming output with
    low temperature suitable for structured JSON generation.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        max_tokens: int = 2000,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialise the OpenAI adapter.

        Args:
            model: Model identifier.
            max_tokens: Maximum tokens in the completion.
            api_key: API key for the endpoint.
            base_url: Optional base URL for OpenAI-compatible endpoints.
            timeout_seconds: Per-request timeout.
        """
        client_kwargs: dict = {"api_key": api_key, "timeout": timeout_seconds, "max_retries": 0}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = model
        self._max_tokens = max_tokens

    def generate(self, prompt: str) -> str:
        """Call the chat completion API.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Raw string content from the model response.
        """
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
                max_tokens=self._max_tokens,
                stream=False,
            )
        except OpenAIError as exc:
            raise LLMRequestError(f"API request failed: {exc}") from exc
        return response.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Fixed mock responses used for local testing.
# ---------------------------------------------------------------------------
_MOCK_ANALYSIS = {
    "overallPerformance": {
        "summary": "Search outperforms social on CTR at a lower CPM.",
        "topChannels": ["Google Ads", "Facebook"],
        "keyMetrics": {"avgCTR": 2.7, "avgCPM": 13.9, "totalReach": 83000, "avgFrequency": 3.1},
    },
    "channelAnalysis": [
        {
            "channel": "Google Ads",
            "performance": "excellent",
            "metrics": {"ctr": 3.1, "cpm": 12.3, "reach": 38000},
            "insights": "Highest CTR at the lowest CPM.",
        },
        {
            "channel": "Facebook",
            "performance": "good",
            "metrics": {"ctr": 2.3, "cpm": 15.5, "reach": 45000},
            "insights": "Broad reach with moderate engagement.",
        },
    ],
    "demographicInsights": {
        "bestPerformingDemo": "25-34",
        "insights": "Mock demographic insight for testing purposes.",
    },
    "optimizationOpportunities": [
        "Shift budget toward search",
        "Test new social creatives",
    ],
}

_MOCK_RECOMMENDATIONS = {
    "budgetReallocation": {
        "recommendations": [
            {
                "channel": "Google Ads",
                "currentBudget": 10000,
                "recommendedBudget": 12000,
                "reasoning": "Strongest efficiency in the test data.",
            }
        ]
    },
    "channelRecommendations": [
        {
            "channel": "Facebook",
            "action": "test",
            "reasoning": "Engagement trails search.",
            "expectedImprovement": "+0.5pt CTR",
        }
    ],
    "targetingRecommendations": {
        "demographics": ["25-34"],
        "geography": ["US"],
        "reasoning": "Mock targeting rationale.",
    },
    "creativeTesting": ["Short-form video variant"],
    "nextSteps": [{"action": "Rebalance budget", "priority": "high", "timeline": "2 weeks"}],
}


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns fixed valid JSON responses.

    Used for local testing and CI pipelines where no LLM API
    is available.
    """

    def generate(self, prompt: str) -> str:
        """Return the fixture matching the prompt kind.

        Args:
            prompt: Inspected only to tell analysis from recommendations.

        Returns:
            A valid JSON string for the requested schema.
        """
        if prompt_kind(prompt) == "recommendations":
            return json.dumps(_MOCK_RECOMMENDATIONS, indent=2)
        return json.dumps(_MOCK_ANALYSIS, indent=2)


def build_adapter(settings: LLMSettings) -> BaseLLMAdapter:
    """Instantiate the adapter selected by ``settings.adapter``.

    anthropic -> AnthropicLLMAdapter (default)
    openai    -> OpenAILLMAdapter
    mock      -> MockLLMAdapter (testing, no API key required)
    """
    if settings.adapter == "mock":
        return MockLLMAdapter()
    if settings.adapter == "openai":
        return OpenAILLMAdapter(
            model=settings.model,
            max_tokens=settings.max_tokens,
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
        )

    logger.debug("Using Anthropic adapter with model %s", settings.model)
    return AnthropicLLMAdapter(
        model=settings.model,
        max_tokens=settings.max_tokens,
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout_seconds=settings.timeout_seconds,
        anthropic_version=settings.anthropic_version,
    )
