from __future__ import annotations

import pytest
import requests

from app.config import LLMSettings
from llm_synthesis.adapter import (
    AnthropicLLMAdapter,
    LLMRequestError,
    MockLLMAdapter,
    OpenAILLMAdapter,
    build_adapter,
)
from llm_synthesis.prompt_builder import ANALYSIS_TASK_MARKER, RECOMMENDATIONS_TASK_MARKER
from llm_synthesis.validator import validate_analysis_output, validate_recommendations_output


class _FakeResponse:
    def __init__(self, status_code: int = 200, body=None, reason: str = "OK") -> None:
        self.status_code = status_code
        self.reason = reason
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class _FakeSession:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def test_anthropic_adapter_returns_first_text_block() -> None:
    session = _FakeSession(_FakeResponse(body={"content": [{"type": "text", "text": "{}"}]}))
    adapter = AnthropicLLMAdapter(api_key="test-key", max_tokens=500, session=session)

    assert adapter.generate("prompt") == "{}"

    call = session.calls[0]
    assert len(session.calls) == 1
    assert call["headers"]["x-api-key"] == "test-key"
    assert call["headers"]["anthropic-version"] == "2023-06-01"
    assert call["json"]["max_tokens"] == 500
    assert call["json"]["messages"] == [{"role": "user", "content": "prompt"}]


def test_anthropic_adapter_rejects_error_status() -> None:
    session = _FakeSession(_FakeResponse(status_code=500, reason="Internal Server Error"))
    adapter = AnthropicLLMAdapter(session=session)

    with pytest.raises(LLMRequestError, match="500 Internal Server Error"):
        adapter.generate("prompt")
    assert len(session.calls) == 1


def test_anthropic_adapter_wraps_network_errors() -> None:
    adapter = AnthropicLLMAdapter(session=_FakeSession(error=requests.ConnectionError("refused")))

    with pytest.raises(LLMRequestError, match="API request failed"):
        adapter.generate("prompt")


def test_anthropic_adapter_rejects_unexpected_envelope() -> None:
    adapter = AnthropicLLMAdapter(session=_FakeSession(_FakeResponse(body={"content": []})))

    with pytest.raises(LLMRequestError):
        adapter.generate("prompt")


def test_mock_adapter_answers_by_prompt_kind() -> None:
    adapter = MockLLMAdapter()

    analysis = validate_analysis_output(adapter.generate(f"...\n{ANALYSIS_TASK_MARKER}\n..."))
    recommendations = validate_recommendations_output(
        adapter.generate(f"...\n{RECOMMENDATIONS_TASK_MARKER}\n...")
    )

    assert analysis.overall_performance.top_channels[0] == "Google Ads"
    assert recommendations.budget_reallocation.recommendations[0].change_percent == 20


@pytest.mark.parametrize(
    ("adapter_name", "expected_type"),
    [
        ("mock", MockLLMAdapter),
        ("anthropic", AnthropicLLMAdapter),
        ("openai", OpenAILLMAdapter),
    ],
)
def test_build_adapter(adapter_name: str, expected_type: type) -> None:
    settings = LLMSettings(adapter=adapter_name, api_key="test-key")

    assert isinstance(build_adapter(settings), expected_type)
