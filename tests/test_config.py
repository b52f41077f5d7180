from __future__ import annotations

import pytest

from app.config import get_llm_settings, get_media_data_settings

_ENV_NAMES = (
    "MEDIA_SAMPLE_ROW_LIMIT",
    "MEDIA_EXTRA_COLUMN_ALIASES",
    "LLM_ADAPTER",
    "LLM_MODEL",
    "LLM_MAX_TOKENS",
    "LLM_API_KEY",
    "LLM_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_media_data_settings.cache_clear()
    get_llm_settings.cache_clear()
    yield
    get_media_data_settings.cache_clear()
    get_llm_settings.cache_clear()


def test_media_defaults() -> None:
    settings = get_media_data_settings()

    assert settings.sample_row_limit == 10
    assert settings.extra_aliases == {}


@pytest.mark.parametrize(("raw", "expected"), [("50", 10), ("0", 1), ("4", 4), ("many", 10)])
def test_sample_row_limit_is_clamped(monkeypatch: pytest.MonkeyPatch, raw: str, expected: int) -> None:
    monkeypatch.setenv("MEDIA_SAMPLE_ROW_LIMIT", raw)

    assert get_media_data_settings().sample_row_limit == expected


def test_extra_aliases_from_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(
        "MEDIA_EXTRA_COLUMN_ALIASES",
        '{"CTR": ["ctr_pct", "", 3], "channel": "network", "cpm": []}',
    )

    assert get_media_data_settings().extra_aliases == {"ctr": ("ctr_pct",)}


def test_malformed_aliases_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEDIA_EXTRA_COLUMN_ALIASES", "ctr=ctr_pct")

    assert get_media_data_settings().extra_aliases == {}


def test_llm_defaults() -> None:
    settings = get_llm_settings()

    assert settings.adapter == "anthropic"
    assert settings.model == "claude-sonnet-4-20250514"
    assert settings.max_tokens == 2000
    assert settings.api_key is None
    assert settings.timeout_seconds == 60.0


def test_openai_default_model(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_ADAPTER", " OpenAI ")
    monkeypatch.setenv("LLM_API_KEY", "test-key")

    settings = get_llm_settings()

    assert settings.adapter == "openai"
    assert settings.model == "gpt-4o-mini"
    assert settings.api_key == "test-key"


def test_invalid_adapter_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_ADAPTER", "bard")

    with pytest.raises(RuntimeError, match="LLM_ADAPTER"):
        get_llm_settings()
