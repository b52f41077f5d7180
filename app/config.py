"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_SAMPLE_ROWS = 10
_ALLOWED_LLM_ADAPTERS = {"anthropic", "openai", "mock"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_aliases_env(name: str) -> dict[str, tuple[str, ...]]:
    """
    Read a JSON object of ``field -> [alias, ...]`` from the environment.

    Malformed values are logged and ignored.
    """

    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return {}
    try:
        parsed = json.loads(raw_value)
    except json.JSONDecodeError:
        logger.warning("Ignoring %s: value is not valid JSON.", name)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Ignoring %s: expected a JSON object.", name)
        return {}

    aliases: dict[str, tuple[str, ...]] = {}
    for key, values in parsed.items():
        if not isinstance(key, str) or not isinstance(values, list):
            continue
        cleaned = tuple(value for value in values if isinstance(value, str) and value.strip())
        if key.strip() and cleaned:
            aliases[key.strip().lower()] = cleaned
    return aliases


@dataclass(frozen=True)
class MediaDataSettings:
    """
    Runtime settings for column matching and payload preparation.
    """

    sample_row_limit: int = MAX_SAMPLE_ROWS
    extra_aliases: dict[str, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class LLMSettings:
    """
    Narrative service connection settings.
    """

    adapter: str = "anthropic"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2000
    api_key: str | None = None
    base_url: str | None = None
    timeout_seconds: float = 60.0
    anthropic_version: str = "2023-06-01"


@lru_cache(maxsize=1)
def get_media_data_settings() -> MediaDataSettings:
    """
    Return cached media data settings from environment variables.
    """

    return MediaDataSettings(
        sample_row_limit=max(1, min(MAX_SAMPLE_ROWS, _get_int_env("MEDIA_SAMPLE_ROW_LIMIT", MAX_SAMPLE_ROWS))),
        extra_aliases=_get_aliases_env("MEDIA_EXTRA_COLUMN_ALIASES"),
    )


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """
    Return cached narrative service settings from environment variables.
    """

    adapter = _get_str_env("LLM_ADAPTER", "anthropic").lower()
    if adapter not in _ALLOWED_LLM_ADAPTERS:
        raise RuntimeError(
            f"LLM_ADAPTER '{adapter}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_LLM_ADAPTERS)}."
        )
    default_model = "gpt-4o-mini" if adapter == "openai" else "claude-sonnet-4-20250514"
    return LLMSettings(
        adapter=adapter,
        model=_get_str_env("LLM_MODEL", default_model),
        max_tokens=max(1, _get_int_env("LLM_MAX_TOKENS", 2000)),
        api_key=_get_optional_str_env("LLM_API_KEY"),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        timeout_seconds=max(1.0, _get_float_env("LLM_TIMEOUT_SECONDS", 60.0)),
        anthropic_version=_get_str_env("LLM_ANTHROPIC_VERSION", "2023-06-01"),
    )
