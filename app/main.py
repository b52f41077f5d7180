from __future__ import annotations

import logging
import os

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - LLM_ADAPTER must be one of anthropic, openai, mock.
    - LLM_API_KEY is required unless LLM_ADAPTER=mock.
    """

    from app.config import load_env_files

    load_env_files()

    errors: list[str] = []

    adapter = os.getenv("LLM_ADAPTER", "anthropic").strip().lower() or "anthropic"
    if adapter not in {"anthropic", "openai", "mock"}:
        errors.append(
            f"LLM_ADAPTER='{adapter}' is not valid. Allowed values: ['anthropic', 'mock', 'openai']."
        )
    elif adapter != "mock" and not os.getenv("LLM_API_KEY", "").strip():
        errors.append(
            "LLM_API_KEY is not set. Provide an API key for the narrative service "
            "or set LLM_ADAPTER=mock."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Media Planner Insights API",
        version="1.0.0",
    )

    from app.api.routers import media_data_router

    application.include_router(media_data_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
