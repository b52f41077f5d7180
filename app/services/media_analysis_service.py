"""
app/services/media_analysis_service.py

Runs one narrative analysis for an uploaded media table.

Order of work:

    1. MediaDataValidator.validate()        column mapping verdict
    2. MetricsAggregator.aggregate()        descriptive statistics
    3. AIPayloadPreparer.prepare()          bounded payload
    4. analysis request                     MediaAnalysisOutput
    5. recommendations request              RecommendationsOutput

Steps 4 and 5 each make a single request to the narrative service; there is
no retry. A failure in either aborts the run with MediaAnalysisError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from app.config import get_llm_settings, get_media_data_settings
from app.domain.media_data import AIPayload, TabularInput, ValidationVerdict
from app.logging_utils import log_event
from app.services.ai_payload_service import AIPayloadPreparer
from app.services.metrics_aggregator import MetricsAggregator
from app.validators.media_data_validator import MediaDataValidator, get_media_data_validator
from llm_synthesis.adapter import BaseLLMAdapter, LLMRequestError, build_adapter
from llm_synthesis.prompt_builder import MediaPromptBuilder
from llm_synthesis.schema import MediaAnalysisOutput, RecommendationsOutput
from llm_synthesis.validator import (
    LLMOutputValidationError,
    validate_analysis_output,
    validate_recommendations_output,
)

logger = logging.getLogger(__name__)


class MediaAnalysisError(RuntimeError):
    """
    Raised when the narrative service request or its response fails.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(
            f"Analysis failed: {reason}. Please check your data format and try again."
        )


@dataclass(frozen=True)
class MediaAnalysisResult:
    """
    Outputs of one analysis run.
    """

    verdict: ValidationVerdict
    payload: AIPayload
    analysis: MediaAnalysisOutput
    recommendations: RecommendationsOutput


class MediaAnalysisService:
    """
    Coordinates validation, aggregation, payload preparation and narrative requests.
    """

    def __init__(
        self,
        *,
        adapter: BaseLLMAdapter,
        validator: MediaDataValidator | None = None,
        aggregator: MetricsAggregator | None = None,
        preparer: AIPayloadPreparer | None = None,
        prompt_builder: MediaPromptBuilder | None = None,
    ) -> None:
        self._adapter = adapter
        self._validator = validator or MediaDataValidator()
        self._aggregator = aggregator or MetricsAggregator(validator=self._validator)
        self._preparer = preparer or AIPayloadPreparer()
        self._prompt_builder = prompt_builder or MediaPromptBuilder()

    @property
    def validator(self) -> MediaDataValidator:
        return self._validator

    def build_payload(self, table: TabularInput) -> tuple[ValidationVerdict, AIPayload]:
        verdict = self._validator.validate(table)
        snapshot = self._aggregator.aggregate(table, verdict)
        return verdict, self._preparer.prepare(table, verdict, snapshot)

    def run(self, table: TabularInput) -> MediaAnalysisResult:
        """
        Analyze ``table`` and derive recommendations from the analysis.

        Invalid tables are still analyzed; the caller decides whether to
        proceed based on the verdict.
        """

        verdict, payload = self.build_payload(table)
        log_event(
            logger,
            logging.INFO,
            "media_analysis_started",
            total_rows=payload.total_rows,
            found_columns=[item.value for item in payload.found_columns],
            data_quality=payload.data_quality.value,
        )

        try:
            analysis = validate_analysis_output(
                self._adapter.generate(self._prompt_builder.build_analysis_prompt(payload))
            )
            recommendations = validate_recommendations_output(
                self._adapter.generate(self._prompt_builder.build_recommendations_prompt(analysis))
            )
        except LLMRequestError as exc:
            log_event(logger, logging.WARNING, "media_analysis_failed", stage="request", error=str(exc))
            raise MediaAnalysisError(str(exc)) from exc
        except LLMOutputValidationError as exc:
            log_event(logger, logging.WARNING, "media_analysis_failed", stage=exc.stage, error=str(exc))
            raise MediaAnalysisError("the narrative service returned an unreadable response") from exc

        log_event(
            logger,
            logging.INFO,
            "media_analysis_completed",
            channels=len(analysis.channel_analysis),
            next_steps=len(recommendations.next_steps),
        )
        return MediaAnalysisResult(
            verdict=verdict,
            payload=payload,
            analysis=analysis,
            recommendations=recommendations,
        )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_media_analysis_service() -> MediaAnalysisService:
    """
    Build and cache the analysis service with env-driven settings.
    """
    return MediaAnalysisService(
        adapter=build_adapter(get_llm_settings()),
        validator=get_media_data_validator(),
        preparer=AIPayloadPreparer(sample_row_limit=get_media_data_settings().sample_row_limit),
    )
