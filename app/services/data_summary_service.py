"""
app/services/data_summary_service.py

User-facing digest of what was recognised in an uploaded table.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from app.domain.media_data import MetricsSnapshot, TabularInput, ValidationVerdict
from app.services.metrics_aggregator import MetricsAggregator
from app.validators.media_data_validator import MediaDataValidator, get_media_data_validator


@dataclass(frozen=True)
class DataSummary:
    """
    Readiness verdict plus supporting details for one table.
    """

    is_ready: bool
    quality: str
    summary: str
    verdict: ValidationVerdict
    metrics: MetricsSnapshot | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "isReady": self.is_ready,
            "quality": self.quality,
            "summary": self.summary,
            "details": {
                "foundColumns": [item.value for item in self.verdict.found_fields],
                "mappings": {
                    canonical.value: match.to_dict()
                    for canonical, match in self.verdict.column_mappings.items()
                },
                "metrics": self.metrics.to_dict() if self.metrics else None,
                "suggestions": self.verdict.suggestions,
            },
        }


class DataSummaryService:
    def __init__(
        self,
        *,
        validator: MediaDataValidator | None = None,
        aggregator: MetricsAggregator | None = None,
    ) -> None:
        self._validator = validator or MediaDataValidator()
        self._aggregator = aggregator or MetricsAggregator(validator=self._validator)

    def summarize(self, table: TabularInput) -> DataSummary:
        verdict = self._validator.validate(table)
        metrics = self._aggregator.aggregate(table, verdict)
        return DataSummary(
            is_ready=verdict.is_valid,
            quality=verdict.data_quality.value,
            summary=(
                f"Found {verdict.found_count} relevant columns "
                f"in {table.row_count} rows of data."
            ),
            verdict=verdict,
            metrics=metrics,
        )


@lru_cache(maxsize=1)
def get_data_summary_service() -> DataSummaryService:
    """
    Build and cache the summary service over the configured catalogue.
    """
    return DataSummaryService(validator=get_media_data_validator())
