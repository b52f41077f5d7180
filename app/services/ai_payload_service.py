"""
app/services/ai_payload_service.py

Assembles the compact structure sent to the narrative service.
"""

from __future__ import annotations

from app.config import MAX_SAMPLE_ROWS
from app.domain.media_data import AIPayload, MetricsSnapshot, TabularInput, ValidationVerdict


class AIPayloadPreparer:
    """
    Bundles validation, metrics, and a bounded row sample into an AIPayload.

    The sample never exceeds ``MAX_SAMPLE_ROWS`` rows regardless of the
    configured limit.
    """

    def __init__(self, *, sample_row_limit: int = MAX_SAMPLE_ROWS) -> None:
        self._sample_row_limit = max(0, min(MAX_SAMPLE_ROWS, sample_row_limit))

    def prepare(
        self,
        table: TabularInput,
        verdict: ValidationVerdict,
        snapshot: MetricsSnapshot | None,
    ) -> AIPayload:
        return AIPayload(
            original_headers=table.headers,
            column_mappings=verdict.column_mappings,
            found_columns=verdict.found_fields,
            data_quality=verdict.data_quality,
            sample_rows=table.rows[: self._sample_row_limit],
            total_rows=table.row_count,
            basic_metrics=snapshot,
            has_channel_data=verdict.has_channel_data,
        )
