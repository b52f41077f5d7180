"""
app/schemas/media_data.py

Response schemas for media data validation and analysis endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.domain.media_data import ColumnMatch, ValidationVerdict
from llm_synthesis.schema import MediaAnalysisOutput, RecommendationsOutput


class ColumnMatchResponse(BaseModel):
    """
    API response model for one canonical field match.
    """

    canonical_field: str
    found: bool
    original_header_name: str | None = None
    header_index: int = Field(default=-1, ge=-1)

    @classmethod
    def from_domain(cls, match: ColumnMatch) -> ColumnMatchResponse:
        return cls(
            canonical_field=match.canonical_field.value,
            found=match.found,
            original_header_name=match.original_header_name,
            header_index=match.header_index,
        )


class ValidationVerdictResponse(BaseModel):
    """
    API response model for a validation verdict.
    """

    is_valid: bool
    found_fields: list[str] = Field(default_factory=list)
    missing_fields: list[str] = Field(default_factory=list)
    column_mappings: dict[str, ColumnMatchResponse] = Field(default_factory=dict)
    data_quality: str
    has_channel_data: bool
    suggestions: str

    @classmethod
    def from_domain(cls, verdict: ValidationVerdict) -> ValidationVerdictResponse:
        return cls(
            is_valid=verdict.is_valid,
            found_fields=[item.value for item in verdict.found_fields],
            missing_fields=[item.value for item in verdict.missing_fields],
            column_mappings={
                canonical.value: ColumnMatchResponse.from_domain(match)
                for canonical, match in verdict.column_mappings.items()
            },
            data_quality=verdict.data_quality.value,
            has_channel_data=verdict.has_channel_data,
            suggestions=verdict.suggestions,
        )


class DataSummaryResponse(BaseModel):
    """
    API response model for an uploaded file's data summary.
    """

    filename: str | None = None
    is_ready: bool
    quality: str
    summary: str
    verdict: ValidationVerdictResponse
    metrics: dict[str, Any] | None = None


class MediaAnalysisResponse(BaseModel):
    """
    API response model for a completed narrative analysis.
    """

    filename: str | None = None
    verdict: ValidationVerdictResponse
    payload: dict[str, Any]
    analysis: MediaAnalysisOutput
    recommendations: RecommendationsOutput
