"""
app/schemas package marker.
"""

from app.schemas.media_data import (
    ColumnMatchResponse,
    DataSummaryResponse,
    MediaAnalysisResponse,
    ValidationVerdictResponse,
)

__all__ = [
    "ColumnMatchResponse",
    "DataSummaryResponse",
    "MediaAnalysisResponse",
    "ValidationVerdictResponse",
]
