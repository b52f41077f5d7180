"""
app/domain package marker.
"""

from app.domain.media_data import (
    AIPayload,
    CanonicalField,
    CellValue,
    ColumnMatch,
    DataQuality,
    Empty,
    FieldStatistics,
    MetricsSnapshot,
    Number,
    TabularInput,
    Text,
    ValidationVerdict,
)

__all__ = [
    "AIPayload",
    "CanonicalField",
    "CellValue",
    "ColumnMatch",
    "DataQuality",
    "Empty",
    "FieldStatistics",
    "MetricsSnapshot",
    "Number",
    "TabularInput",
    "Text",
    "ValidationVerdict",
]
