"""
app/services package marker.
"""

from app.services.ai_payload_service import AIPayloadPreparer
from app.services.csv_parsing_service import (
    CSVParsingError,
    CSVParsingService,
    ParsedCSV,
    get_csv_parsing_service,
)
from app.services.data_summary_service import DataSummary, DataSummaryService, get_data_summary_service
from app.services.media_analysis_service import (
    MediaAnalysisError,
    MediaAnalysisResult,
    MediaAnalysisService,
    get_media_analysis_service,
)
from app.services.metrics_aggregator import MetricsAggregator

__all__ = [
    "AIPayloadPreparer",
    "CSVParsingError",
    "CSVParsingService",
    "DataSummary",
    "DataSummaryService",
    "MediaAnalysisError",
    "MediaAnalysisResult",
    "MediaAnalysisService",
    "MetricsAggregator",
    "ParsedCSV",
    "get_csv_parsing_service",
    "get_data_summary_service",
    "get_media_analysis_service",
]
