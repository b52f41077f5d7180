"""
app/api/routers/media_data.py

Media campaign upload, validation, and analysis HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from app.api.dependencies import get_csv_upload
from app.schemas.media_data import (
    DataSummaryResponse,
    MediaAnalysisResponse,
    ValidationVerdictResponse,
)
from app.services.csv_parsing_service import (
    CSVParsingError,
    CSVParsingService,
    ParsedCSV,
    get_csv_parsing_service,
)
from app.services.data_summary_service import DataSummaryService, get_data_summary_service
from app.services.media_analysis_service import (
    MediaAnalysisError,
    MediaAnalysisService,
    get_media_analysis_service,
)

router = APIRouter(prefix="/media", tags=["media"])


def _parse_or_400(upload_file: UploadFile, parser: CSVParsingService) -> ParsedCSV:
    try:
        return parser.parse_upload(upload_file)
    except CSVParsingError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        upload_file.file.close()


@router.post("/validate", response_model=DataSummaryResponse)
def validate_media_data(
    file: UploadFile = Depends(get_csv_upload),
    parser: CSVParsingService = Depends(get_csv_parsing_service),
    summary_service: DataSummaryService = Depends(get_data_summary_service),
) -> DataSummaryResponse:
    """
    Map the uploaded columns and report whether the data can be analyzed.
    """

    parsed = _parse_or_400(file, parser)
    summary = summary_service.summarize(parsed.table)
    return DataSummaryResponse(
        filename=parsed.filename,
        is_ready=summary.is_ready,
        quality=summary.quality,
        summary=summary.summary,
        verdict=ValidationVerdictResponse.from_domain(summary.verdict),
        metrics=summary.metrics.to_dict() if summary.metrics else None,
    )


@router.post("/analyze", response_model=MediaAnalysisResponse)
def analyze_media_data(
    file: UploadFile = Depends(get_csv_upload),
    parser: CSVParsingService = Depends(get_csv_parsing_service),
    analysis_service: MediaAnalysisService = Depends(get_media_analysis_service),
) -> MediaAnalysisResponse:
    """
    Run the narrative analysis and recommendations for the uploaded data.
    """

    parsed = _parse_or_400(file, parser)
    try:
        result = analysis_service.run(parsed.table)
    except MediaAnalysisError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return MediaAnalysisResponse(
        filename=parsed.filename,
        verdict=ValidationVerdictResponse.from_domain(result.verdict),
        payload=result.payload.to_dict(),
        analysis=result.analysis,
        recommendations=result.recommendations,
    )
