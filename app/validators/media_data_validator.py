"""
app/validators/media_data_validator.py

Sufficiency and quality judgement for uploaded media campaign tables.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from types import MappingProxyType

from app.config import get_media_data_settings
from app.domain.media_data import (
    CanonicalField,
    ColumnMatch,
    DataQuality,
    TabularInput,
    ValidationVerdict,
)
from app.mappers.column_catalogue import build_default_catalogue
from app.mappers.header_matcher import HeaderMatcher

logger = logging.getLogger(__name__)

MIN_FIELDS_FOR_ANALYSIS = 2
EXCELLENT_FIELD_COUNT = 4
CHANNEL_HEADER_HINTS: tuple[str, ...] = ("platform", "source")

NO_HEADERS_MESSAGE = (
    "No headers found in the CSV file. "
    "Please ensure the first row contains column headers."
)


def _suggestion_text(found_count: int, is_valid: bool) -> str:
    if is_valid:
        return f"Great! Found {found_count} relevant columns. The AI can analyze this data."
    return (
        f"Found {found_count} relevant columns. For best results, include columns for "
        "channel, metrics like CTR/CPM, and performance data."
    )


def _quality_for(found_count: int) -> DataQuality:
    if found_count >= EXCELLENT_FIELD_COUNT:
        return DataQuality.EXCELLENT
    if found_count >= MIN_FIELDS_FOR_ANALYSIS:
        return DataQuality.GOOD
    return DataQuality.LIMITED


class MediaDataValidator:
    """
    Runs header matching for every catalogue field and grades the result.

    Never raises for sparse or oddly shaped input; a table without headers
    yields an invalid verdict with every field missing.
    """

    def __init__(self, matcher: HeaderMatcher | None = None) -> None:
        self._matcher = matcher or HeaderMatcher()

    @property
    def matcher(self) -> HeaderMatcher:
        return self._matcher

    def validate(self, table: TabularInput) -> ValidationVerdict:
        catalogue_fields = self._matcher.catalogue.fields

        if not table.headers:
            logger.info("Media data validation skipped: no headers present.")
            return ValidationVerdict(
                is_valid=False,
                found_fields=(),
                missing_fields=catalogue_fields,
                column_mappings=MappingProxyType({}),
                data_quality=DataQuality.LIMITED,
                has_channel_data=False,
                suggestions=NO_HEADERS_MESSAGE,
            )

        mappings: dict[CanonicalField, ColumnMatch] = {}
        found: list[CanonicalField] = []
        missing: list[CanonicalField] = []
        for canonical_field in catalogue_fields:
            match = self._matcher.match(table.headers, canonical_field)
            if match.found:
                mappings[canonical_field] = match
                found.append(canonical_field)
            else:
                missing.append(canonical_field)

        is_valid = len(found) >= MIN_FIELDS_FOR_ANALYSIS
        verdict = ValidationVerdict(
            is_valid=is_valid,
            found_fields=tuple(found),
            missing_fields=tuple(missing),
            column_mappings=MappingProxyType(mappings),
            data_quality=_quality_for(len(found)),
            has_channel_data=self._has_channel_data(table, mappings),
            suggestions=_suggestion_text(len(found), is_valid),
        )
        logger.debug(
            "Media data validated: %d found, %d missing, quality=%s",
            len(found),
            len(missing),
            verdict.data_quality.value,
        )
        return verdict

    @staticmethod
    def _has_channel_data(
        table: TabularInput,
        mappings: dict[CanonicalField, ColumnMatch],
    ) -> bool:
        if CanonicalField.CHANNEL in mappings:
            return True
        return any(
            hint in header.lower()
            for header in table.headers
            for hint in CHANNEL_HEADER_HINTS
        )


@lru_cache(maxsize=1)
def get_media_data_validator() -> MediaDataValidator:
    """
    Build and cache a validator over the default catalogue plus configured aliases.
    """
    settings = get_media_data_settings()
    return MediaDataValidator(HeaderMatcher(build_default_catalogue(settings.extra_aliases)))
