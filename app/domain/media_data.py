"""
app/domain/media_data.py

Domain values for media-campaign tables, column matches, verdicts, and metrics.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence, Union

_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


# ---------------------------------------------------------------------------
# Cell values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    """
    Non-numeric cell content.
    """

    value: str


@dataclass(frozen=True)
class Number:
    """
    Numeric cell content.
    """

    value: float


@dataclass(frozen=True)
class Empty:
    """
    Absent or blank cell.
    """


CellValue = Union[Text, Number, Empty]

EMPTY = Empty()


def to_cell_value(raw: Any) -> CellValue:
    """
    Coerce one raw cell into a tagged cell value.

    Numeric-looking strings become ``Number``; blanks become ``Empty``.
    """

    if isinstance(raw, (Text, Number, Empty)):
        return raw
    if raw is None:
        return EMPTY
    if isinstance(raw, bool):
        return Text(str(raw).lower())
    if isinstance(raw, (int, float)):
        return Number(float(raw))

    text = str(raw)
    stripped = text.strip()
    if not stripped:
        return EMPTY
    try:
        number = float(stripped)
    except ValueError:
        return Text(text)
    if not math.isfinite(number):
        return Text(text)
    return Number(number)


def parse_number(cell: CellValue) -> float | None:
    """
    Convert a cell to a finite float, or ``None`` when it has no numeric value.

    Text cells are read up to the first character that cannot continue a
    decimal literal, so ``"12.5%"`` parses as ``12.5`` while ``"$12"`` does not
    parse at all.
    """

    if isinstance(cell, Number):
        return cell.value if math.isfinite(cell.value) else None
    if isinstance(cell, Text):
        match = _LEADING_NUMBER_RE.match(cell.value.strip())
        if match is None:
            return None
        number = float(match.group(0))
        return number if math.isfinite(number) else None
    return None


def parse_integer(cell: CellValue) -> int | None:
    """
    Convert a cell to an integer by truncating its numeric value toward zero.
    """

    number = parse_number(cell)
    if number is None:
        return None
    return int(number)


def cell_to_json(cell: CellValue) -> str | float | int | None:
    """
    Render a cell as a JSON primitive, keeping whole numbers integral.
    """

    if isinstance(cell, Number):
        return int(cell.value) if cell.value.is_integer() else cell.value
    if isinstance(cell, Text):
        return cell.value
    return None


# ---------------------------------------------------------------------------
# Tabular input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TabularInput:
    """
    Parsed spreadsheet content: one header row plus ordered data rows.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[CellValue, ...], ...] = ()

    @classmethod
    def from_raw(
        cls,
        headers: Sequence[Any] | None,
        rows: Sequence[Sequence[Any]] | None = None,
    ) -> TabularInput:
        """
        Build a table from plain Python values, coercing every cell.
        """

        return cls(
            headers=tuple("" if header is None else str(header) for header in headers or ()),
            rows=tuple(tuple(to_cell_value(cell) for cell in row) for row in rows or ()),
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def cell(self, row: Sequence[CellValue], index: int) -> CellValue:
        """
        Return the cell at ``index``; short rows yield ``Empty``.
        """

        if 0 <= index < len(row):
            return row[index]
        return EMPTY


# ---------------------------------------------------------------------------
# Canonical schema
# ---------------------------------------------------------------------------


class CanonicalField(str, Enum):
    """
    Media-planning concepts recognised regardless of header spelling.
    """

    CHANNEL = "channel"
    CTR = "ctr"
    CPM = "cpm"
    REACH = "reach"
    FREQUENCY = "frequency"
    IMPRESSIONS = "impressions"
    CLICKS = "clicks"
    COST = "cost"
    BUDGET = "budget"
    DEMOGRAPHIC = "demographic"
    GEOGRAPHY = "geography"
    DATE = "date"


class DataQuality(str, Enum):
    LIMITED = "limited"
    GOOD = "good"
    EXCELLENT = "excellent"


@dataclass(frozen=True)
class ColumnMatch:
    """
    Result of associating one canonical field with an input header.
    """

    canonical_field: CanonicalField
    found: bool
    original_header_name: str | None = None
    header_index: int = -1

    @classmethod
    def not_found(cls, canonical_field: CanonicalField) -> ColumnMatch:
        return cls(canonical_field=canonical_field, found=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "found": self.found,
            "originalHeaderName": self.original_header_name,
            "headerIndex": self.header_index,
            "canonicalField": self.canonical_field.value,
        }


@dataclass(frozen=True)
class ValidationVerdict:
    """
    Overall judgement of whether a table has enough recognised structure.
    """

    is_valid: bool
    found_fields: tuple[CanonicalField, ...]
    missing_fields: tuple[CanonicalField, ...]
    column_mappings: Mapping[CanonicalField, ColumnMatch]
    data_quality: DataQuality
    has_channel_data: bool
    suggestions: str

    @property
    def found_count(self) -> int:
        return len(self.found_fields)

    def to_dict(self) -> dict[str, Any]:
        found = [item.value for item in self.found_fields]
        return {
            "isValid": self.is_valid,
            "missingColumns": [item.value for item in self.missing_fields],
            "foundColumns": found,
            "columnMappings": {
                canonical.value: match.to_dict()
                for canonical, match in self.column_mappings.items()
            },
            "suggestions": self.suggestions,
            "hasChannelData": self.has_channel_data,
            "recommendedColumns": list(found),
            "dataQuality": self.data_quality.value,
        }


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldStatistics:
    """
    Descriptive statistics for one numeric canonical field.

    ``average`` is ``None`` when the field could not be computed; ``error``
    then carries the reason.
    """

    canonical_field: CanonicalField
    label: str
    value_count: int
    average: float | None = None
    minimum: float | None = None
    maximum: float | None = None
    total: float | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.average is not None

    def to_dict(self) -> dict[str, float]:
        payload: dict[str, float] = {}
        if not self.ok:
            return payload
        if self.total is not None:
            payload[f"total{self.label}"] = self.total
        payload[f"avg{self.label}"] = self.average  # type: ignore[assignment]
        if self.maximum is not None:
            payload[f"max{self.label}"] = self.maximum
        if self.minimum is not None:
            payload[f"min{self.label}"] = self.minimum
        return payload


@dataclass(frozen=True)
class MetricsSnapshot:
    """
    Aggregate statistics for the matched numeric columns of one table.
    """

    total_rows: int
    columns_found: tuple[CanonicalField, ...] = ()
    data_quality: DataQuality | None = None
    field_statistics: tuple[FieldStatistics, ...] = ()
    error: str | None = None

    @property
    def total_campaigns(self) -> int:
        return self.total_rows

    def statistics_for(self, canonical_field: CanonicalField) -> FieldStatistics | None:
        for stats in self.field_statistics:
            if stats.canonical_field == canonical_field and stats.ok:
                return stats
        return None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "totalCampaigns": self.total_campaigns,
            "totalRows": self.total_rows,
        }
        if self.error is not None:
            payload["error"] = self.error
            return payload

        payload["columnsFound"] = [item.value for item in self.columns_found]
        payload["dataQuality"] = self.data_quality.value if self.data_quality else None
        for stats in self.field_statistics:
            payload.update(stats.to_dict())
        return payload


# ---------------------------------------------------------------------------
# AI payload
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AIPayload:
    """
    Compact bundle submitted to the narrative service.
    """

    original_headers: tuple[str, ...]
    column_mappings: Mapping[CanonicalField, ColumnMatch]
    found_columns: tuple[CanonicalField, ...]
    data_quality: DataQuality
    sample_rows: tuple[tuple[CellValue, ...], ...]
    total_rows: int
    basic_metrics: MetricsSnapshot | None
    has_channel_data: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalHeaders": list(self.original_headers),
            "mappedColumns": {
                canonical.value: match.to_dict()
                for canonical, match in self.column_mappings.items()
            },
            "foundColumns": [item.value for item in self.found_columns],
            "dataQuality": self.data_quality.value,
            "sampleRows": [[cell_to_json(cell) for cell in row] for row in self.sample_rows],
            "totalRows": self.total_rows,
            "basicMetrics": self.basic_metrics.to_dict() if self.basic_metrics else None,
            "hasChannelData": self.has_channel_data,
        }
