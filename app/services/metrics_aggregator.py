"""
app/services/metrics_aggregator.py

Descriptive statistics over the matched numeric columns of a media table.

Only cells that parse as a positive number contribute to a field's
statistics; everything else is skipped for that field without dropping the
row. A field with no usable values is left out of the snapshot entirely.

Rounding
--------
Rates / currency  (ctr, cpm, cost)               2 decimals
Frequency                                        1 decimal
Reach                                            whole numbers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from app.domain.media_data import (
    CanonicalField,
    CellValue,
    FieldStatistics,
    MetricsSnapshot,
    TabularInput,
    ValidationVerdict,
    parse_integer,
    parse_number,
)
from app.validators.media_data_validator import MediaDataValidator

logger = logging.getLogger(__name__)

DEGRADED_SNAPSHOT_MESSAGE = "Could not calculate metrics, but data can still be analyzed"


@dataclass(frozen=True)
class NumericFieldSpec:
    """
    How one numeric canonical field is parsed, rounded, and reported.
    """

    canonical_field: CanonicalField
    label: str
    """Suffix used in snapshot keys, e.g. ``"CTR"`` for ``avgCTR``."""

    decimals: int
    integer: bool = False
    include_sum: bool = False
    include_range: bool = True

    @property
    def parser(self) -> Callable[[CellValue], float | int | None]:
        return parse_integer if self.integer else parse_number


NUMERIC_FIELD_SPECS: tuple[NumericFieldSpec, ...] = (
    NumericFieldSpec(CanonicalField.CTR, "CTR", decimals=2),
    NumericFieldSpec(CanonicalField.CPM, "CPM", decimals=2),
    NumericFieldSpec(CanonicalField.REACH, "Reach", decimals=0, integer=True, include_sum=True),
    NumericFieldSpec(CanonicalField.FREQUENCY, "Frequency", decimals=1),
    NumericFieldSpec(CanonicalField.COST, "Cost", decimals=2, include_sum=True),
)


def round_half_up(value: float, decimals: int) -> float | int:
    """
    Round away from zero on ties; ``decimals=0`` yields an ``int``.
    """

    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if decimals == 0:
        return int(rounded)
    return float(rounded)


class MetricsAggregator:
    """
    Stateless aggregation engine for media campaign metrics.

    Usage::

        aggregator = MetricsAggregator()
        snapshot = aggregator.aggregate(table)
        print(snapshot.to_dict()["avgCTR"])
    """

    def __init__(
        self,
        *,
        validator: MediaDataValidator | None = None,
        field_specs: tuple[NumericFieldSpec, ...] = NUMERIC_FIELD_SPECS,
    ) -> None:
        self._validator = validator or MediaDataValidator()
        self._field_specs = field_specs

    def aggregate(
        self,
        table: TabularInput,
        verdict: ValidationVerdict | None = None,
    ) -> MetricsSnapshot | None:
        """
        Compute the metrics snapshot for ``table``.

        Parameters
        ----------
        table:
            Parsed input table.
        verdict:
            Validation verdict for the same table. Computed here when omitted.

        Returns
        -------
        MetricsSnapshot | None
            ``None`` when the table has no data rows. A snapshot carrying only
            row counts and ``error`` when aggregation fails unexpectedly.
        """
        if not table.rows:
            return None

        total_rows = table.row_count
        try:
            verdict = verdict or self._validator.validate(table)
            results = tuple(
                self._aggregate_field(table, verdict, spec)
                for spec in self._field_specs
                if spec.canonical_field in verdict.column_mappings
            )
        except Exception:
            logger.exception("Metrics aggregation failed for %d rows.", total_rows)
            return MetricsSnapshot(total_rows=total_rows, error=DEGRADED_SNAPSHOT_MESSAGE)

        return MetricsSnapshot(
            total_rows=total_rows,
            columns_found=verdict.found_fields,
            data_quality=verdict.data_quality,
            field_statistics=tuple(result for result in results if result.ok),
        )

    def _aggregate_field(
        self,
        table: TabularInput,
        verdict: ValidationVerdict,
        spec: NumericFieldSpec,
    ) -> FieldStatistics:
        match = verdict.column_mappings[spec.canonical_field]
        try:
            values = self.extract_positive_values(table, match.header_index, spec.parser)
            if not values:
                logger.debug("No positive values for '%s'.", spec.canonical_field.value)
                return FieldStatistics(
                    canonical_field=spec.canonical_field,
                    label=spec.label,
                    value_count=0,
                    error="No positive numeric values.",
                )

            total = sum(values)
            average = total / len(values)
            return FieldStatistics(
                canonical_field=spec.canonical_field,
                label=spec.label,
                value_count=len(values),
                average=round_half_up(average, spec.decimals),
                minimum=round_half_up(min(values), spec.decimals) if spec.include_range else None,
                maximum=round_half_up(max(values), spec.decimals) if spec.include_range else None,
                total=round_half_up(total, spec.decimals) if spec.include_sum else None,
            )
        # decimal.InvalidOperation and OverflowError are both ArithmeticError
        except (TypeError, ValueError, ArithmeticError) as exc:
            logger.warning(
                "Statistics for '%s' skipped: %s",
                spec.canonical_field.value,
                exc,
            )
            return FieldStatistics(
                canonical_field=spec.canonical_field,
                label=spec.label,
                value_count=0,
                error=str(exc) or type(exc).__name__,
            )

    @staticmethod
    def extract_positive_values(
        table: TabularInput,
        header_index: int,
        parser: Callable[[CellValue], float | int | None],
    ) -> list[float | int]:
        """
        Parse the column at ``header_index`` and keep only values above zero.
        """

        values: list[float | int] = []
        for row in table.rows:
            parsed = parser(table.cell(row, header_index))
            if parsed is not None and parsed > 0:
                values.append(parsed)
        return values
