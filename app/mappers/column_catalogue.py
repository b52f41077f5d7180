"""
app/mappers/column_catalogue.py

Registry of accepted header spellings for each canonical media metric.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence

from app.domain.media_data import CanonicalField

DEFAULT_COLUMN_ALIASES: dict[CanonicalField, tuple[str, ...]] = {
    CanonicalField.CHANNEL: (
        "channel", "platform", "media", "source", "campaign_type", "ad_platform",
        "advertising_channel", "media_channel", "placement", "vendor",
    ),
    CanonicalField.CTR: (
        "ctr", "click_through_rate", "click-through-rate", "clickthrough_rate",
        "click_rate", "clicks_per_impression", "click_percentage", "ctr_%", "ctr%",
        "click_thru_rate", "engagement_rate",
    ),
    CanonicalField.CPM: (
        "cpm", "cost_per_mille", "cost_per_thousand", "cost_per_1000",
        "cost_per_1k", "cpt", "cost_per_impression", "impression_cost",
        "cost_per_m", "cost_per_thousand_impressions", "cpm_cost",
    ),
    CanonicalField.REACH: (
        "reach", "total_reach", "unique_reach", "audience_reach", "people_reached",
        "unique_users", "total_audience", "impressions_reach", "unduplicated_reach",
        "net_reach", "coverage",
    ),
    CanonicalField.FREQUENCY: (
        "frequency", "avg_frequency", "average_frequency", "freq", "impression_frequency",
        "contact_frequency", "exposure_frequency", "frequency_avg", "times_seen",
    ),
    CanonicalField.IMPRESSIONS: (
        "impressions", "total_impressions", "impression", "views", "total_views",
        "ad_impressions", "served_impressions", "delivered_impressions",
    ),
    CanonicalField.CLICKS: (
        "clicks", "total_clicks", "click", "link_clicks", "ad_clicks",
        "click_count", "clickthroughs",
    ),
    CanonicalField.COST: (
        "cost", "total_cost", "spend", "budget", "investment", "media_cost",
        "advertising_cost", "campaign_cost", "total_spend", "amount_spent",
    ),
    CanonicalField.BUDGET: (
        "budget", "planned_budget", "allocated_budget", "budget_allocation",
        "investment", "spend_target", "budget_amount",
    ),
    CanonicalField.DEMOGRAPHIC: (
        "demographic", "demo", "age_group", "target_demo", "audience",
        "age_range", "demo_group", "target_audience", "segment",
    ),
    CanonicalField.GEOGRAPHY: (
        "geography", "geo", "location", "region", "market", "area",
        "territory", "geographic_area", "locale", "city", "state", "country",
    ),
    CanonicalField.DATE: (
        "date", "time", "period", "week", "month", "quarter", "campaign_date",
        "flight_date", "run_date", "start_date", "end_date",
    ),
}


class ColumnCatalogue:
    """
    Immutable mapping of canonical fields to ordered header aliases.

    Field order is the order in which validation reports found and missing
    fields. A field with no aliases is never matched.
    """

    def __init__(self, aliases: Mapping[CanonicalField | str, Sequence[str]] | None = None) -> None:
        source = DEFAULT_COLUMN_ALIASES if aliases is None else aliases
        frozen = {
            CanonicalField(canonical): tuple(values)
            for canonical, values in source.items()
        }
        self._aliases: Mapping[CanonicalField, tuple[str, ...]] = MappingProxyType(frozen)

    @property
    def fields(self) -> tuple[CanonicalField, ...]:
        return tuple(self._aliases)

    def aliases_for(self, canonical_field: CanonicalField | str) -> tuple[str, ...]:
        try:
            key = CanonicalField(canonical_field)
        except ValueError:
            return ()
        return self._aliases.get(key, ())

    def extended(self, extra: Mapping[CanonicalField | str, Sequence[str]]) -> ColumnCatalogue:
        """
        Return a new catalogue with ``extra`` aliases appended per field.

        Unknown field names are ignored; aliases already present are skipped.
        """

        merged: dict[CanonicalField, tuple[str, ...]] = dict(self._aliases)
        for canonical, values in extra.items():
            try:
                key = CanonicalField(canonical)
            except ValueError:
                continue
            existing = merged.get(key, ())
            additions = tuple(value for value in values if value not in existing)
            merged[key] = existing + additions
        return ColumnCatalogue(merged)

    def __contains__(self, canonical_field: object) -> bool:
        return canonical_field in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)


def build_default_catalogue(
    extra_aliases: Mapping[CanonicalField | str, Sequence[str]] | None = None,
) -> ColumnCatalogue:
    """
    Default catalogue, optionally extended with configured aliases.
    """

    catalogue = ColumnCatalogue()
    if extra_aliases:
        catalogue = catalogue.extended(extra_aliases)
    return catalogue
