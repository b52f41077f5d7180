from __future__ import annotations

import pytest

from app.domain.media_data import CanonicalField
from app.mappers.column_catalogue import (
    DEFAULT_COLUMN_ALIASES,
    ColumnCatalogue,
    build_default_catalogue,
)


@pytest.fixture()
def catalogue() -> ColumnCatalogue:
    return ColumnCatalogue()


def test_default_catalogue_covers_every_field_in_order(catalogue: ColumnCatalogue) -> None:
    assert catalogue.fields == tuple(CanonicalField)
    assert len(catalogue) == 12


def test_cpm_alias_order_is_preserved(catalogue: ColumnCatalogue) -> None:
    aliases = catalogue.aliases_for(CanonicalField.CPM)

    assert aliases[0] == "cpm"
    assert aliases.index("cost_per_impression") < aliases.index("cpm_cost")


def test_aliases_accept_field_names(catalogue: ColumnCatalogue) -> None:
    assert catalogue.aliases_for("ctr") == DEFAULT_COLUMN_ALIASES[CanonicalField.CTR]


def test_unknown_field_has_no_aliases(catalogue: ColumnCatalogue) -> None:
    assert catalogue.aliases_for("roas") == ()


def test_membership(catalogue: ColumnCatalogue) -> None:
    reduced = ColumnCatalogue({CanonicalField.CTR: ("ctr",)})

    assert CanonicalField.CTR in catalogue
    assert CanonicalField.CHANNEL not in reduced
    assert reduced.aliases_for(CanonicalField.CHANNEL) == ()


def test_extended_appends_without_mutating_original(catalogue: ColumnCatalogue) -> None:
    extended = catalogue.extended(
        {
            "ctr": ["ctr_pct", "ctr"],
            "roas": ["return_on_ad_spend"],
        }
    )

    assert extended.aliases_for(CanonicalField.CTR)[-1] == "ctr_pct"
    assert extended.aliases_for(CanonicalField.CTR).count("ctr") == 1
    assert "ctr_pct" not in catalogue.aliases_for(CanonicalField.CTR)
    assert len(extended) == len(catalogue)


def test_build_default_catalogue_with_extra_aliases() -> None:
    built = build_default_catalogue({CanonicalField.CHANNEL: ["network"]})

    assert built.aliases_for(CanonicalField.CHANNEL)[-1] == "network"
    assert build_default_catalogue().fields == ColumnCatalogue().fields
