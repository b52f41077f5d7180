"""
app/mappers/header_matcher.py

Fuzzy header-to-canonical-field matching for media campaign exports.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from app.domain.media_data import CanonicalField, ColumnMatch
from app.mappers.column_catalogue import ColumnCatalogue

_WHITESPACE_RE = re.compile(r"\s+")
_SEPARATOR_RE = re.compile(r"[-_]")


def normalize_header(header: Any) -> str:
    """
    Normalize a header or alias: lowercase, trimmed, whitespace runs as ``_``.
    """

    text = "" if header is None else str(header)
    return _WHITESPACE_RE.sub("_", text.lower().strip())


def _strip_separators(value: str) -> str:
    return _SEPARATOR_RE.sub("", value)


def header_matches_alias(header: str, alias: str) -> bool:
    """
    Loose comparison between one normalized header and one normalized alias.

    Substring containment in either direction counts, as does containment once
    ``%`` is dropped from the header or ``-``/``_`` from both sides. A blank
    header is contained in every alias and so matches anything.
    """

    if not alias:
        return False
    bare_alias = _strip_separators(alias)
    return (
        header == alias
        or alias in header
        or header in alias
        or alias in header.replace("%", "")
        or (bool(bare_alias) and bare_alias in _strip_separators(header))
    )


class HeaderMatcher:
    """
    Finds the best catalogue match for a canonical field among raw headers.

    Aliases are tried in catalogue order and, for each alias, headers in their
    original order; the first hit wins. Matches for different fields are
    independent, so two fields may resolve to the same header.
    """

    def __init__(self, catalogue: ColumnCatalogue | None = None) -> None:
        self._catalogue = catalogue or ColumnCatalogue()

    @property
    def catalogue(self) -> ColumnCatalogue:
        return self._catalogue

    def match(self, headers: Sequence[Any], canonical_field: CanonicalField) -> ColumnMatch:
        normalized_headers = [normalize_header(header) for header in headers]

        for alias in self._catalogue.aliases_for(canonical_field):
            normalized_alias = normalize_header(alias)
            for index, header in enumerate(normalized_headers):
                if header_matches_alias(header, normalized_alias):
                    return ColumnMatch(
                        canonical_field=canonical_field,
                        found=True,
                        original_header_name=str(headers[index]),
                        header_index=index,
                    )

        return ColumnMatch.not_found(canonical_field)
