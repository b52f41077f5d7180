"""
app/mappers package marker.
"""

from app.mappers.column_catalogue import DEFAULT_COLUMN_ALIASES, ColumnCatalogue, build_default_catalogue
from app.mappers.header_matcher import HeaderMatcher, normalize_header

__all__ = [
    "DEFAULT_COLUMN_ALIASES",
    "ColumnCatalogue",
    "HeaderMatcher",
    "build_default_catalogue",
    "normalize_header",
]
