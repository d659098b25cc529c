"""Model catalog extraction, fetching and aggregation."""

from .aggregator import (
    catalog_lister,
    fetch_all_catalogs,
    format_catalog_entry,
    parse_catalog_entry,
)
from .fetcher import DEFAULT_CATALOG_TIMEOUT, fetch_catalog
from .jsonpath import extract_field

__all__ = [
    "DEFAULT_CATALOG_TIMEOUT",
    "catalog_lister",
    "extract_field",
    "fetch_all_catalogs",
    "fetch_catalog",
    "format_catalog_entry",
    "parse_catalog_entry",
]
