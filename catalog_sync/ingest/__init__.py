"""Feed ingestion: field lookup, coercion, vendor normalization, aggregation."""

from catalog_sync.ingest.aggregate import aggregate_complexes
from catalog_sync.ingest.coercion import (
    as_number,
    as_string,
    as_string_list,
    normalize_category,
    normalize_deal_type,
    normalize_status,
)
from catalog_sync.ingest.fields import FIELD_ALIASES, FieldResolver, resolve
from catalog_sync.ingest.listings import (
    ListingBatch,
    build_listing_candidates,
    preview_complex,
    preview_listing,
)
from catalog_sync.ingest.vendors import normalize_rows, normalize_yandex_realty

__all__ = [
    "FIELD_ALIASES",
    "FieldResolver",
    "ListingBatch",
    "aggregate_complexes",
    "as_number",
    "as_string",
    "as_string_list",
    "build_listing_candidates",
    "normalize_category",
    "normalize_deal_type",
    "normalize_rows",
    "normalize_status",
    "normalize_yandex_realty",
    "preview_complex",
    "preview_listing",
    "resolve",
]
