"""Catalog domain models."""

from catalog_sync.models.base import CatalogEvent, Row
from catalog_sync.models.catalog import Catalog, Complex, Listing
from catalog_sync.models.enums import (
    Category,
    ChangeAction,
    DealType,
    EntityKind,
    FeedSchema,
    PricePeriod,
    Status,
)
from catalog_sync.models.report import RowError, RunReport

__all__ = [
    "Catalog",
    "CatalogEvent",
    "Category",
    "ChangeAction",
    "Complex",
    "DealType",
    "EntityKind",
    "FeedSchema",
    "Listing",
    "PricePeriod",
    "Row",
    "RowError",
    "RunReport",
    "Status",
]
