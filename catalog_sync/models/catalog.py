"""Persisted catalog entities: listings, complexes and the catalog itself."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from catalog_sync.models.enums import Category, DealType, PricePeriod, Status


@dataclass
class Listing:
    """An individual lot offered for sale or rent."""

    id: str
    source_id: str
    external_id: str  # Unique within source_id
    slug: str
    title: str
    deal_type: DealType
    category: Category
    bedrooms: int
    price: float
    area_total: float  # Square meters
    lot_number: str = ""
    complex_id: str | None = None
    complex_external_id: str | None = None
    price_period: PricePeriod | None = None  # Set only for rent
    district: str = ""
    metro: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    status: Status = Status.ACTIVE
    description: str | None = None
    floor: int | None = None
    floors_total: int | None = None
    renovation: str | None = None
    last_seen_at: datetime | None = None
    updated_at: datetime | None = None
    # Stored keys this model does not declare, written back unchanged
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Complex:
    """A building or development summarizing its listings."""

    id: str
    source_id: str
    external_id: str  # Unique within source_id
    slug: str
    title: str
    category: Category = Category.NEWBUILD
    district: str = ""
    metro: list[str] = field(default_factory=list)
    price_from: float | None = None  # Minimum lot price
    area_from: float | None = None  # Minimum lot area
    images: list[str] = field(default_factory=list)
    developer: str | None = None
    handover_date: str | None = None  # Free-form, e.g. "3 кв. 2026"
    description: str | None = None
    status: Status = Status.ACTIVE
    last_seen_at: datetime | None = None
    updated_at: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Catalog:
    """The whole persisted store, newest records first."""

    listings: list[Listing] = field(default_factory=list)
    complexes: list[Complex] = field(default_factory=list)

    def listings_for(self, source_id: str) -> list[Listing]:
        """Get all listings of a source."""
        return [item for item in self.listings if item.source_id == source_id]

    def complexes_for(self, source_id: str) -> list[Complex]:
        """Get all complexes of a source."""
        return [item for item in self.complexes if item.source_id == source_id]

    def clear(self) -> None:
        """Drop every listing and complex."""
        self.listings = []
        self.complexes = []

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "listings": len(self.listings),
            "complexes": len(self.complexes),
            "active_listings": sum(1 for item in self.listings if item.status == Status.ACTIVE),
            "active_complexes": sum(1 for item in self.complexes if item.status == Status.ACTIVE),
        }
