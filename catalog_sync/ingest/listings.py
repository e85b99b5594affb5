"""Listing candidates: validated, typed records built from generic rows."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

from catalog_sync.exceptions import RowValidationError
from catalog_sync.ingest.coercion import (
    as_int,
    as_number,
    as_string,
    as_string_list,
    normalize_category,
    normalize_deal_type,
    normalize_status,
)
from catalog_sync.ingest.fields import FieldResolver
from catalog_sync.models.base import Row
from catalog_sync.models.catalog import Complex, Listing
from catalog_sync.models.enums import Category, DealType, PricePeriod
from catalog_sync.models.report import RowError
from catalog_sync.utils.ids import slugify

logger = logging.getLogger(__name__)

PREVIEW_SOURCE = "preview"
UNTITLED = "Без названия"
UNKNOWN_DISTRICT = "Не указан"


@dataclass
class ListingBatch:
    """Valid candidates and rejected rows of one feed batch."""

    candidates: list[Listing] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    # External ids of rejected rows that had one
    rejected_ids: set[str] = field(default_factory=set)


def _optional_text(value: object) -> str | None:
    text = as_string(value).strip()
    return text or None


def build_listing(
    row: Row,
    source_id: str,
    resolver: FieldResolver,
    now: datetime,
) -> Listing:
    """Build one listing candidate from a generic row.

    Raises
    ------
    RowValidationError
        If the external id is empty or bedrooms, price or area are not
        usable numbers.
    """
    external_id = as_string(resolver.get(row, "external_id")).strip()
    if not external_id:
        raise RowValidationError("missing external_id")

    bedrooms = as_number(resolver.get(row, "bedrooms"))
    price = as_number(resolver.get(row, "price"))
    area = as_number(resolver.get(row, "area_total"))
    if (
        bedrooms is None
        or price is None
        or area is None
        or bedrooms < 0
        or not float(bedrooms).is_integer()
        or price <= 0
        or area <= 0
    ):
        raise RowValidationError(
            f"invalid required fields - bedrooms: {bedrooms}, price: {price}, area: {area}",
            external_id=external_id,
        )

    title = as_string(resolver.get(row, "title")).strip()
    deal_type = normalize_deal_type(resolver.get(row, "deal_type"))
    complex_external_id = as_string(resolver.get(row, "complex_external_id")).strip()

    return Listing(
        id="",
        source_id=source_id,
        external_id=external_id,
        slug=slugify(title or external_id),
        title=title or external_id,
        deal_type=deal_type,
        category=normalize_category(resolver.get(row, "category")),
        bedrooms=int(bedrooms),
        price=price,
        area_total=area,
        lot_number=as_string(resolver.get(row, "lot_number")).strip(),
        complex_external_id=complex_external_id or None,
        price_period=PricePeriod.MONTH if deal_type == DealType.RENT else None,
        district=as_string(resolver.get(row, "district")).strip(),
        metro=as_string_list(resolver.get(row, "metro")),
        images=as_string_list(resolver.get(row, "images")),
        status=normalize_status(resolver.get(row, "status")),
        description=_optional_text(resolver.get(row, "description")),
        floor=as_int(resolver.get(row, "floor")),
        floors_total=as_int(resolver.get(row, "floors_total")),
        renovation=_optional_text(resolver.get(row, "renovation")),
        last_seen_at=now,
        updated_at=now,
    )


def build_listing_candidates(
    rows: Iterable[Row],
    source_id: str,
    mapping: Mapping[str, str] | None = None,
    *,
    now: datetime,
) -> ListingBatch:
    """Validate rows into listing candidates, collecting rejected rows.

    A failing row never stops the batch: it becomes a :class:`RowError`
    carrying its 1-based index.
    """
    resolver = FieldResolver(mapping)
    batch = ListingBatch()

    for index, row in enumerate(rows, start=1):
        try:
            batch.candidates.append(build_listing(row, source_id, resolver, now))
        except RowValidationError as e:
            logger.warning("Row %d of %s rejected: %s", index, source_id, e)
            batch.errors.append(RowError(row_index=index, error=str(e), external_id=e.external_id))
            if e.external_id:
                batch.rejected_ids.add(e.external_id)
        except Exception as e:
            logger.exception("Row %d of %s failed", index, source_id)
            external_id = as_string(resolver.get(row, "external_id")).strip() if isinstance(row, Mapping) else ""
            batch.errors.append(
                RowError(row_index=index, error=str(e) or type(e).__name__, external_id=external_id or None)
            )
            if external_id:
                batch.rejected_ids.add(external_id)

    return batch


def preview_listing(row: Row) -> Listing:
    """Map one row to a listing for display, without validation.

    Missing numbers become 0 and missing text gets a placeholder.
    """
    external_id = as_string(row.get("external_id") or row.get("id") or row.get("externalId"))
    title = as_string(row.get("title") or row.get("name"))
    bedrooms = as_number(_first_not_none(row, ("bedrooms", "rooms")))
    area = as_number(_first_not_none(row, ("area_total", "area")))

    return Listing(
        id=external_id,
        source_id=PREVIEW_SOURCE,
        external_id=external_id,
        slug=slugify(title or external_id),
        title=title or external_id or UNTITLED,
        deal_type=normalize_deal_type(row.get("deal_type")),
        category=normalize_category(row.get("category")),
        bedrooms=int(bedrooms or 0),
        price=as_number(row.get("price")) or 0,
        area_total=area or 0,
        district=as_string(row.get("district") or row.get("region")) or UNKNOWN_DISTRICT,
        metro=as_string_list(row.get("metro")),
        images=as_string_list(_first_not_none(row, ("images", "image_urls", "photos"))),
        status=normalize_status(row.get("status")),
    )


def preview_complex(row: Row) -> Complex:
    """Map one row to a complex for display, without aggregation."""
    external_id = as_string(row.get("external_id") or row.get("id") or row.get("externalId"))
    title = as_string(row.get("title") or row.get("name"))

    return Complex(
        id=external_id,
        source_id=PREVIEW_SOURCE,
        external_id=external_id,
        slug=slugify(title or external_id),
        title=title or external_id or UNTITLED,
        category=Category.NEWBUILD,
        district=as_string(row.get("district") or row.get("region")) or UNKNOWN_DISTRICT,
        metro=as_string_list(row.get("metro")),
        price_from=as_number(_first_not_none(row, ("price_from", "priceFrom", "price_min", "price"))),
        area_from=as_number(
            _first_not_none(row, ("area_from", "areaFrom", "area_min", "area_total", "area"))
        ),
        images=as_string_list(_first_not_none(row, ("images", "image_urls", "photos"))),
        status=normalize_status(row.get("status")),
    )


def _first_not_none(row: Row, keys: tuple[str, ...]) -> object:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None
