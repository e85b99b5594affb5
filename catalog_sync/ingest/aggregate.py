"""Complex aggregation: many listing rows -> one summary per building."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

from catalog_sync.ingest.coercion import as_number, as_string, as_string_list
from catalog_sync.ingest.fields import FieldResolver
from catalog_sync.models.base import Row
from catalog_sync.models.catalog import Complex
from catalog_sync.models.enums import Category, Status
from catalog_sync.models.report import RowError
from catalog_sync.utils.ids import slugify

logger = logging.getLogger(__name__)

MISSING_GROUP_KEY = "missing complex and row identifier"


@dataclass
class _ComplexAccumulator:
    """Running reduction of one group's rows."""

    external_id: str
    min_price: float | None = None
    min_area: float | None = None
    title: str | None = None
    images: dict[str, None] = field(default_factory=dict)  # ordered set
    metro: dict[str, None] = field(default_factory=dict)
    developer: str | None = None
    handover_date: str | None = None
    district: str | None = None
    description: str | None = None

    def add_price(self, value: float | None) -> None:
        if value and value > 0 and (self.min_price is None or value < self.min_price):
            self.min_price = value

    def add_area(self, value: float | None) -> None:
        if value and value > 0 and (self.min_area is None or value < self.min_area):
            self.min_area = value

    def to_complex(self, source_id: str, now: datetime) -> Complex:
        title = self.title or self.external_id
        return Complex(
            id="",
            source_id=source_id,
            external_id=self.external_id,
            slug=slugify(title),
            title=title,
            category=Category.NEWBUILD,
            district=self.district or "",
            metro=list(self.metro),
            price_from=self.min_price,
            area_from=self.min_area,
            images=list(self.images),
            developer=self.developer,
            handover_date=self.handover_date,
            description=self.description,
            status=Status.ACTIVE,
            last_seen_at=now,
            updated_at=now,
        )


def _first_present(resolver: FieldResolver, row: Row, fields: tuple[str, ...]) -> object:
    """Value of the first field that resolves to something other than None."""
    for name in fields:
        value = resolver.get(row, name)
        if value is not None:
            return value
    return None


def aggregate_complexes(
    rows: Iterable[Row],
    source_id: str,
    mapping: Mapping[str, str] | None = None,
    *,
    now: datetime,
    errors: list[RowError] | None = None,
) -> list[Complex]:
    """Reduce listing rows to one complex record per building.

    Rows are grouped by ``complex_external_id``, or by their own
    ``external_id`` when they carry no grouping key (the row then describes
    the complex itself). Rows with neither are skipped and, when ``errors``
    is given, reported there.

    Parameters
    ----------
    rows : Iterable[Row]
        Generic feed rows.
    source_id : str
        Feed the rows come from.
    mapping : Mapping[str, str] | None
        Per-source field mapping.
    now : datetime
        Timestamp stamped on every record.
    errors : list[RowError] | None
        Collects rows that could not be grouped.

    Returns
    -------
    list[Complex]
        Records in first-seen group order, without ids.
    """
    resolver = FieldResolver(mapping)
    groups: dict[str, _ComplexAccumulator] = {}

    for index, row in enumerate(rows, start=1):
        group_key = as_string(resolver.get(row, "complex_external_id")).strip()
        is_child = bool(group_key)
        if not group_key:
            group_key = as_string(resolver.get(row, "external_id")).strip()
        if not group_key:
            logger.warning("Row %d of %s has no complex or row id, skipped", index, source_id)
            if errors is not None:
                errors.append(RowError(row_index=index, error=MISSING_GROUP_KEY))
            continue

        group = groups.get(group_key)
        if group is None:
            group = groups[group_key] = _ComplexAccumulator(external_id=group_key)

        group.add_price(as_number(_first_present(resolver, row, ("price_from", "price"))))
        group.add_area(as_number(_first_present(resolver, row, ("area_from", "area_total"))))

        # Lot feeds title rows "2-room flat", so the row title only names
        # the complex when the row is the complex itself
        complex_title = as_string(resolver.get(row, "complex_title")).strip()
        row_title = as_string(resolver.get(row, "title")).strip()
        if complex_title:
            group.title = complex_title
        elif not group.title and row_title and not is_child:
            group.title = row_title
        elif not group.title:
            group.title = group_key

        for image in as_string_list(resolver.get(row, "images")):
            group.images[image] = None
        for station in as_string_list(resolver.get(row, "metro")):
            group.metro[station] = None

        developer = as_string(resolver.get(row, "developer")).strip()
        if developer:
            group.developer = developer
        handover_date = as_string(resolver.get(row, "handover_date")).strip()
        if handover_date:
            group.handover_date = handover_date
        district = as_string(resolver.get(row, "district")).strip()
        if district:
            group.district = district

        description = as_string(resolver.get(row, "description")).strip()
        if description and not group.description:
            group.description = description

    logger.debug("Aggregated %d complexes for %s", len(groups), source_id)
    return [group.to_complex(source_id, now) for group in groups.values()]
