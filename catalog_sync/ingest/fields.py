"""Canonical field lookup over inconsistently named feed rows.

Every read of a row goes through :func:`resolve`, so one lookup order holds
for the whole pipeline:

1. the per-source mapping, when it names a column for the field (it wins even
   if that column is missing from the row);
2. the field's own name;
3. the field's aliases, in order.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from catalog_sync.models.base import Row

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "external_id": ("id", "externalId"),
    "title": ("name",),
    "category": (),
    "deal_type": ("dealType",),
    "bedrooms": ("rooms",),
    "price": (),
    "area_total": ("area",),
    "district": ("region",),
    "metro": (),
    "images": ("image_urls", "photos"),
    "status": (),
    "complex_external_id": (
        "complexExternalId",
        "complex_id",
        "building-name",
        "yandex-building-id",
    ),
    "complex_title": ("building-name", "complex_name", "zhk_name", "complexName"),
    "price_from": ("priceFrom", "price_min"),
    "area_from": ("areaFrom", "area_min"),
    "developer": (),
    "handover_date": ("handoverDate",),
    "lot_number": ("lotNumber",),
    "description": (),
    "floor": (),
    "floors_total": ("floors-total",),
    "renovation": (),
}


def resolve(
    row: Row,
    field: str,
    mapping: Mapping[str, str] | None = None,
    aliases: Sequence[str] | None = None,
) -> Any:
    """Return the raw value of a canonical field, or None when absent.

    Parameters
    ----------
    row : Row
        Feed row.
    field : str
        Canonical field name.
    mapping : Mapping[str, str] | None
        Per-source table of canonical field -> row key.
    aliases : Sequence[str] | None
        Alternate row keys tried in order. Defaults to ``FIELD_ALIASES``.

    Returns
    -------
    Any
        The raw value, untouched.
    """
    if mapping and mapping.get(field):
        return row.get(mapping[field])
    if field in row:
        return row[field]
    if aliases is None:
        aliases = FIELD_ALIASES.get(field, ())
    for alias in aliases:
        if alias in row:
            return row[alias]
    return None


class FieldResolver:
    """Field lookup bound to one source's mapping table."""

    def __init__(
        self,
        mapping: Mapping[str, str] | None = None,
        aliases: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self.mapping = dict(mapping or {})
        self.aliases = {**FIELD_ALIASES, **(aliases or {})}

    def get(self, row: Row, field: str) -> Any:
        """Return the raw value of ``field`` in ``row``."""
        return resolve(row, field, self.mapping, self.aliases.get(field, ()))

    def has(self, row: Row, field: str) -> bool:
        """Whether ``field`` resolves to a non-None value."""
        return self.get(row, field) is not None
