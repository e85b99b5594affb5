"""Catalog document <-> model conversion.

The persisted document is ``{"listings": [...], "complexes": [...]}`` with
enums stored as their values and datetimes as ISO-8601 strings. Keys a
record model does not declare are kept in its ``extra`` and written back
flat, so fields added by other tools survive every import.
"""

from __future__ import annotations

from dataclasses import MISSING, fields
from datetime import datetime
from enum import Enum
from typing import Any

from catalog_sync.exceptions import StoreError
from catalog_sync.models.catalog import Catalog, Complex, Listing
from catalog_sync.models.enums import Category, DealType, PricePeriod, Status
from catalog_sync.sinks.serialization import dataclass_to_dict

ENUM_FIELDS: dict[str, type[Enum]] = {
    "deal_type": DealType,
    "category": Category,
    "status": Status,
    "price_period": PricePeriod,
}
DATETIME_FIELDS = frozenset({"last_seen_at", "updated_at"})
LIST_FIELDS = frozenset({"metro", "images"})
EXTRA_FIELD = "extra"


def _convert(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in ENUM_FIELDS:
        return ENUM_FIELDS[name](value)
    if name in DATETIME_FIELDS:
        # JavaScript writes UTC as a trailing Z
        if isinstance(value, str) and value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    if name in LIST_FIELDS:
        return list(value)
    return value


def record_from_dict(cls: type[Listing] | type[Complex], data: dict[str, Any]) -> Listing | Complex:
    """Build a listing or complex from its stored form.

    Unknown keys go to ``extra``; missing optional keys take their defaults.

    Raises
    ------
    StoreError
        If a required key is missing or a value does not convert.
    """
    kwargs: dict[str, Any] = {}
    declared = {f.name for f in fields(cls) if f.name != EXTRA_FIELD}
    for f in fields(cls):
        if f.name == EXTRA_FIELD:
            continue
        if f.name in data:
            try:
                kwargs[f.name] = _convert(f.name, data[f.name])
            except (TypeError, ValueError) as e:
                raise StoreError(f"Bad {cls.__name__}.{f.name} value {data[f.name]!r}: {e}") from e
        elif f.default is MISSING and f.default_factory is MISSING:
            raise StoreError(f"Stored {cls.__name__} is missing {f.name!r}")
    kwargs[EXTRA_FIELD] = {key: value for key, value in data.items() if key not in declared}
    return cls(**kwargs)


def record_to_dict(record: Listing | Complex) -> dict[str, Any]:
    """Stored form of a record, with its extra keys flattened back in."""
    data = dataclass_to_dict(record)
    extra = data.pop(EXTRA_FIELD)
    return {**extra, **data}


def catalog_to_document(catalog: Catalog) -> dict[str, list[dict[str, Any]]]:
    """Convert the catalog to its JSON document."""
    return {
        "listings": [record_to_dict(item) for item in catalog.listings],
        "complexes": [record_to_dict(item) for item in catalog.complexes],
    }


def catalog_from_document(document: Any) -> Catalog:
    """Rebuild the catalog from its JSON document."""
    if not isinstance(document, dict):
        raise StoreError(f"Catalog document must be an object, got {type(document).__name__}")
    return Catalog(
        listings=[record_from_dict(Listing, item) for item in document.get("listings") or []],
        complexes=[record_from_dict(Complex, item) for item in document.get("complexes") or []],
    )
