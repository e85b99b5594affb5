"""Vendor feed normalizers, keyed by feed schema."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from catalog_sync.exceptions import ConfigurationError
from catalog_sync.ingest.vendors.yandex import normalize_yandex_realty
from catalog_sync.models.base import Row
from catalog_sync.models.enums import FeedSchema

NORMALIZERS: dict[FeedSchema, Callable[[Row], dict[str, Any]]] = {
    FeedSchema.YANDEX: normalize_yandex_realty,
}


def normalize_rows(rows: Iterable[Row], schema: FeedSchema | str = FeedSchema.GENERIC) -> list[Row]:
    """Bring rows of any supported schema into the generic row shape.

    Generic rows pass through untouched.
    """
    try:
        schema = FeedSchema(schema)
    except ValueError as e:
        raise ConfigurationError(f"Unknown feed schema {schema!r}") from e

    if schema == FeedSchema.GENERIC:
        return list(rows)
    normalizer = NORMALIZERS[schema]
    return [normalizer(row) for row in rows]


__all__ = ["NORMALIZERS", "normalize_rows", "normalize_yandex_realty"]
