"""Identifier and slug helpers."""

from catalog_sync.utils.ids import new_id, slugify

__all__ = ["new_id", "slugify"]
