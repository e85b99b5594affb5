"""Catalog reconciliation for listings and complexes."""

from catalog_sync.reconcile.reconciler import (
    ReconcileResult,
    link_complexes,
    merge,
    reconcile,
    reconcile_complexes,
    reconcile_listings,
)

__all__ = [
    "ReconcileResult",
    "link_complexes",
    "merge",
    "reconcile",
    "reconcile_complexes",
    "reconcile_listings",
]
