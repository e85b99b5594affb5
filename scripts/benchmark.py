#!/usr/bin/env python3
"""Benchmark feed reconciliation.

Measures:
- Sample feed generation rate
- Vendor normalization rate
- Listing and complex reconciliation against an empty and a filled catalog
- JSON catalog save/load time

Usage:
    python scripts/benchmark.py
    python scripts/benchmark.py --scale 50000 --complexes 40
"""

import argparse
import logging
import sys
import tempfile
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from catalog_sync.generators import FeedGenerator
from catalog_sync.ingest.vendors import normalize_rows
from catalog_sync.importer import utcnow
from catalog_sync.models.catalog import Catalog
from catalog_sync.models.enums import FeedSchema
from catalog_sync.reconcile import reconcile_complexes, reconcile_listings
from catalog_sync.store import JsonFileCatalogStore

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def _rate(count: int, seconds: float) -> str:
    return f"{count:>8,} in {seconds:.2f}s  ({count / max(seconds, 0.001):,.0f}/sec)"


def benchmark_reconcile(rows: list[dict], label: str) -> Catalog:
    """Reconcile the same rows twice: first all inserts, then all updates."""
    catalog = Catalog()
    for attempt in ("insert", "update"):
        t0 = time.perf_counter()
        complexes = reconcile_complexes(catalog, "bench", rows, now=utcnow())
        listings = reconcile_listings(catalog, "bench", rows, now=utcnow())
        elapsed = time.perf_counter() - t0
        print(
            f"  {label} {attempt:<6}  {_rate(len(rows), elapsed)}"
            f"  listings +{listings.report.inserted}/~{listings.report.updated}"
            f"  complexes +{complexes.report.inserted}/~{complexes.report.updated}"
        )
    return catalog


def main() -> None:
    """Run benchmarks."""
    parser = argparse.ArgumentParser(description="Benchmark catalog-sync performance")
    parser.add_argument("--scale", type=int, default=10_000, help="Number of feed rows (default: 10000)")
    parser.add_argument("--complexes", type=int, default=20, help="Number of complexes (default: 20)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    print("=" * 60)
    print(f"  catalog-sync Benchmark  |  scale={args.scale:,}  seed={args.seed}")
    print("=" * 60)

    print("\n[1] Feed Generation")
    generator = FeedGenerator(seed=args.seed, num_complexes=args.complexes)
    t0 = time.perf_counter()
    generic_rows = generator.generate(args.scale, FeedSchema.GENERIC)
    print(f"  Generic rows:  {_rate(len(generic_rows), time.perf_counter() - t0)}")
    t0 = time.perf_counter()
    yandex_rows = generator.generate(args.scale, FeedSchema.YANDEX)
    print(f"  Yandex rows:   {_rate(len(yandex_rows), time.perf_counter() - t0)}")

    print("\n[2] Vendor Normalization")
    t0 = time.perf_counter()
    normalized = normalize_rows(yandex_rows, FeedSchema.YANDEX)
    print(f"  Yandex -> generic  {_rate(len(normalized), time.perf_counter() - t0)}")

    print("\n[3] Reconciliation")
    benchmark_reconcile(generic_rows, "generic")
    catalog = benchmark_reconcile(normalized, "yandex ")

    print("\n[4] JSON Catalog")
    with tempfile.TemporaryDirectory() as tmp:
        store = JsonFileCatalogStore(Path(tmp) / "catalog.json", pretty=False)
        t0 = time.perf_counter()
        store.save(catalog)
        t_save = time.perf_counter() - t0
        t0 = time.perf_counter()
        loaded = store.load()
        t_load = time.perf_counter() - t0
    print(f"  Save: {t_save:.2f}s  Load: {t_load:.2f}s  ({loaded.summary()['listings']:,} listings)")

    print("\n" + "=" * 60)
    print("  Benchmark complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
