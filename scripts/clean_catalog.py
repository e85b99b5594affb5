#!/usr/bin/env python3
"""Empty the catalog: drop every listing and complex of every source.

Usage:
    python scripts/clean_catalog.py --yes
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from catalog_sync.config import CatalogSyncConfig
from catalog_sync.exceptions import StoreError
from catalog_sync.importer import clear_catalog
from catalog_sync.logging import setup_logging
from catalog_sync.store import create_store


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Delete all catalog records")
    parser.add_argument("--yes", action="store_true", help="Confirm deletion")
    args = parser.parse_args()

    if not args.yes:
        print("Refusing to clean the catalog without --yes")
        return 2

    config = CatalogSyncConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    try:
        before, after = clear_catalog(create_store(config))
    except StoreError as e:
        print(f"Clean failed: {e}")
        return 1

    print(f"Before: {before['listings']} listings, {before['complexes']} complexes")
    print(f"After: {after['listings']} listings, {after['complexes']} complexes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
