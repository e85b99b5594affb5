#!/usr/bin/env python3
"""Import a materialized feed file into the catalog.

Usage:
    python scripts/run_import.py feed.json --source developer-a
    python scripts/run_import.py offers.json --source yandex-main --schema yandex --kinds all
    python scripts/run_import.py lots.csv --source crm --mapping '{"price": "Цена"}'
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from catalog_sync.config import CatalogSyncConfig, SourceConfig, StoreConfig
from catalog_sync.exceptions import CatalogSyncError
from catalog_sync.importer import DEFAULT_KINDS, CatalogImporter
from catalog_sync.ingest.readers import read_rows
from catalog_sync.logging import get_logger, setup_logging
from catalog_sync.models.enums import EntityKind, FeedSchema
from catalog_sync.sinks import ConsoleSink, KafkaSink
from catalog_sync.store import PostgresCatalogStore, create_store

logger = get_logger(__name__)

KIND_CHOICES = {
    "listings": (EntityKind.LISTINGS,),
    "complexes": (EntityKind.COMPLEXES,),
    "all": DEFAULT_KINDS,
}


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Import a feed file into the catalog")
    parser.add_argument("feed", type=Path, help="Feed file (.json or .csv)")
    parser.add_argument("--source", required=True, help="Stable source id of the feed")
    parser.add_argument(
        "--schema",
        choices=[schema.value for schema in FeedSchema],
        default=FeedSchema.GENERIC.value,
        help="Row schema (default: generic)",
    )
    parser.add_argument(
        "--kinds",
        choices=list(KIND_CHOICES),
        default="listings",
        help="Entity kinds to reconcile (default: listings)",
    )
    parser.add_argument(
        "--mapping",
        type=str,
        default=None,
        help="JSON object of canonical field -> feed column (overrides FIELD_MAPPING)",
    )
    parser.add_argument(
        "--backend",
        choices=["json", "postgres"],
        default=None,
        help="Catalog backend (overrides CATALOG_BACKEND)",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Catalog JSON file for the json backend (overrides CATALOG_PATH)",
    )
    parser.add_argument(
        "--print-events",
        action="store_true",
        help="Print change events to stdout instead of publishing to Kafka",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()
    config = CatalogSyncConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    try:
        if args.backend or args.catalog:
            config.store = StoreConfig(
                backend=args.backend or config.store.backend,
                json_path=args.catalog or config.store.json_path,
                initialize_missing=config.store.initialize_missing,
            )
        mapping = json.loads(args.mapping) if args.mapping else config.mapping
        source = SourceConfig(source_id=args.source, schema=args.schema, mapping=mapping)
        rows = read_rows(args.feed)

        store = create_store(config)
        if isinstance(store, PostgresCatalogStore) and config.store.initialize_missing:
            store.ensure_schema()

        if args.print_events:
            sink = ConsoleSink(pretty=False)
        elif config.kafka is not None:
            sink = KafkaSink(config.kafka)
        else:
            sink = None

        importer = CatalogImporter(store, sink=sink)
        try:
            reports = importer.import_feed(source, rows, KIND_CHOICES[args.kinds])
        finally:
            if sink is not None:
                sink.close()
    except (CatalogSyncError, json.JSONDecodeError, OSError) as e:
        logger.error("Import failed: %s", e)
        return 1

    print(
        json.dumps(
            {kind.value: report.to_dict() for kind, report in reports.items()},
            indent=2,
            ensure_ascii=False,
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
