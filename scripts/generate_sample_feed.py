#!/usr/bin/env python3
"""Generate a sample feed file for manual import runs.

Usage:
    python scripts/generate_sample_feed.py --rows 50 --out local/feed.json
    python scripts/generate_sample_feed.py --schema yandex --rows 20 --out local/offers.json
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from catalog_sync.generators import FeedGenerator
from catalog_sync.models.enums import FeedSchema


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample listing feed")
    parser.add_argument("--rows", type=int, default=50, help="Number of rows (default: 50)")
    parser.add_argument("--complexes", type=int, default=3, help="Number of complexes (default: 3)")
    parser.add_argument(
        "--schema",
        choices=[schema.value for schema in FeedSchema],
        default=FeedSchema.GENERIC.value,
        help="Row schema (default: generic)",
    )
    parser.add_argument("--rent-share", type=float, default=0.0, help="Share of rent lots (0-1)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--out", type=Path, default=Path("local") / "feed.json", help="Output file")
    args = parser.parse_args()

    generator = FeedGenerator(seed=args.seed, num_complexes=args.complexes, rent_share=args.rent_share)
    rows = generator.generate(args.rows, FeedSchema(args.schema))

    args.out.parent.mkdir(parents=True, exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2, ensure_ascii=False)
    print(f"Saved {len(rows)} {args.schema} rows to {args.out}")


if __name__ == "__main__":
    main()
