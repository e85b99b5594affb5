"""Sample feed generators for demos, benchmarks and tests."""

from catalog_sync.generators.feed import FeedGenerator

__all__ = ["FeedGenerator"]
