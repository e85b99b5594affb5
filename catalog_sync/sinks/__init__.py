"""Output sinks for catalog change events."""

from catalog_sync.sinks.console import ConsoleSink
from catalog_sync.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "KafkaSink"]
