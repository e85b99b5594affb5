"""Console sink for debugging and development."""

import json
from typing import Any

from catalog_sync.models.base import CatalogEvent
from catalog_sync.sinks.serialization import to_dict


class ConsoleSink:
    """Output catalog change events to console (stdout) for debugging."""

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output.
        max_records : int | None
            Maximum events to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def publish(self, events: list[CatalogEvent]) -> None:
        """Print a batch of change events."""
        print(f"\n{'='*60}")
        print(f"Catalog changes ({len(events)} events)")
        print("=" * 60)

        display_events = events[: self.max_records] if self.max_records else events

        for event in display_events:
            print(self._dumps(to_dict(event)))

        if self.max_records and len(events) > self.max_records:
            print(f"... and {len(events) - self.max_records} more events")

        for event in events:
            self._counts[event.event_type] = self._counts.get(event.event_type, 0) + 1

    def close(self) -> None:
        """Print summary and close."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for event_type, count in self._counts.items():
            print(f"  {event_type}: {count} events")

    def _dumps(self, data: Any) -> str:
        if self.pretty:
            return json.dumps(data, indent=2, ensure_ascii=False, default=str)
        return json.dumps(data, ensure_ascii=False, default=str)
