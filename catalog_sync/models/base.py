"""Base models shared across the catalog."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# A feed row: field name -> raw value (str, number, bool, None, nested
# mapping or list). Only the ingest layer looks inside it.
Row = Mapping[str, Any]


@dataclass
class CatalogEvent:
    """Standard event envelope for catalog changes."""

    event_id: str
    event_type: str  # kind.action (e.g., listings.hidden)
    event_time: datetime
    source: str  # Feed source id
    subject: str  # External id affected
    data: dict
    metadata: dict = field(default_factory=dict)
