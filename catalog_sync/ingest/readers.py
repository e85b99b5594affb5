"""Read materialized feed rows from JSON or CSV files."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from catalog_sync.exceptions import ConfigurationError

# Keys under which exported feeds wrap their row list
ROW_CONTAINER_KEYS = ("rows", "offers", "items", "offer")


def read_rows(path: str | Path) -> list[dict[str, Any]]:
    """Load feed rows from a ``.json`` or ``.csv`` file.

    JSON may be a list of objects or an object wrapping the list under one
    of ``ROW_CONTAINER_KEYS``. CSV rows keep every value as text.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        with open(path, encoding="utf-8-sig", newline="") as f:
            return [dict(row) for row in csv.DictReader(f)]

    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            for key in ROW_CONTAINER_KEYS:
                if key in data:
                    data = data[key]
                    break
        # A feed with one offer arrives as a single object
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise ConfigurationError(f"{path} does not contain a list of rows")
        return [row for row in data if isinstance(row, dict)]

    raise ConfigurationError(f"Unsupported feed file type: {path.suffix or path.name}")
