"""Run report returned by every reconciliation run."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RowError:
    """A feed row that was skipped, with its 1-based position."""

    row_index: int
    error: str
    external_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape (camelCase keys, optional externalId)."""
        data: dict[str, Any] = {"rowIndex": self.row_index}
        if self.external_id:
            data["externalId"] = self.external_id
        data["error"] = self.error
        return data


@dataclass
class RunReport:
    """Counts and row errors of one reconciliation run."""

    inserted: int = 0
    updated: int = 0
    hidden: int = 0
    errors: list[RowError] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Records written by the run."""
        return self.inserted + self.updated + self.hidden

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "inserted": self.inserted,
            "updated": self.updated,
            "hidden": self.hidden,
            "errors": [error.to_dict() for error in self.errors],
        }
