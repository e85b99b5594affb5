"""Catalog store contract: read the whole catalog, write the whole catalog."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from catalog_sync.models.catalog import Catalog

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_document_locks: dict[str, threading.Lock] = {}


def document_lock(key: str) -> threading.Lock:
    """Process-wide lock for one catalog document."""
    with _registry_lock:
        lock = _document_locks.get(key)
        if lock is None:
            lock = _document_locks[key] = threading.Lock()
        return lock


class CatalogStore(ABC):
    """Whole-document catalog persistence.

    Runs must go through :meth:`transaction`: a load and a save around
    unsynchronized mutation would silently drop a concurrent run's changes.
    The catalog is one document, so runs are serialized per document, which
    also serializes them per source.
    """

    @property
    @abstractmethod
    def lock_key(self) -> str:
        """Identity of the underlying document."""

    @abstractmethod
    def load(self) -> Catalog:
        """Read the whole catalog."""

    @abstractmethod
    def save(self, catalog: Catalog) -> None:
        """Replace the whole catalog."""

    @contextmanager
    def transaction(self, source_id: str) -> Iterator[Catalog]:
        """Load the catalog, yield it for mutation, then save it.

        Nothing is saved when the body raises.

        Parameters
        ----------
        source_id : str
            Source the run belongs to (for logging).

        Yields
        ------
        Catalog
            The loaded catalog.
        """
        with document_lock(self.lock_key):
            logger.debug("Catalog %s locked for %s", self.lock_key, source_id)
            catalog = self.load()
            yield catalog
            self.save(catalog)
