"""JSON file catalog store."""

import json
import logging
import os
from pathlib import Path

from catalog_sync.exceptions import CatalogNotInitializedError, StoreError
from catalog_sync.models.catalog import Catalog
from catalog_sync.store.base import CatalogStore
from catalog_sync.store.serialization import catalog_from_document, catalog_to_document

logger = logging.getLogger(__name__)


class JsonFileCatalogStore(CatalogStore):
    """Keep the catalog in one JSON file, replaced atomically on save."""

    def __init__(
        self,
        path: str | Path,
        initialize_missing: bool = True,
        pretty: bool = True,
    ) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        path : str | Path
            Catalog file.
        initialize_missing : bool
            Start from an empty catalog when the file does not exist.
        pretty : bool
            Pretty-print JSON output.
        """
        self.path = Path(path)
        self.initialize_missing = initialize_missing
        self.pretty = pretty

    @property
    def lock_key(self) -> str:
        return str(self.path.resolve())

    def exists(self) -> bool:
        """Whether the catalog file exists."""
        return self.path.exists()

    def load(self) -> Catalog:
        """Read the catalog file."""
        if not self.path.exists():
            if self.initialize_missing:
                logger.info("No catalog at %s, starting empty", self.path)
                return Catalog()
            raise CatalogNotInitializedError(f"Catalog file {self.path} does not exist")

        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read catalog {self.path}: {e}") from e

        catalog = catalog_from_document(document)
        logger.debug("Loaded catalog %s: %s", self.path, catalog.summary())
        return catalog

    def save(self, catalog: Catalog) -> None:
        """Write the catalog through a temp file and an atomic rename."""
        document = catalog_to_document(catalog)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(document, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"Failed to write catalog {self.path}: {e}") from e

        logger.debug("Saved catalog %s: %s", self.path, catalog.summary())
