"""Catalog stores: whole-document load and save."""

from catalog_sync.config import CatalogSyncConfig
from catalog_sync.store.base import CatalogStore
from catalog_sync.store.json_file import JsonFileCatalogStore
from catalog_sync.store.postgres import PostgresCatalogStore


def create_store(config: CatalogSyncConfig) -> CatalogStore:
    """Build the store selected by ``config.store.backend``."""
    if config.store.backend == "postgres":
        return PostgresCatalogStore(
            config.postgres, initialize_missing=config.store.initialize_missing
        )
    return JsonFileCatalogStore(
        config.store.json_path, initialize_missing=config.store.initialize_missing
    )


__all__ = ["CatalogStore", "JsonFileCatalogStore", "PostgresCatalogStore", "create_store"]
