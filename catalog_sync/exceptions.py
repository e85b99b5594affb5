"""Custom exception hierarchy for catalog-sync."""


class CatalogSyncError(Exception):
    """Base exception for all catalog-sync errors."""


class ConfigurationError(CatalogSyncError):
    """Raised when configuration is invalid or missing."""


class RowValidationError(CatalogSyncError):
    """Raised when a feed row cannot become a catalog record."""

    def __init__(self, message: str, external_id: str | None = None) -> None:
        super().__init__(message)
        self.external_id = external_id


class StoreError(CatalogSyncError):
    """Raised when the catalog cannot be loaded or saved."""


class CatalogNotInitializedError(StoreError):
    """Raised when no catalog document exists yet."""


class SinkError(CatalogSyncError):
    """Raised when a sink operation fails."""
