"""Tests for the exception hierarchy."""

import pytest

from catalog_sync.exceptions import (
    CatalogNotInitializedError,
    CatalogSyncError,
    ConfigurationError,
    RowValidationError,
    SinkError,
    StoreError,
)


class TestHierarchy:
    """Every error is catchable as CatalogSyncError."""

    @pytest.mark.parametrize(
        "exc_class",
        [ConfigurationError, RowValidationError, StoreError, CatalogNotInitializedError, SinkError],
    )
    def test_subclass_of_base(self, exc_class: type) -> None:
        assert issubclass(exc_class, CatalogSyncError)

    def test_not_initialized_is_store_error(self) -> None:
        with pytest.raises(StoreError):
            raise CatalogNotInitializedError("no catalog")


class TestRowValidationError:
    """Tests for RowValidationError."""

    def test_carries_external_id(self) -> None:
        error = RowValidationError("invalid required fields", external_id="lot-7")

        assert str(error) == "invalid required fields"
        assert error.external_id == "lot-7"

    def test_external_id_optional(self) -> None:
        assert RowValidationError("missing external_id").external_id is None
