"""Tests for catalog reconciliation."""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Any

from catalog_sync.models.catalog import Catalog, Complex, Listing
from catalog_sync.models.enums import EntityKind, Status
from catalog_sync.reconcile import (
    link_complexes,
    merge,
    reconcile,
    reconcile_complexes,
    reconcile_listings,
)


class TestMerge:
    """Tests for merge."""

    def test_candidate_fields_win(self, make_listing: Callable[..., Listing]) -> None:
        existing = make_listing("lot-1", record_id="rec-1", price=1.0, district="САО")
        candidate = make_listing("lot-1", price=2.0, district="")

        merged = merge(existing, candidate)

        assert merged.id == "rec-1"
        assert merged.price == 2.0
        assert merged.district == ""

    def test_extra_keys_survive(self, make_listing: Callable[..., Listing]) -> None:
        existing = make_listing("lot-1", record_id="rec-1", extra={"is_euroflat": True})
        candidate = make_listing("lot-1", price=2.0)

        merged = merge(existing, candidate)

        assert merged.extra == {"is_euroflat": True}
        assert merged.price == 2.0

    def test_inputs_untouched(self, make_listing: Callable[..., Listing]) -> None:
        existing = make_listing("lot-1", record_id="rec-1", price=1.0)
        candidate = make_listing("lot-1", price=2.0)

        merge(existing, candidate)

        assert existing.price == 1.0
        assert candidate.id == ""


class TestReconcile:
    """Tests for the generic reconcile step."""

    def test_inserts_into_empty_catalog(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()
        candidates = [make_listing("a"), make_listing("b")]

        result = reconcile(catalog, EntityKind.LISTINGS, "developer-a", candidates, now=now, id_factory=id_factory)

        assert (result.report.inserted, result.report.updated, result.report.hidden) == (2, 0, 0)
        # Latest insert first
        assert [item.external_id for item in catalog.listings] == ["b", "a"]
        assert [item.id for item in catalog.listings] == ["rec-2", "rec-1"]

    def test_inserts_prepended_before_stored(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(listings=[make_listing("old", record_id="x")])

        reconcile(catalog, EntityKind.LISTINGS, "developer-a", [make_listing("old"), make_listing("new")], now=now, id_factory=id_factory)

        assert [item.external_id for item in catalog.listings] == ["new", "old"]

    def test_update_keeps_id_and_position(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(listings=[make_listing("a", record_id="keep-a"), make_listing("b", record_id="keep-b")])

        result = reconcile(
            catalog, EntityKind.LISTINGS, "developer-a", [make_listing("a", price=5.0), make_listing("b")], now=now, id_factory=id_factory
        )

        assert result.report.updated == 2
        assert [item.id for item in catalog.listings] == ["keep-a", "keep-b"]
        assert catalog.listings[0].price == 5.0

    def test_hides_missing_records(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(listings=[make_listing("a", record_id="1"), make_listing("gone", record_id="2")])

        result = reconcile(catalog, EntityKind.LISTINGS, "developer-a", [make_listing("a")], now=now, id_factory=id_factory)

        assert result.report.hidden == 1
        gone = catalog.listings[1]
        assert gone.status == Status.HIDDEN
        assert gone.updated_at == now
        assert gone.id == "2"

    def test_hidden_not_hidden_again(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(
            listings=[
                make_listing("hidden", record_id="1", status=Status.HIDDEN),
                make_listing("archived", record_id="2", status=Status.ARCHIVED),
            ]
        )

        result = reconcile(catalog, EntityKind.LISTINGS, "developer-a", [], now=now, id_factory=id_factory)

        assert result.report.hidden == 0
        assert catalog.listings[1].status == Status.ARCHIVED
        assert result.events == []

    def test_other_sources_untouched(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        other = make_listing("a", source_id="developer-b", record_id="other")
        catalog = Catalog(listings=[other])

        result = reconcile(catalog, EntityKind.LISTINGS, "developer-a", [make_listing("a")], now=now, id_factory=id_factory)

        assert result.report.inserted == 1
        assert result.report.hidden == 0
        assert catalog.listings[1] == other

    def test_reappearing_record_reactivated(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(listings=[make_listing("a", record_id="1", status=Status.HIDDEN)])

        reconcile(catalog, EntityKind.LISTINGS, "developer-a", [make_listing("a")], now=now, id_factory=id_factory)

        assert catalog.listings[0].status == Status.ACTIVE
        assert catalog.listings[0].id == "1"

    def test_duplicate_in_batch_updates_first_insert(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()

        result = reconcile(
            catalog, EntityKind.LISTINGS, "developer-a", [make_listing("a", price=1.0), make_listing("a", price=2.0)], now=now, id_factory=id_factory
        )

        assert (result.report.inserted, result.report.updated) == (1, 0)
        assert len(catalog.listings) == 1
        assert catalog.listings[0].price == 2.0
        assert catalog.listings[0].id == "rec-1"

    def test_duplicate_in_batch_counted_once(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(listings=[make_listing("a", record_id="1")])

        result = reconcile(
            catalog, EntityKind.LISTINGS, "developer-a", [make_listing("a", price=1.0), make_listing("a", price=2.0)], now=now, id_factory=id_factory
        )

        assert (result.report.inserted, result.report.updated) == (0, 1)
        assert catalog.listings[0].price == 2.0
        assert len(result.events) == 2

    def test_keep_leaves_record_visible(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(listings=[make_listing("a", record_id="1"), make_listing("b", record_id="2")])

        result = reconcile(catalog, EntityKind.LISTINGS, "developer-a", [], now=now, id_factory=id_factory, keep={"a"})

        assert result.report.hidden == 1
        assert [item.status for item in catalog.listings] == [Status.ACTIVE, Status.HIDDEN]

    def test_events(
        self, make_listing: Callable[..., Listing], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog(listings=[make_listing("a", record_id="1"), make_listing("gone", record_id="2")])

        result = reconcile(
            catalog, EntityKind.LISTINGS, "developer-a", [make_listing("a"), make_listing("new")], now=now, id_factory=id_factory
        )

        assert [(event.event_type, event.subject) for event in result.events] == [
            ("listings.updated", "a"),
            ("listings.inserted", "new"),
            ("listings.hidden", "gone"),
        ]
        hidden = result.events[2]
        assert hidden.source == "developer-a"
        assert hidden.event_time == now
        assert hidden.data["status"] == "hidden"
        assert hidden.data["id"] == "2"


class TestReconcileListings:
    """Tests for reconcile_listings."""

    def test_idempotent(
        self, generic_rows: list[dict[str, Any]], now: datetime, later: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()

        first = reconcile_listings(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)
        snapshot = [replace(item, last_seen_at=None, updated_at=None) for item in catalog.listings]
        second = reconcile_listings(catalog, "developer-a", generic_rows, now=later, id_factory=id_factory)

        assert (first.report.inserted, first.report.updated, first.report.hidden) == (3, 0, 0)
        assert (second.report.inserted, second.report.updated, second.report.hidden) == (0, 3, 0)
        assert [replace(item, last_seen_at=None, updated_at=None) for item in catalog.listings] == snapshot
        assert all(item.last_seen_at == later for item in catalog.listings)

    def test_disappearance_hides(
        self, generic_rows: list[dict[str, Any]], now: datetime, later: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()
        reconcile_listings(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)

        result = reconcile_listings(catalog, "developer-a", generic_rows[:2], now=later, id_factory=id_factory)

        assert (result.report.inserted, result.report.updated, result.report.hidden) == (0, 2, 1)
        statuses = {item.external_id: item.status for item in catalog.listings}
        assert statuses == {"lot-1": Status.ACTIVE, "lot-2": Status.ACTIVE, "lot-3": Status.HIDDEN}
        assert len(catalog.listings) == 3

    def test_invalid_row_keeps_listing_visible(
        self, generic_rows: list[dict[str, Any]], now: datetime, later: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()
        reconcile_listings(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)
        generic_rows[2]["price"] = ""

        result = reconcile_listings(catalog, "developer-a", generic_rows, now=later, id_factory=id_factory)

        assert result.report.hidden == 0
        assert result.report.updated == 2
        assert {item.external_id: item.status for item in catalog.listings}["lot-3"] == Status.ACTIVE
        assert [error.external_id for error in result.report.errors] == ["lot-3"]
        assert result.report.errors[0].row_index == 3

    def test_missing_price_reported(
        self, generic_rows: list[dict[str, Any]], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        del generic_rows[0]["price"]

        result = reconcile_listings(Catalog(), "developer-a", generic_rows, now=now, id_factory=id_factory)

        assert result.report.inserted == 2
        assert result.report.to_dict()["errors"][0]["rowIndex"] == 1

    def test_links_stored_complexes(
        self, generic_rows: list[dict[str, Any]], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()
        reconcile_complexes(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)
        complex_ids = {item.external_id: item.id for item in catalog.complexes}

        reconcile_listings(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)

        by_id = {item.external_id: item for item in catalog.listings}
        assert by_id["lot-1"].complex_id == complex_ids["zhk-sokol"]
        assert by_id["lot-3"].complex_id == complex_ids["zhk-vdnh"]


class TestReconcileComplexes:
    """Tests for reconcile_complexes."""

    def test_insert_then_update(
        self, generic_rows: list[dict[str, Any]], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()

        first = reconcile_complexes(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)
        second = reconcile_complexes(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)

        assert first.report.inserted == 2
        assert (second.report.inserted, second.report.updated) == (0, 2)
        assert [item.external_id for item in catalog.complexes] == ["zhk-vdnh", "zhk-sokol"]

    def test_complex_without_rows_hidden(
        self, generic_rows: list[dict[str, Any]], now: datetime, id_factory: Callable[[], str]
    ) -> None:
        catalog = Catalog()
        reconcile_complexes(catalog, "developer-a", generic_rows, now=now, id_factory=id_factory)

        result = reconcile_complexes(catalog, "developer-a", generic_rows[:2], now=now, id_factory=id_factory)

        assert result.report.hidden == 1
        hidden = [item for item in catalog.complexes if item.status == Status.HIDDEN]
        assert [item.external_id for item in hidden] == ["zhk-vdnh"]

    def test_ungroupable_row_reported(self, now: datetime, id_factory: Callable[[], str]) -> None:
        result = reconcile_complexes(Catalog(), "s", [{"title": "?"}], now=now, id_factory=id_factory)

        assert result.report.inserted == 0
        assert result.report.errors[0].row_index == 1


class TestLinkComplexes:
    """Tests for link_complexes."""

    def test_same_source_only(self, make_listing: Callable[..., Listing]) -> None:
        catalog = Catalog(
            complexes=[
                Complex(id="c-a", source_id="developer-a", external_id="zhk", slug="zhk", title="ЖК"),
                Complex(id="c-b", source_id="developer-b", external_id="other", slug="o", title="О"),
            ]
        )
        listings = [
            make_listing("1", complex_external_id="zhk"),
            make_listing("2", complex_external_id="other"),
            make_listing("3"),
        ]

        linked = link_complexes(catalog, "developer-a", listings)

        assert [item.complex_id for item in linked] == ["c-a", None, None]
