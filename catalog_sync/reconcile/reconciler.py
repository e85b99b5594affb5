"""Catalog reconciliation: idempotent upsert plus hide-on-disappearance.

One run covers one entity kind of one source. Candidates matching a stored
record by external id overwrite it field by field; new ones are prepended
with a fresh id; stored active records the run did not see become hidden.
Records are never deleted here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TypeVar

from catalog_sync.ingest.aggregate import aggregate_complexes
from catalog_sync.ingest.listings import build_listing_candidates
from catalog_sync.models.base import CatalogEvent, Row
from catalog_sync.models.catalog import Catalog, Complex, Listing
from catalog_sync.models.enums import ChangeAction, EntityKind, Status
from catalog_sync.models.report import RowError, RunReport
from catalog_sync.sinks.serialization import to_dict
from catalog_sync.utils.ids import new_id

logger = logging.getLogger(__name__)

Record = TypeVar("Record", Listing, Complex)


@dataclass
class ReconcileResult:
    """Report of one run plus the change events it produced."""

    report: RunReport = field(default_factory=RunReport)
    events: list[CatalogEvent] = field(default_factory=list)


def merge(existing: Record, candidate: Record) -> Record:
    """Overwrite a stored record with a freshly derived one.

    Every candidate field wins; the stored id and extra keys survive.
    """
    return replace(candidate, id=existing.id, extra=existing.extra)


def _records(catalog: Catalog, kind: EntityKind) -> list:
    if kind == EntityKind.LISTINGS:
        return catalog.listings
    return catalog.complexes


def _set_records(catalog: Catalog, kind: EntityKind, records: list) -> None:
    if kind == EntityKind.LISTINGS:
        catalog.listings = records
    else:
        catalog.complexes = records


def _event(kind: EntityKind, action: ChangeAction, record: Listing | Complex, now: datetime) -> CatalogEvent:
    return CatalogEvent(
        event_id=new_id(),
        event_type=f"{kind.value}.{action.value}",
        event_time=now,
        source=record.source_id,
        subject=record.external_id,
        data=to_dict(record),
    )


def reconcile(
    catalog: Catalog,
    kind: EntityKind,
    source_id: str,
    candidates: Sequence[Record],
    *,
    now: datetime,
    id_factory: Callable[[], str] = new_id,
    keep: Iterable[str] = (),
) -> ReconcileResult:
    """Upsert candidates of one source into the catalog and hide the missing.

    Parameters
    ----------
    catalog : Catalog
        Loaded catalog; its record list for ``kind`` is replaced.
    kind : EntityKind
        Which collection to reconcile.
    source_id : str
        Feed being reconciled. Other sources are never touched.
    candidates : Sequence[Record]
        Freshly derived records without ids.
    now : datetime
        Timestamp for hidden records.
    id_factory : Callable[[], str]
        Generates ids for inserted records.
    keep : Iterable[str]
        External ids to leave visible although no candidate carries them,
        e.g. rows of this run that failed validation.

    Returns
    -------
    ReconcileResult
        Counts and change events.
    """
    result = ReconcileResult()
    report = result.report

    stored = list(_records(catalog, kind))
    inserted: list[Record] = []
    # external id -> (collection, position); later duplicates update the first
    index: dict[str, tuple[list, int]] = {
        record.external_id: (stored, pos)
        for pos, record in enumerate(stored)
        if record.source_id == source_id
    }
    seen: set[str] = set(keep)
    # Each external id is counted once per run, however often it repeats
    counted: set[str] = set()

    for candidate in candidates:
        seen.add(candidate.external_id)
        match = index.get(candidate.external_id)
        if match is not None:
            collection, pos = match
            collection[pos] = merge(collection[pos], candidate)
            if candidate.external_id not in counted:
                counted.add(candidate.external_id)
                report.updated += 1
            result.events.append(_event(kind, ChangeAction.UPDATED, collection[pos], now))
        else:
            record = replace(candidate, id=id_factory())
            index[record.external_id] = (inserted, len(inserted))
            inserted.append(record)
            counted.add(record.external_id)
            report.inserted += 1
            result.events.append(_event(kind, ChangeAction.INSERTED, record, now))

    for pos, record in enumerate(stored):
        if record.source_id != source_id or record.external_id in seen:
            continue
        if record.status == Status.ACTIVE:
            stored[pos] = replace(record, status=Status.HIDDEN, updated_at=now)
            report.hidden += 1
            result.events.append(_event(kind, ChangeAction.HIDDEN, stored[pos], now))

    # Each insert is prepended, so the latest insert comes first
    _set_records(catalog, kind, inserted[::-1] + stored)

    logger.info(
        "Reconciled %s for %s: inserted=%d, updated=%d, hidden=%d",
        kind.value,
        source_id,
        report.inserted,
        report.updated,
        report.hidden,
    )
    return result


def link_complexes(catalog: Catalog, source_id: str, listings: Iterable[Listing]) -> list[Listing]:
    """Point listings at their stored complex of the same source, if any."""
    complex_ids = {item.external_id: item.id for item in catalog.complexes_for(source_id)}
    return [
        replace(listing, complex_id=complex_ids.get(listing.complex_external_id))
        if listing.complex_external_id
        else listing
        for listing in listings
    ]


def reconcile_listings(
    catalog: Catalog,
    source_id: str,
    rows: Iterable[Row],
    mapping: Mapping[str, str] | None = None,
    *,
    now: datetime,
    id_factory: Callable[[], str] = new_id,
) -> ReconcileResult:
    """Validate listing rows and reconcile them into the catalog.

    Rejected rows are reported and neither inserted nor updated. A rejected
    row whose external id resolved still keeps its stored listing visible.
    """
    batch = build_listing_candidates(rows, source_id, mapping, now=now)
    candidates = link_complexes(catalog, source_id, batch.candidates)
    result = reconcile(
        catalog,
        EntityKind.LISTINGS,
        source_id,
        candidates,
        now=now,
        id_factory=id_factory,
        keep=batch.rejected_ids,
    )
    result.report.errors.extend(batch.errors)
    return result


def reconcile_complexes(
    catalog: Catalog,
    source_id: str,
    rows: Iterable[Row],
    mapping: Mapping[str, str] | None = None,
    *,
    now: datetime,
    id_factory: Callable[[], str] = new_id,
) -> ReconcileResult:
    """Aggregate rows into complexes and reconcile them into the catalog."""
    errors: list[RowError] = []
    candidates = aggregate_complexes(rows, source_id, mapping, now=now, errors=errors)
    result = reconcile(
        catalog, EntityKind.COMPLEXES, source_id, candidates, now=now, id_factory=id_factory
    )
    result.report.errors.extend(errors)
    return result
