"""PostgreSQL catalog store: the catalog document in one JSONB row."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from catalog_sync.config import PostgresConfig
from catalog_sync.exceptions import CatalogNotInitializedError, StoreError
from catalog_sync.models.catalog import Catalog
from catalog_sync.store.base import CatalogStore, document_lock
from catalog_sync.store.serialization import catalog_from_document, catalog_to_document

logger = logging.getLogger(__name__)

DOCUMENT_ID = 1
EMPTY_DOCUMENT: dict[str, list] = {"listings": [], "complexes": []}


class PostgresCatalogStore(CatalogStore):
    """Keep the catalog document in ``<table>(id, data jsonb)``.

    :meth:`transaction` holds a row lock (``SELECT … FOR UPDATE``) from load
    to save, so runs are serialized across processes too.
    """

    def __init__(
        self,
        config: PostgresConfig | str,
        table: str = "app_data",
        initialize_missing: bool = True,
    ) -> None:
        """Initialize PostgreSQL store.

        Parameters
        ----------
        config : PostgresConfig | str
            Connection configuration or connection string.
        table : str
            Table holding the document (ignored when ``config`` names one).
        initialize_missing : bool
            Create an empty document when none exists.
        """
        if isinstance(config, PostgresConfig):
            self.conninfo = config.connection_string
            self.table = config.table
        else:
            self.conninfo = config
            self.table = table
        self.initialize_missing = initialize_missing

    @property
    def lock_key(self) -> str:
        return f"{self.conninfo}#{self.table}"

    def _connect(self) -> psycopg.Connection:
        return psycopg.connect(self.conninfo)

    def ensure_schema(self) -> None:
        """Create the document table if needed."""
        query = sql.SQL(
            "CREATE TABLE IF NOT EXISTS {} (id integer PRIMARY KEY, data jsonb NOT NULL)"
        ).format(sql.Identifier(self.table))
        try:
            with self._connect() as conn:
                conn.execute(query)
        except psycopg.Error as e:
            raise StoreError(f"Failed to create table {self.table}: {e}") from e

    def _select(self, cur: psycopg.Cursor, for_update: bool) -> Any:
        query = sql.SQL("SELECT data FROM {} WHERE id = %s").format(sql.Identifier(self.table))
        if for_update:
            query = query + sql.SQL(" FOR UPDATE")
        cur.execute(query, (DOCUMENT_ID,))
        row = cur.fetchone()
        return row[0] if row else None

    def _insert_empty(self, cur: psycopg.Cursor) -> None:
        cur.execute(
            sql.SQL("INSERT INTO {} (id, data) VALUES (%s, %s) ON CONFLICT (id) DO NOTHING").format(
                sql.Identifier(self.table)
            ),
            (DOCUMENT_ID, Jsonb(EMPTY_DOCUMENT)),
        )

    def _upsert(self, cur: psycopg.Cursor, catalog: Catalog) -> None:
        cur.execute(
            sql.SQL(
                "INSERT INTO {} (id, data) VALUES (%s, %s) "
                "ON CONFLICT (id) DO UPDATE SET data = EXCLUDED.data"
            ).format(sql.Identifier(self.table)),
            (DOCUMENT_ID, Jsonb(catalog_to_document(catalog))),
        )

    def _to_catalog(self, document: Any) -> Catalog:
        if document is None:
            if self.initialize_missing:
                return Catalog()
            raise CatalogNotInitializedError(f"No catalog document in {self.table}")
        return catalog_from_document(document)

    def load(self) -> Catalog:
        """Read the catalog document."""
        try:
            with self._connect() as conn, conn.cursor() as cur:
                document = self._select(cur, for_update=False)
        except psycopg.Error as e:
            raise StoreError(f"Failed to read catalog from {self.table}: {e}") from e
        return self._to_catalog(document)

    def save(self, catalog: Catalog) -> None:
        """Replace the catalog document."""
        try:
            with self._connect() as conn, conn.cursor() as cur:
                self._upsert(cur, catalog)
        except psycopg.Error as e:
            raise StoreError(f"Failed to write catalog to {self.table}: {e}") from e
        logger.debug("Saved catalog to %s: %s", self.table, catalog.summary())

    @contextmanager
    def transaction(self, source_id: str) -> Iterator[Catalog]:
        """Load under a row lock, yield for mutation, save and commit.

        The database transaction rolls back when the body raises.
        """
        with document_lock(self.lock_key):
            try:
                with self._connect() as conn, conn.transaction(), conn.cursor() as cur:
                    if self.initialize_missing:
                        self._insert_empty(cur)
                    catalog = self._to_catalog(self._select(cur, for_update=True))
                    logger.debug("Catalog row in %s locked for %s", self.table, source_id)
                    yield catalog
                    self._upsert(cur, catalog)
            except psycopg.Error as e:
                raise StoreError(f"Catalog transaction on {self.table} failed: {e}") from e
