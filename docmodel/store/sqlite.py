"""
SQLite document client for docmodel.

This module stores JSON documents in one SQLite file per database. All
collections of a database share a single documents table, keyed by
(collection_id, id). Query filters are compiled to SQL over json_extract,
so predicates are evaluated inside SQLite rather than after loading every
document.

Invariants:
    - One SQLite file per database id; distinct ids never share a file
    - Every write runs in its own transaction
    - Upsert replaces the whole body and keeps the original insertion order
    - Unknown databases behave like empty ones for reads and queries

How to change safely:
    - Schema migrations must be backward compatible
    - Keep error types identical to the in-memory client
    - Use transactions for all write operations

Table schema:
    documents:
        - collection_id TEXT
        - id TEXT
        - body TEXT (JSON document)
        - created_at INTEGER (Unix ms)
        - updated_at INTEGER (Unix ms)
        - PRIMARY KEY (collection_id, id)
"""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Optional
from urllib.parse import quote

from ..collection import document_link, parse_collection_link, parse_document_link
from ..errors import DocumentConflictError, DocumentNotFoundError
from ..filters import Filter
from .base import Document

logger = logging.getLogger(__name__)


class SqliteDocumentClient:
    """SQLite-backed implementation of DocumentClient.

    Thread safety:
        Each operation opens its own connection.
        SQLite handles concurrent access via WAL mode.

    Example:
        >>> client = SqliteDocumentClient("/var/lib/docmodel")
        >>> doc = await client.create_document(
        ...     "dbs/app/colls/documents",
        ...     {"id": "Task_1", "Type": "Task", "Entity": {"id": "1"}},
        ... )
    """

    # SQLite schema version for migrations
    SCHEMA_VERSION = 1

    def __init__(
        self,
        data_dir: str,
        wal_mode: bool = True,
        busy_timeout_ms: int = 5000,
    ) -> None:
        """Initialize the client.

        Args:
            data_dir: Directory for SQLite database files
            wal_mode: Enable SQLite WAL mode
            busy_timeout_ms: SQLite busy timeout
        """
        self.data_dir = Path(data_dir)
        self.wal_mode = wal_mode
        self.busy_timeout_ms = busy_timeout_ms
        self._initialized: set[str] = set()
        self._lock = asyncio.Lock()

    def get_db_path(self, database_id: str) -> Path:
        """Get database file path for a database id."""
        # Percent-encoded: path-safe and distinct ids never share a file
        safe_id = quote(database_id, safe="-_")
        return self.data_dir / f"db_{safe_id}.db"

    def database_exists(self, database_id: str) -> bool:
        """Check if the database file exists."""
        return self.get_db_path(database_id).exists()

    @contextmanager
    def _get_connection(self, database_id: str) -> Iterator[sqlite3.Connection]:
        """Open a configured connection to a database file."""
        db_path = self.get_db_path(database_id)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            str(db_path),
            timeout=self.busy_timeout_ms / 1000.0,
            isolation_level=None,  # Autocommit by default, explicit transactions
        )
        conn.row_factory = sqlite3.Row

        try:
            conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout_ms}")
            if self.wal_mode:
                conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
            yield conn
        finally:
            conn.close()

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        """Create database schema."""
        conn.executescript(f"""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at INTEGER NOT NULL
            );

            CREATE TABLE IF NOT EXISTS documents (
                collection_id TEXT NOT NULL,
                id TEXT NOT NULL,
                body TEXT NOT NULL,
                created_at INTEGER NOT NULL,
                updated_at INTEGER NOT NULL,
                PRIMARY KEY (collection_id, id)
            );

            INSERT OR IGNORE INTO schema_version (version, applied_at)
            VALUES ({self.SCHEMA_VERSION}, strftime('%s', 'now') * 1000);
        """)

    async def _ensure_database(self, database_id: str) -> None:
        """Create the database file and schema on first write."""
        if database_id in self._initialized:
            return
        async with self._lock:
            if database_id in self._initialized:
                return
            with self._get_connection(database_id) as conn:
                self._create_schema(conn)
            self._initialized.add(database_id)
            logger.info("Initialized document database", extra={"database_id": database_id})

    async def create_document(self, collection_link: str, document: Document) -> Document:
        """Create a document, assigning an id if it has none.

        Raises:
            DocumentConflictError: If the id is already taken in the collection
        """
        database_id, collection_id = parse_collection_link(collection_link)
        stored = dict(document)
        if stored.get("id") is None:
            stored["id"] = str(uuid.uuid4())
        link = document_link(database_id, collection_id, stored["id"])
        now = int(time.time() * 1000)

        await self._ensure_database(database_id)
        with self._get_connection(database_id) as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                conn.execute(
                    """
                    INSERT INTO documents (collection_id, id, body, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (collection_id, stored["id"], json.dumps(stored), now, now),
                )
                conn.execute("COMMIT")
            except sqlite3.IntegrityError:
                conn.execute("ROLLBACK")
                raise DocumentConflictError(link)
            except Exception:
                conn.execute("ROLLBACK")
                raise

        logger.debug(
            "Created document",
            extra={"collection": collection_link, "document_id": stored["id"]},
        )
        return json.loads(json.dumps(stored))

    async def upsert_document(self, collection_link: str, document: Document) -> Document:
        """Create or fully replace a document."""
        database_id, collection_id = parse_collection_link(collection_link)
        if not document.get("id"):
            raise ValueError("Upserted documents must have an id")
        document_link(database_id, collection_id, document["id"])
        now = int(time.time() * 1000)

        await self._ensure_database(database_id)
        with self._get_connection(database_id) as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                conn.execute(
                    """
                    INSERT INTO documents (collection_id, id, body, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT (collection_id, id)
                    DO UPDATE SET body = excluded.body, updated_at = excluded.updated_at
                    """,
                    (collection_id, document["id"], json.dumps(document), now, now),
                )
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise

        logger.debug(
            "Upserted document",
            extra={"collection": collection_link, "document_id": document["id"]},
        )
        return json.loads(json.dumps(document))

    async def read_document(self, document_link: str) -> Document:
        """Read a document by link.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        database_id, collection_id, document_id = parse_document_link(document_link)
        if not self.database_exists(database_id):
            raise DocumentNotFoundError(document_link)

        await self._ensure_database(database_id)
        with self._get_connection(database_id) as conn:
            cursor = conn.execute(
                "SELECT body FROM documents WHERE collection_id = ? AND id = ?",
                (collection_id, document_id),
            )
            row = cursor.fetchone()
            if not row:
                raise DocumentNotFoundError(document_link)
            return json.loads(row["body"])

    async def delete_document(self, document_link: str) -> None:
        """Delete a document by link (no-op if absent)."""
        database_id, collection_id, document_id = parse_document_link(document_link)
        if not self.database_exists(database_id):
            return

        await self._ensure_database(database_id)
        with self._get_connection(database_id) as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                cursor = conn.execute(
                    "DELETE FROM documents WHERE collection_id = ? AND id = ?",
                    (collection_id, document_id),
                )
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise

        logger.debug(
            "Deleted document",
            extra={"document": document_link, "existed": cursor.rowcount > 0},
        )

    async def query_documents(
        self,
        collection_link: str,
        where: Optional[Filter] = None,
    ) -> AsyncIterator[Document]:
        """Yield documents of a collection matching the filter.

        The filter is compiled to SQL; rows are streamed from the cursor.
        """
        database_id, collection_id = parse_collection_link(collection_link)
        if not self.database_exists(database_id):
            return

        sql = "SELECT body FROM documents WHERE collection_id = ?"
        params: list[Any] = [collection_id]
        if where is not None:
            where_sql, where_params = where.to_sql("body")
            sql += f" AND ({where_sql})"
            params.extend(where_params)
        sql += " ORDER BY rowid"

        await self._ensure_database(database_id)
        with self._get_connection(database_id) as conn:
            cursor = conn.execute(sql, params)
            for row in cursor:
                yield json.loads(row["body"])

    async def list_document_types(self, collection_link: str) -> dict[str, int]:
        """Count documents per type discriminator in a collection.

        Returns:
            Mapping of type discriminator to document count
        """
        database_id, collection_id = parse_collection_link(collection_link)
        if not self.database_exists(database_id):
            return {}

        await self._ensure_database(database_id)
        with self._get_connection(database_id) as conn:
            cursor = conn.execute(
                """
                SELECT json_extract(body, '$.Type') AS type, COUNT(*) AS count
                FROM documents
                WHERE collection_id = ?
                GROUP BY json_extract(body, '$.Type')
                ORDER BY type
                """,
                (collection_id,),
            )
            return {row["type"]: row["count"] for row in cursor.fetchall()}
