"""
In-memory document client for testing.

This module provides a simple in-memory store for:
- Unit tests
- Integration tests
- Local development without a database

Invariants:
    - All data is lost on process exit
    - Documents are copied through JSON on write and read, so callers never
      share mutable state with the store and payloads must be JSON-compatible
    - Queries iterate over a snapshot taken when iteration starts
    - Ordering is insertion order

How to change safely:
    - Keep behavior compatible with the DocumentClient protocol
    - Error types must match the SQLite client
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections import defaultdict
from typing import AsyncIterator, Dict, Optional

from ..collection import document_link, parse_collection_link, parse_document_link
from ..errors import DocumentConflictError, DocumentNotFoundError
from ..filters import Filter
from .base import Document

logger = logging.getLogger(__name__)


def _copy(document: Document) -> Document:
    return json.loads(json.dumps(document))


class InMemoryDocumentClient:
    """In-memory implementation of DocumentClient for testing.

    Collections spring into existence on first write; reading or querying
    an unknown collection behaves like an empty one.

    Thread safety:
        Uses an asyncio lock around mutations. Safe to use from
        multiple coroutines.

    Example:
        >>> client = InMemoryDocumentClient()
        >>> await client.upsert_document("dbs/db/colls/c", {"id": "a", "Type": "T"})
        >>> await client.read_document("dbs/db/colls/c/docs/a")
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._collections: Dict[tuple[str, str], Dict[str, Document]] = defaultdict(dict)
        self._lock = asyncio.Lock()

    async def create_document(self, collection_link: str, document: Document) -> Document:
        """Create a document, assigning an id if it has none."""
        key = parse_collection_link(collection_link)
        stored = _copy(document)
        if stored.get("id") is None:
            stored["id"] = str(uuid.uuid4())
        link = document_link(*key, stored["id"])

        async with self._lock:
            documents = self._collections[key]
            if stored["id"] in documents:
                raise DocumentConflictError(link)
            documents[stored["id"]] = stored

        logger.debug(
            "Created document",
            extra={"collection": collection_link, "document_id": stored["id"]},
        )
        return _copy(stored)

    async def upsert_document(self, collection_link: str, document: Document) -> Document:
        """Create or fully replace a document."""
        key = parse_collection_link(collection_link)
        stored = _copy(document)
        if not stored.get("id"):
            raise ValueError("Upserted documents must have an id")
        document_link(*key, stored["id"])

        async with self._lock:
            self._collections[key][stored["id"]] = stored

        logger.debug(
            "Upserted document",
            extra={"collection": collection_link, "document_id": stored["id"]},
        )
        return _copy(stored)

    async def read_document(self, document_link: str) -> Document:
        """Read a document by link."""
        database_id, collection_id, document_id = parse_document_link(document_link)
        documents = self._collections.get((database_id, collection_id), {})
        if document_id not in documents:
            raise DocumentNotFoundError(document_link)
        return _copy(documents[document_id])

    async def delete_document(self, document_link: str) -> None:
        """Delete a document by link (no-op if absent)."""
        database_id, collection_id, document_id = parse_document_link(document_link)
        async with self._lock:
            removed = self._collections.get((database_id, collection_id), {}).pop(document_id, None)

        logger.debug(
            "Deleted document",
            extra={"document": document_link, "existed": removed is not None},
        )

    async def query_documents(
        self,
        collection_link: str,
        where: Optional[Filter] = None,
    ) -> AsyncIterator[Document]:
        """Yield documents of a collection matching the filter."""
        key = parse_collection_link(collection_link)
        snapshot = list(self._collections.get(key, {}).values())
        for document in snapshot:
            if where is None or where.evaluate(document):
                yield _copy(document)

    # Testing helpers

    def count(self, collection_link: str) -> int:
        """Number of documents stored in a collection."""
        return len(self._collections.get(parse_collection_link(collection_link), {}))

    def clear(self) -> None:
        """Drop all collections."""
        self._collections.clear()
