"""
Base protocol for document store clients.

This module defines the DocumentClient protocol that every store backend
must implement. Facades only talk to the store through it.

Invariants:
    - Documents are JSON-compatible dicts with a lowercase "id" field
    - create_document() assigns an id when the document's id is None
    - read_document() raises DocumentNotFoundError, never returns None
    - delete_document() of an absent document is a no-op
    - query_documents() evaluates the filter inside the store

How to change safely:
    - Protocol changes require updating all implementations
    - Keep error types stable; facades translate DocumentNotFoundError
"""

from __future__ import annotations

from abc import abstractmethod
from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterator,
    Dict,
    Optional,
    Protocol,
    runtime_checkable,
)
import logging

from ..filters import Filter

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


@runtime_checkable
class DocumentClient(Protocol):
    """Protocol for document store clients.

    Links address resources deterministically, see docmodel.collection:
    - collection_link: dbs/{database_id}/colls/{collection_id}
    - document_link: dbs/{database_id}/colls/{collection_id}/docs/{id}

    Consistency contract:
        - Whatever the backend provides; no read-your-writes guarantee is
          added by the facades

    Example:
        >>> client = InMemoryDocumentClient()
        >>> doc = await client.create_document("dbs/db/colls/c", {"id": None, "Type": "Tag"})
        >>> print(doc["id"])
    """

    @abstractmethod
    async def create_document(self, collection_link: str, document: Document) -> Document:
        """Create a document.

        Args:
            collection_link: Link of the target collection
            document: Document to store (id may be None)

        Returns:
            The stored document, including its id

        Raises:
            DocumentConflictError: If a document with the same id exists
            DocumentStoreError: For other failures
        """
        ...

    @abstractmethod
    async def upsert_document(self, collection_link: str, document: Document) -> Document:
        """Create or fully replace a document.

        Args:
            collection_link: Link of the target collection
            document: Document to store (id required)

        Returns:
            The stored document
        """
        ...

    @abstractmethod
    async def read_document(self, document_link: str) -> Document:
        """Read a document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        ...

    @abstractmethod
    async def delete_document(self, document_link: str) -> None:
        """Delete a document; deleting an absent document is a no-op."""
        ...

    @abstractmethod
    def query_documents(
        self,
        collection_link: str,
        where: Optional[Filter] = None,
    ) -> AsyncIterator[Document]:
        """Lazily query documents of a collection.

        Args:
            collection_link: Link of the collection to query
            where: Optional filter, evaluated by the store

        Yields:
            Matching documents, in store-defined order
        """
        ...


def create_document_client(settings: "Settings") -> DocumentClient:
    """Factory function to create a document client from settings.

    Args:
        settings: docmodel settings

    Returns:
        Appropriate DocumentClient implementation

    Raises:
        ValueError: If backend is not supported
    """
    from .memory import InMemoryDocumentClient
    from .sqlite import SqliteDocumentClient

    logger.info("Creating document client", extra={"backend": settings.backend})

    if settings.backend == "memory":
        return InMemoryDocumentClient()
    elif settings.backend == "sqlite":
        return SqliteDocumentClient(
            settings.data_dir,
            wal_mode=settings.wal_mode,
            busy_timeout_ms=settings.busy_timeout_ms,
        )
    else:
        raise ValueError(f"Unsupported document store backend: {settings.backend}")
