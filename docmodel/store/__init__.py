"""
Document store clients for docmodel.

This module provides the DocumentClient protocol that facades depend on,
plus two implementations:
- InMemoryDocumentClient (for tests and local development)
- SqliteDocumentClient (one SQLite file per database, filter pushdown via json_extract)

Invariants:
    - read_document() raises DocumentNotFoundError for absent documents
    - delete_document() of an absent document is a no-op
    - create_document() assigns an id when the document has none

How to change safely:
    - New backends must implement the DocumentClient protocol
    - Run the integration suite against every backend
"""

from .base import Document, DocumentClient, create_document_client
from .memory import InMemoryDocumentClient
from .sqlite import SqliteDocumentClient

__all__ = [
    # Protocol and types
    "DocumentClient",
    "Document",
    # Factory
    "create_document_client",
    # Implementations
    "InMemoryDocumentClient",
    "SqliteDocumentClient",
]
