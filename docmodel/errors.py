"""
Error types for docmodel.

This module defines all exception types raised by the library:
- DocModelError: Base exception
- PartitionedCollectionsNotSupportedError: Facade bound to a partitioned collection
- UnsupportedIdentifierGenerationError: Id type cannot be generated automatically
- UpsertRequiresIdentifierError: Upsert attempted with an unset id
- PutRequiresIdentifierError: Repository put attempted with a blank id
- DocumentStoreError: Base for failures reported by a document client
- DocumentNotFoundError: Document does not exist
- DocumentConflictError: Document with the same id already exists
- UnsupportedFilterError: Filter cannot be evaluated by a store

Invariants:
    - All errors inherit from DocModelError
    - Precondition errors are raised before any store call
    - Store errors are propagated verbatim, never retried
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DocModelError(Exception):
    """Base exception for all docmodel errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "DOCMODEL_ERROR"
        self.details = details or {}


class PartitionedCollectionsNotSupportedError(DocModelError):
    """A facade or repository was bound to a partitioned collection.

    Partition-key aware id routing is not implemented, so the check runs
    once at construction time.
    """

    def __init__(self, collection_id: str, paths: tuple[str, ...] = ()) -> None:
        super().__init__(
            "Partitioned collections are not supported.",
            code="PARTITIONED_COLLECTION",
            details={"collection_id": collection_id, "paths": list(paths)},
        )
        self.collection_id = collection_id
        self.paths = paths


class UnsupportedIdentifierGenerationError(DocModelError):
    """The entity id is unset and its type cannot be generated.

    Raised when:
    - The id type is not str, UUID or a StringConvertibleId
    - The id type's from_string conversion fails

    Attributes:
        id_type: The offending identifier type
    """

    def __init__(self, id_type: Any) -> None:
        type_name = getattr(id_type, "__name__", repr(id_type))
        super().__init__(
            f"Automatic generation of {type_name} ID not supported.",
            code="UNSUPPORTED_ID_GENERATION",
            details={"id_type": type_name},
        )
        self.id_type = id_type


class UpsertRequiresIdentifierError(DocModelError):
    """Upsert was called with an entity whose id is unset."""

    def __init__(self, entity_type: str) -> None:
        super().__init__(
            "Upserting with default ID is not supported.",
            code="UPSERT_REQUIRES_ID",
            details={"entity_type": entity_type},
        )
        self.entity_type = entity_type


class PutRequiresIdentifierError(DocModelError):
    """Repository put was called with a blank id."""

    def __init__(self, entity_type: str) -> None:
        super().__init__(
            "An id must be specified to put.",
            code="PUT_REQUIRES_ID",
            details={"entity_type": entity_type},
        )
        self.entity_type = entity_type


class DocumentStoreError(DocModelError):
    """Failure reported by a document client.

    Raised when:
    - The store is unreachable
    - A write conflicts with an existing document
    - A document does not exist
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        link: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code=code or "STORE_ERROR",
            details={"link": link},
        )
        self.link = link


class DocumentNotFoundError(DocumentStoreError):
    """Document does not exist at the given link."""

    def __init__(self, link: str) -> None:
        super().__init__(f"Document not found: {link}", code="NOT_FOUND", link=link)


class DocumentConflictError(DocumentStoreError):
    """A document with the same id already exists in the collection."""

    def __init__(self, link: str) -> None:
        super().__init__(f"Document already exists: {link}", code="CONFLICT", link=link)


class UnsupportedFilterError(DocModelError):
    """Filter expression cannot be compiled for the target store."""

    def __init__(self, message: str, expression: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="UNSUPPORTED_FILTER",
            details={"expression": expression},
        )
        self.expression = expression
