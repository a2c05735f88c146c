"""
Collection descriptors and resource links.

A facade is bound to one (database, collection) pair. The descriptors here
carry the identifiers plus the collection's partition key definition, which
is checked once when a facade is constructed.

Links are deterministic locator strings derived from the identifiers:

    dbs/{database_id}/colls/{collection_id}
    dbs/{database_id}/colls/{collection_id}/docs/{document_id}

Invariants:
    - A link can always be parsed back into the ids it was built from
    - Document ids may contain any character except '/'
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import PartitionedCollectionsNotSupportedError


@dataclass(frozen=True)
class Database:
    """Database descriptor.

    Attributes:
        id: Database identifier
    """

    id: str


@dataclass(frozen=True)
class PartitionKeyDefinition:
    """Partition key of a collection.

    Attributes:
        paths: JSON paths making up the partition key (empty if unpartitioned)
    """

    paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentCollection:
    """Collection descriptor.

    Attributes:
        id: Collection identifier
        partition_key: Partition key definition
    """

    id: str
    partition_key: PartitionKeyDefinition = field(default_factory=PartitionKeyDefinition)

    @property
    def is_partitioned(self) -> bool:
        """Whether the collection declares any partition key path."""
        return bool(self.partition_key.paths)


def ensure_unpartitioned(collection: DocumentCollection) -> None:
    """Reject a partitioned collection.

    Raises:
        PartitionedCollectionsNotSupportedError: If any partition key path is set
    """
    if collection.is_partitioned:
        raise PartitionedCollectionsNotSupportedError(collection.id, collection.partition_key.paths)


def collection_link(database_id: str, collection_id: str) -> str:
    """Build the link of a collection."""
    return f"dbs/{database_id}/colls/{collection_id}"


def document_link(database_id: str, collection_id: str, document_id: str) -> str:
    """Build the link of a document within a collection."""
    if "/" in document_id:
        raise ValueError(f"Document id cannot contain '/': {document_id!r}")
    return f"{collection_link(database_id, collection_id)}/docs/{document_id}"


def parse_collection_link(link: str) -> tuple[str, str]:
    """Split a collection link into (database_id, collection_id).

    Raises:
        ValueError: If the link is malformed
    """
    parts = link.strip("/").split("/")
    if len(parts) != 4 or parts[0] != "dbs" or parts[2] != "colls" or not parts[1] or not parts[3]:
        raise ValueError(f"Invalid collection link: {link!r}")
    return parts[1], parts[3]


def parse_document_link(link: str) -> tuple[str, str, str]:
    """Split a document link into (database_id, collection_id, document_id).

    Raises:
        ValueError: If the link is malformed
    """
    parts = link.strip("/").split("/")
    if len(parts) != 6 or parts[4] != "docs" or not parts[5]:
        raise ValueError(f"Invalid document link: {link!r}")
    database_id, collection_id = parse_collection_link("/".join(parts[:4]))
    return database_id, collection_id, parts[5]
