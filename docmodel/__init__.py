"""
docmodel - typed persistence of domain objects in a document store.

Many entity and value object types share one document collection. Each
stored document carries a type discriminator, and entity documents are
keyed by a namespaced id, so types never see each other's data:
- EntityFacade: create/read/upsert/delete/query for identity-bearing objects
- ValueObjectFacade: create-if-absent/delete-if-present/query for values
- EntityRepository / ValueRepository: the same over caller-named types
- DocumentClient: the store boundary (in-memory and SQLite clients included)

Example:
    >>> from docmodel import Database, DocumentCollection, Entity, EntityFacade, F
    >>> from docmodel.store import InMemoryDocumentClient
    >>>
    >>> class Task(Entity):
    ...     id: str | None = None
    ...     title: str
    ...     done: bool = False
    >>>
    >>> tasks = EntityFacade(
    ...     Database("app"), DocumentCollection("documents"), InMemoryDocumentClient(), Task
    ... )
    >>> task = await tasks.create(Task(title="Write docs"))
    >>> async for open_task in tasks.query(F("done") == False):
    ...     print(open_task.title)

Invariants:
    - Documents are {"id", "Type", "Entity"|"ValueObject"} envelopes
    - Partitioned collections are rejected at construction
    - Entity ids are generated only for str, UUID and StringConvertibleId types

Version: 1.0.0
"""

__version__ = "1.0.0"

from .collection import (
    Database,
    DocumentCollection,
    PartitionKeyDefinition,
    collection_link,
    document_link,
)
from .config import Settings
from .documents import EntityDocument, ValueObjectDocument, get_document_id, get_document_type
from .errors import (
    DocModelError,
    DocumentConflictError,
    DocumentNotFoundError,
    DocumentStoreError,
    PartitionedCollectionsNotSupportedError,
    PutRequiresIdentifierError,
    UnsupportedFilterError,
    UnsupportedIdentifierGenerationError,
    UpsertRequiresIdentifierError,
)
from .facades import EntityFacade, EntityFacadeFactory, ValueObjectFacade, ValueObjectFacadeFactory
from .filters import F, Filter
from .identity import with_id
from .model import Entity, StringConvertibleId, ValueObject
from .repositories import (
    EntityRepository,
    EntityRepositoryFactory,
    ValueRepository,
    ValueRepositoryFactory,
)
from .store import DocumentClient, create_document_client

__all__ = [
    # Version
    "__version__",
    # Model
    "Entity",
    "ValueObject",
    "StringConvertibleId",
    "with_id",
    # Collections
    "Database",
    "DocumentCollection",
    "PartitionKeyDefinition",
    "collection_link",
    "document_link",
    # Documents
    "EntityDocument",
    "ValueObjectDocument",
    "get_document_id",
    "get_document_type",
    # Facades
    "EntityFacade",
    "ValueObjectFacade",
    "EntityFacadeFactory",
    "ValueObjectFacadeFactory",
    # Repositories
    "EntityRepository",
    "ValueRepository",
    "EntityRepositoryFactory",
    "ValueRepositoryFactory",
    # Queries
    "F",
    "Filter",
    # Store
    "DocumentClient",
    "create_document_client",
    # Configuration
    "Settings",
    # Errors
    "DocModelError",
    "DocumentStoreError",
    "DocumentNotFoundError",
    "DocumentConflictError",
    "PartitionedCollectionsNotSupportedError",
    "UnsupportedIdentifierGenerationError",
    "UpsertRequiresIdentifierError",
    "PutRequiresIdentifierError",
    "UnsupportedFilterError",
]
