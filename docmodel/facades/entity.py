"""
Entity persistence facade.

CRUD and query operations for one entity type within one collection. Each
entity is stored in an EntityDocument whose id is namespaced with the type
discriminator, so entities of different types with equal ids never collide.

Example:
    >>> facade = EntityFacade(Database("app"), DocumentCollection("documents"), client, Task)
    >>> task = await facade.create(Task(title="Write docs"))
    >>> same = await facade.read(task.id)
    >>> async for open_task in facade.query(F("done") == False):
    ...     print(open_task.title)

Invariants:
    - create() fills an unset id through the identifier policy
    - upsert() never reaches the store with an unset id
    - read() returns None for absent entities instead of raising
    - Results are always round-tripped through the store, never echoed
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable, Generic, Optional, Type, TypeVar

from ..collection import Database, DocumentCollection
from ..documents import (
    ENTITY_FIELD,
    EntityDocument,
    get_document_id,
    get_document_type,
    serialize_id,
)
from ..errors import DocumentNotFoundError, UpsertRequiresIdentifierError
from ..filters import Filter
from ..identity import with_id
from ..model import Entity, is_unset_id
from ..store.base import Document, DocumentClient
from .base import CollectionBinding, PayloadMapping, scoped_filter

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound=Entity)
TDto = TypeVar("TDto")


class EntityFacade(CollectionBinding, Generic[TEntity, TDto]):
    """Persistence facade for one entity type.

    Multiple entity types can be stored transparently in one collection:
    documents carry a type discriminator and a namespaced id.

    Thread safety:
        Stateless apart from its configuration; safe to share between tasks.

    Args:
        database: Database descriptor
        collection: Collection descriptor (must not be partitioned)
        client: Document store client
        entity_type: Entity class
        dto_type: Wire class when the stored shape differs from the entity
        to_dto: Entity -> DTO mapping
        from_dto: DTO -> entity mapping
        document_type: Explicit type discriminator (defaults to the class name)

    Raises:
        PartitionedCollectionsNotSupportedError: If the collection is partitioned
    """

    def __init__(
        self,
        database: Database,
        collection: DocumentCollection,
        client: DocumentClient,
        entity_type: Type[TEntity],
        *,
        dto_type: Optional[Type[TDto]] = None,
        to_dto: Optional[Callable[[TEntity], TDto]] = None,
        from_dto: Optional[Callable[[TDto], TEntity]] = None,
        document_type: Optional[str] = None,
    ) -> None:
        super().__init__(database, collection, client)
        self._entity_type = entity_type
        self._id_type = entity_type.id_type()
        self._mapping: PayloadMapping[TEntity, TDto] = PayloadMapping(
            entity_type, dto_type, to_dto, from_dto
        )
        self._document_type = get_document_type(entity_type, document_type)

    @property
    def document_type(self) -> str:
        """Type discriminator of stored documents."""
        return self._document_type

    def get_document_id(self, entity_id: Any) -> str:
        """Namespaced document id for an entity id."""
        return get_document_id(entity_id, self._document_type, self._id_type)

    async def create(self, entity: TEntity) -> TEntity:
        """Create an entity.

        An unset id is generated first when the id type supports it.

        Args:
            entity: Entity to create

        Returns:
            The entity as stored

        Raises:
            UnsupportedIdentifierGenerationError: If the id is unset and cannot be generated
            DocumentConflictError: If an entity with the same id already exists
        """
        entity = with_id(entity)
        document = self._to_document(entity)

        stored = await self._client.create_document(self._collection_link(), document.to_dict())

        logger.debug(
            "Created entity",
            extra={"document_type": self._document_type, "document_id": document.id},
        )
        return self._from_document(stored)

    async def read(self, entity_id: Any) -> Optional[TEntity]:
        """Read an entity by id.

        Returns:
            The entity, or None if it does not exist
        """
        link = self._document_link(self.get_document_id(entity_id))
        try:
            stored = await self._client.read_document(link)
        except DocumentNotFoundError:
            return None
        return self._from_document(stored)

    async def upsert(self, entity: TEntity) -> TEntity:
        """Create or fully replace an entity (last writer wins).

        Raises:
            UpsertRequiresIdentifierError: If the entity id is unset
        """
        if is_unset_id(entity.id):
            raise UpsertRequiresIdentifierError(self._document_type)

        document = self._to_document(entity)
        stored = await self._client.upsert_document(self._collection_link(), document.to_dict())

        logger.debug(
            "Upserted entity",
            extra={"document_type": self._document_type, "document_id": document.id},
        )
        return self._from_document(stored)

    async def delete(self, entity_id: Any) -> None:
        """Delete an entity by id; deleting an absent entity is a no-op."""
        await self._client.delete_document(self._document_link(self.get_document_id(entity_id)))

    async def query(self, predicate: Optional[Filter] = None) -> AsyncIterator[TEntity]:
        """Query entities of this type.

        Args:
            predicate: Optional filter over the DTO shape, evaluated by the store

        Yields:
            Matching entities, in store-defined order
        """
        where = scoped_filter(self._document_type, ENTITY_FIELD, predicate)
        async for stored in self._client.query_documents(self._collection_link(), where):
            yield self._from_document(stored)

    def _to_document(self, entity: TEntity) -> EntityDocument[Any]:
        return EntityDocument.create(
            serialize_id(entity.id, self._id_type),
            self._document_type,
            self._mapping.dump(entity),
        )

    def _from_document(self, stored: Document) -> TEntity:
        return self._mapping.load(EntityDocument.from_dict(stored).entity)
