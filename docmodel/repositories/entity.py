"""
String-keyed entity repository.

A lighter sibling of EntityFacade for types that are not Entity subclasses:
the caller names the type discriminator and supplies a function that reads
the id from an object. Objects are written with put (create or replace);
ids are never generated.

Invariants:
    - put() never reaches the store with a blank id
    - Documents share the envelope format of EntityFacade, so both can read
      each other's documents when they agree on the type discriminator
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable, Generic, Optional, TypeVar

from ..collection import Database, DocumentCollection
from ..documents import ENTITY_FIELD, EntityDocument, create_document_id
from ..errors import DocumentNotFoundError, PutRequiresIdentifierError
from ..facades.base import CollectionBinding, PayloadMapping, scoped_filter
from ..filters import Filter
from ..store.base import DocumentClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityRepository(CollectionBinding, Generic[T]):
    """Repository for objects identified by a string id.

    Args:
        client: Document store client
        database: Database descriptor
        collection: Collection descriptor (must not be partitioned)
        entity_type: Type discriminator
        id_selector: Reads the id of an object
        model: Payload type; None keeps payloads as plain JSON data

    Raises:
        PartitionedCollectionsNotSupportedError: If the collection is partitioned
    """

    def __init__(
        self,
        client: DocumentClient,
        database: Database,
        collection: DocumentCollection,
        entity_type: str,
        id_selector: Callable[[T], Optional[str]],
        *,
        model: Optional[type] = None,
    ) -> None:
        super().__init__(database, collection, client)
        if not entity_type:
            raise ValueError("Entity type cannot be empty")
        self._entity_type = entity_type
        self._id_selector = id_selector
        self._mapping: PayloadMapping[T, Any] = PayloadMapping(model)

    @property
    def entity_type(self) -> str:
        return self._entity_type

    async def put(self, entity: T) -> None:
        """Create or replace an object.

        Raises:
            PutRequiresIdentifierError: If the selected id is blank
        """
        entity_id = self._id_selector(entity)
        if entity_id is None or not str(entity_id).strip():
            raise PutRequiresIdentifierError(self._entity_type)

        document = EntityDocument.create(str(entity_id), self._entity_type, self._mapping.dump(entity))
        await self._client.upsert_document(self._collection_link(), document.to_dict())

        logger.debug(
            "Put entity",
            extra={"document_type": self._entity_type, "document_id": document.id},
        )

    async def read(self, entity_id: str) -> Optional[T]:
        """Read an object by id, or None if it does not exist."""
        try:
            stored = await self._client.read_document(self._link(entity_id))
        except DocumentNotFoundError:
            return None
        return self._mapping.load(EntityDocument.from_dict(stored).entity)

    async def delete(self, entity_id: str) -> None:
        """Delete an object by id (no-op if absent)."""
        await self._client.delete_document(self._link(entity_id))

    async def query(self, predicate: Optional[Filter] = None) -> AsyncIterator[T]:
        """Query objects of this type, filtered inside the store."""
        where = scoped_filter(self._entity_type, ENTITY_FIELD, predicate)
        async for stored in self._client.query_documents(self._collection_link(), where):
            yield self._mapping.load(EntityDocument.from_dict(stored).entity)

    def _link(self, entity_id: str) -> str:
        return self._document_link(create_document_id(entity_id, self._entity_type))
