"""
Value object persistence facade.

Value objects have no identity of their own: the store assigns an opaque
document id on creation and the facade finds envelopes again by comparing
payloads.

Invariants:
    - create() of a value equal to a stored one is a no-op
    - delete() of an absent value is a no-op
    - Lookups compare the unmapped payload with ==

Known limits:
    - _get() scans every envelope of the type, so create() and delete()
      are linear in the number of stored values of that type
    - The check in create() and the store write are separate round trips;
      concurrent creates of the same value can store duplicates. Lookups
      return the first match, so duplicates never break reads or deletes.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import AsyncIterator, Callable, Generic, Optional, Type, TypeVar

from ..collection import Database, DocumentCollection
from ..documents import VALUE_OBJECT_FIELD, ValueObjectDocument, get_document_type
from ..filters import Filter
from ..store.base import DocumentClient
from .base import CollectionBinding, PayloadMapping, scoped_filter

logger = logging.getLogger(__name__)

TValue = TypeVar("TValue")
TDto = TypeVar("TDto")


class ValueObjectFacade(CollectionBinding, Generic[TValue, TDto]):
    """Persistence facade for one value object type.

    Args:
        database: Database descriptor
        collection: Collection descriptor (must not be partitioned)
        client: Document store client
        value_type: Value object class
        dto_type: Wire class when the stored shape differs from the value
        to_dto: Value -> DTO mapping
        from_dto: DTO -> value mapping
        document_type: Explicit type discriminator (defaults to the class name)

    Raises:
        PartitionedCollectionsNotSupportedError: If the collection is partitioned
    """

    def __init__(
        self,
        database: Database,
        collection: DocumentCollection,
        client: DocumentClient,
        value_type: Type[TValue],
        *,
        dto_type: Optional[Type[TDto]] = None,
        to_dto: Optional[Callable[[TValue], TDto]] = None,
        from_dto: Optional[Callable[[TDto], TValue]] = None,
        document_type: Optional[str] = None,
    ) -> None:
        super().__init__(database, collection, client)
        self._value_type = value_type
        self._mapping: PayloadMapping[TValue, TDto] = PayloadMapping(
            value_type, dto_type, to_dto, from_dto
        )
        self._document_type = get_document_type(value_type, document_type)

    @property
    def document_type(self) -> str:
        """Type discriminator of stored documents."""
        return self._document_type

    async def create(self, value: TValue) -> None:
        """Store a value unless an equal one is already stored."""
        if await self._get(value) is not None:
            logger.debug("Value already stored", extra={"document_type": self._document_type})
            return

        document = ValueObjectDocument.create(self._document_type, self._mapping.dump(value))
        stored = await self._client.create_document(self._collection_link(), document.to_dict())

        logger.debug(
            "Created value",
            extra={"document_type": self._document_type, "document_id": stored.get("id")},
        )

    async def delete(self, value: TValue) -> None:
        """Delete a stored value equal to the given one, if any."""
        document = await self._get(value)
        if document is None or document.id is None:
            return

        await self._client.delete_document(self._document_link(document.id))

        logger.debug(
            "Deleted value",
            extra={"document_type": self._document_type, "document_id": document.id},
        )

    async def query(self, predicate: Optional[Filter] = None) -> AsyncIterator[TValue]:
        """Query values of this type.

        Args:
            predicate: Optional filter over the DTO shape, evaluated by the store

        Yields:
            Matching values, in store-defined order
        """
        async for document in self._scan(predicate):
            yield self._mapping.load(document.value)

    async def _get(self, value: TValue) -> Optional[ValueObjectDocument]:
        async with aclosing(self._scan()) as documents:
            async for document in documents:
                if self._mapping.load(document.value) == value:
                    return document
        return None

    async def _scan(self, predicate: Optional[Filter] = None) -> AsyncIterator[ValueObjectDocument]:
        where = scoped_filter(self._document_type, VALUE_OBJECT_FIELD, predicate)
        async with aclosing(self._client.query_documents(self._collection_link(), where)) as stored_documents:
            async for stored in stored_documents:
                yield ValueObjectDocument.from_dict(stored)
