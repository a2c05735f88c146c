"""
Value repository: set semantics over a type discriminator.

Thin wrapper around ValueObjectFacade for callers that name the type
discriminator themselves. Equality scanning and its limits are the
facade's; see docmodel.facades.value_object.
"""

from __future__ import annotations

from typing import AsyncIterator, Generic, Optional, TypeVar

from ..collection import Database, DocumentCollection
from ..facades.value_object import ValueObjectFacade
from ..filters import Filter
from ..store.base import DocumentClient

T = TypeVar("T")


class ValueRepository(Generic[T]):
    """Repository for values identified by equality.

    Args:
        client: Document store client
        database: Database descriptor
        collection: Collection descriptor (must not be partitioned)
        value_type: Type discriminator
        model: Payload type; None keeps payloads as plain JSON data

    Raises:
        PartitionedCollectionsNotSupportedError: If the collection is partitioned
    """

    def __init__(
        self,
        client: DocumentClient,
        database: Database,
        collection: DocumentCollection,
        value_type: str,
        *,
        model: Optional[type] = None,
    ) -> None:
        if not value_type:
            raise ValueError("Value type cannot be empty")
        self._facade: ValueObjectFacade[T, T] = ValueObjectFacade(
            database,
            collection,
            client,
            model,  # type: ignore[arg-type]
            document_type=value_type,
        )

    @property
    def value_type(self) -> str:
        return self._facade.document_type

    async def put(self, value: T) -> None:
        """Store a value unless an equal one is already stored."""
        await self._facade.create(value)

    async def delete(self, value: T) -> None:
        """Delete a stored value equal to the given one (no-op if absent)."""
        await self._facade.delete(value)

    async def query(self, predicate: Optional[Filter] = None) -> AsyncIterator[T]:
        """Query values of this type, filtered inside the store."""
        async for value in self._facade.query(predicate):
            yield value
