"""
Shared plumbing for facades and repositories.

- CollectionBinding: (database, collection, client) triple with the
  unpartitioned-collection precondition and link helpers
- PayloadMapping: optional DTO mapping plus pydantic (de)serialization of
  the envelope payload
- scoped_filter: type discriminator filter combined with a caller predicate
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import TypeAdapter
from pydantic_core import to_jsonable_python

from ..collection import (
    Database,
    DocumentCollection,
    collection_link,
    document_link,
    ensure_unpartitioned,
)
from ..documents import TYPE_FIELD
from ..filters import Field, Filter
from ..store.base import DocumentClient

TDomain = TypeVar("TDomain")
TDto = TypeVar("TDto")


def _identity(value: Any) -> Any:
    return value


class CollectionBinding:
    """Binding of a facade to one collection of one database.

    Raises:
        PartitionedCollectionsNotSupportedError: If the collection is partitioned
    """

    def __init__(
        self,
        database: Database,
        collection: DocumentCollection,
        client: DocumentClient,
    ) -> None:
        ensure_unpartitioned(collection)
        self._database = database
        self._collection = collection
        self._client = client

    @property
    def database(self) -> Database:
        return self._database

    @property
    def collection(self) -> DocumentCollection:
        return self._collection

    def _collection_link(self) -> str:
        return collection_link(self._database.id, self._collection.id)

    def _document_link(self, document_id: str) -> str:
        return document_link(self._database.id, self._collection.id, document_id)


class PayloadMapping(Generic[TDomain, TDto]):
    """Maps domain objects to wire payloads and back.

    The domain object is first mapped to its DTO (identity when no mapping is
    given), then dumped to JSON-compatible data with pydantic. Loading runs
    the same steps in reverse.

    Args:
        domain_type: Domain class; None keeps payloads as plain JSON data
        dto_type: Wire class, required together with to_dto/from_dto
        to_dto: Domain -> DTO mapping
        from_dto: DTO -> domain mapping
    """

    def __init__(
        self,
        domain_type: Optional[type] = None,
        dto_type: Optional[type] = None,
        to_dto: Optional[Callable[[TDomain], TDto]] = None,
        from_dto: Optional[Callable[[TDto], TDomain]] = None,
    ) -> None:
        if (to_dto is None) != (from_dto is None):
            raise ValueError("to_dto and from_dto must be supplied together")
        if to_dto is not None and dto_type is None:
            raise ValueError("dto_type is required when a DTO mapping is supplied")

        self.dto_type = dto_type or domain_type
        self._to_dto: Callable[[Any], Any] = to_dto or _identity
        self._from_dto: Callable[[Any], Any] = from_dto or _identity
        self._adapter: Optional[TypeAdapter[Any]] = (
            TypeAdapter(self.dto_type) if self.dto_type is not None else None
        )

    def dump(self, value: TDomain) -> Any:
        """Domain object to wire payload."""
        dto = self._to_dto(value)
        if self._adapter is None:
            return to_jsonable_python(dto)
        return self._adapter.dump_python(dto, mode="json")

    def load(self, payload: Any) -> TDomain:
        """Wire payload to domain object."""
        if self._adapter is None:
            return self._from_dto(payload)
        return self._from_dto(self._adapter.validate_python(payload))


def scoped_filter(
    document_type: str,
    payload_field: str,
    predicate: Optional[Filter] = None,
) -> Filter:
    """Filter on the type discriminator, AND a predicate over the payload."""
    type_filter = Field((TYPE_FIELD,)) == document_type
    if predicate is None:
        return type_filter
    return type_filter & predicate.rebase(payload_field)
