"""
Factories for persistence facades.

A factory holds the document client so call sites only name the domain type
and the collection binding.
"""

from __future__ import annotations

from typing import Callable, Optional, Type, TypeVar

from ..collection import Database, DocumentCollection
from ..model import Entity
from ..store.base import DocumentClient
from .entity import EntityFacade
from .value_object import ValueObjectFacade

TEntity = TypeVar("TEntity", bound=Entity)
TValue = TypeVar("TValue")
TDto = TypeVar("TDto")


class EntityFacadeFactory:
    """Builds EntityFacade instances sharing one client."""

    def __init__(self, client: DocumentClient) -> None:
        self._client = client

    def create(
        self,
        entity_type: Type[TEntity],
        database: Database,
        collection: DocumentCollection,
        *,
        dto_type: Optional[Type[TDto]] = None,
        to_dto: Optional[Callable[[TEntity], TDto]] = None,
        from_dto: Optional[Callable[[TDto], TEntity]] = None,
        document_type: Optional[str] = None,
    ) -> EntityFacade[TEntity, TDto]:
        """Create a facade for an entity type.

        Raises:
            PartitionedCollectionsNotSupportedError: If the collection is partitioned
        """
        return EntityFacade(
            database,
            collection,
            self._client,
            entity_type,
            dto_type=dto_type,
            to_dto=to_dto,
            from_dto=from_dto,
            document_type=document_type,
        )


class ValueObjectFacadeFactory:
    """Builds ValueObjectFacade instances sharing one client."""

    def __init__(self, client: DocumentClient) -> None:
        self._client = client

    def create(
        self,
        value_type: Type[TValue],
        database: Database,
        collection: DocumentCollection,
        *,
        dto_type: Optional[Type[TDto]] = None,
        to_dto: Optional[Callable[[TValue], TDto]] = None,
        from_dto: Optional[Callable[[TDto], TValue]] = None,
        document_type: Optional[str] = None,
    ) -> ValueObjectFacade[TValue, TDto]:
        """Create a facade for a value object type.

        Raises:
            PartitionedCollectionsNotSupportedError: If the collection is partitioned
        """
        return ValueObjectFacade(
            database,
            collection,
            self._client,
            value_type,
            dto_type=dto_type,
            to_dto=to_dto,
            from_dto=from_dto,
            document_type=document_type,
        )
