"""
Factories for repositories.

The document client is obtained from an async callable on every create();
keeping a single client alive is up to the caller.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, TypeVar

from ..collection import Database, DocumentCollection
from ..store.base import DocumentClient
from .entity import EntityRepository
from .value import ValueRepository

T = TypeVar("T")

DocumentClientFactory = Callable[[], Awaitable[DocumentClient]]


class EntityRepositoryFactory:
    """Builds EntityRepository instances."""

    def __init__(self, document_client_factory: DocumentClientFactory) -> None:
        self._document_client_factory = document_client_factory

    async def create(
        self,
        database: Database,
        collection: DocumentCollection,
        entity_type: str,
        id_selector: Callable[[T], Optional[str]],
        *,
        model: Optional[type] = None,
    ) -> EntityRepository[T]:
        """Create a repository for one entity type."""
        client = await self._document_client_factory()
        return EntityRepository(client, database, collection, entity_type, id_selector, model=model)


class ValueRepositoryFactory:
    """Builds ValueRepository instances."""

    def __init__(self, document_client_factory: DocumentClientFactory) -> None:
        self._document_client_factory = document_client_factory

    async def create(
        self,
        database: Database,
        collection: DocumentCollection,
        value_type: str,
        *,
        model: Optional[type] = None,
    ) -> ValueRepository[T]:
        """Create a repository for one value type."""
        client = await self._document_client_factory()
        return ValueRepository(client, database, collection, value_type, model=model)
