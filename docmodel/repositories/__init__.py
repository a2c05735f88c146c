"""String-keyed repositories sharing the facades' document format."""

from .entity import EntityRepository
from .factories import DocumentClientFactory, EntityRepositoryFactory, ValueRepositoryFactory
from .value import ValueRepository

__all__ = [
    "DocumentClientFactory",
    "EntityRepository",
    "EntityRepositoryFactory",
    "ValueRepository",
    "ValueRepositoryFactory",
]
