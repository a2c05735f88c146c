"""Typed persistence facades for entities and value objects."""

from .entity import EntityFacade
from .factories import EntityFacadeFactory, ValueObjectFacadeFactory
from .value_object import ValueObjectFacade

__all__ = [
    "EntityFacade",
    "EntityFacadeFactory",
    "ValueObjectFacade",
    "ValueObjectFacadeFactory",
]
