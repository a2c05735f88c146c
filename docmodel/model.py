"""
Domain model primitives.

- Entity: identity-bearing, mutable object with an ``id`` field
- ValueObject: identity-less, immutable object compared by value
- StringConvertibleId: capability for id types that can be built from text

Entities declare the concrete id type through the annotation of ``id``:

    >>> class TaskId(RootModel[str], frozen=True):
    ...     @classmethod
    ...     def from_string(cls, value: str) -> TaskId:
    ...         return cls(value)
    >>>
    >>> class Task(Entity):
    ...     id: TaskId | None = None
    ...     title: str

Invariants:
    - Two entities are the same aggregate iff their ids are equal
    - Two value objects are the same record iff they compare equal
"""

from __future__ import annotations

import types
import typing
from typing import Any, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict


@runtime_checkable
class StringConvertibleId(Protocol):
    """Identifier type that can be constructed losslessly from a string."""

    @classmethod
    def from_string(cls, value: str) -> Any:
        ...


class Entity(BaseModel):
    """Base class for entities.

    Subclasses narrow the ``id`` annotation to their identifier type. An
    entity whose id is unset can get a generated one on create, see
    ``docmodel.identity.with_id``.
    """

    id: Any = None

    @classmethod
    def id_type(cls) -> Any:
        """Declared identifier type, with Optional stripped."""
        return unwrap_optional(cls.model_fields["id"].annotation)

    @property
    def has_id(self) -> bool:
        """Whether the id is set."""
        return not is_unset_id(self.id)


class ValueObject(BaseModel):
    """Base class for value objects.

    Frozen, so instances are hashable and compare by all field values.
    """

    model_config = ConfigDict(frozen=True)


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``None`` from an ``X | None`` / ``Optional[X]`` annotation."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def is_unset_id(value: Any) -> bool:
    """Whether an id value is unset.

    An id is unset when it is None or equal to the zero value of its type
    (``""`` for str, ``0`` for int). Types that cannot be built without
    arguments have no zero value.
    """
    if value is None:
        return True
    try:
        default = type(value)()
    except Exception:
        return False
    return value == default
