"""
Wire documents for docmodel.

Every persisted object is wrapped in an envelope so that many unrelated
types can share one collection:

    EntityDocument:      {"id": "<Type>_<serialized-id>", "Type": "<Type>", "Entity": <payload>}
    ValueObjectDocument: {"id": <store-assigned>, "Type": "<Type>", "ValueObject": <payload>}

Invariants:
    - Field names are fixed; "id" is lowercase as the store requires
    - The entity document id is derived from the type name and the business id
    - Ids are serialized exactly as the payload serializes them, so an id
      built by hand matches one that went through the store

How to change safely:
    - The type name is a data-migration boundary: renaming a domain type
      orphans its stored documents unless an explicit document type is used
    - Never change the field names; existing collections depend on them
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")

ID_FIELD = "id"
TYPE_FIELD = "Type"
ENTITY_FIELD = "Entity"
VALUE_OBJECT_FIELD = "ValueObject"


def get_document_type(domain_type: Any, override: Optional[str] = None) -> str:
    """Type discriminator for a domain type.

    Args:
        domain_type: Entity or value object class
        override: Explicit discriminator, recommended when the class name
            may be refactored

    Returns:
        The override if given, otherwise the bare class name
    """
    if override is not None:
        if not override:
            raise ValueError("Document type cannot be empty")
        return override
    return domain_type.__name__


def serialize_id(entity_id: Any, id_type: Any = None) -> str:
    """Serialize an id the way the wire format does.

    Scalars are rendered bare ("abc", "5"); structured ids as compact JSON.
    """
    adapter = TypeAdapter(id_type if id_type is not None else type(entity_id))
    dumped = adapter.dump_python(entity_id, mode="json")
    if isinstance(dumped, str):
        return dumped
    return json.dumps(dumped, separators=(",", ":"), sort_keys=True)


def create_document_id(serialized_id: str, document_type: str) -> str:
    """Namespace a serialized id with its document type."""
    return f"{document_type}_{serialized_id}"


def get_document_id(entity_id: Any, document_type: str, id_type: Any = None) -> str:
    """Namespaced document id of an entity."""
    return create_document_id(serialize_id(entity_id, id_type), document_type)


@dataclass(frozen=True)
class EntityDocument(Generic[T]):
    """Envelope of an entity.

    Attributes:
        id: Namespaced document id
        type: Type discriminator
        entity: Entity payload (entity or its DTO, in wire form)
    """

    id: str
    type: str
    entity: T

    @classmethod
    def create(cls, serialized_id: str, document_type: str, entity: T) -> EntityDocument[T]:
        """Build an envelope, namespacing the id."""
        return cls(
            id=create_document_id(serialized_id, document_type),
            type=document_type,
            entity=entity,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire dictionary."""
        return {
            ID_FIELD: self.id,
            TYPE_FIELD: self.type,
            ENTITY_FIELD: self.entity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EntityDocument[Any]:
        """Create from wire dictionary."""
        return cls(
            id=data[ID_FIELD],
            type=data[TYPE_FIELD],
            entity=data[ENTITY_FIELD],
        )


@dataclass(frozen=True)
class ValueObjectDocument(Generic[T]):
    """Envelope of a value object.

    The id is assigned by the store on creation and is opaque to callers.

    Attributes:
        id: Store-assigned document id (None before creation)
        type: Type discriminator
        value: Value object payload (value or its DTO, in wire form)
    """

    id: Optional[str]
    type: str
    value: T

    @classmethod
    def create(cls, document_type: str, value: T) -> ValueObjectDocument[T]:
        """Build an envelope with no id, for the store to assign one."""
        return cls(id=None, type=document_type, value=value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to wire dictionary."""
        return {
            ID_FIELD: self.id,
            TYPE_FIELD: self.type,
            VALUE_OBJECT_FIELD: self.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ValueObjectDocument[Any]:
        """Create from wire dictionary."""
        return cls(
            id=data.get(ID_FIELD),
            type=data[TYPE_FIELD],
            value=data[VALUE_OBJECT_FIELD],
        )
