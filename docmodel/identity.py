"""
Identifier policy for entities.

Decides whether an entity with an unset id may have one generated, and
generates it. Generation is supported for:
- str: text form of a random UUID
- uuid.UUID: a random UUID
- any StringConvertibleId: from_string() applied to the text form of a UUID

Any other id type is a configuration error: the caller must assign ids
explicitly. The policy never touches the store.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, TypeVar

from .errors import UnsupportedIdentifierGenerationError
from .model import Entity, StringConvertibleId, is_unset_id

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound=Entity)


def supports_generation(id_type: Any) -> bool:
    """Whether ids of this type can be generated from a string."""
    if id_type is str or id_type is uuid.UUID:
        return True
    return isinstance(id_type, type) and issubclass(id_type, StringConvertibleId)


def generate_id(id_type: Any) -> Any:
    """Generate a fresh identifier of the given type.

    Args:
        id_type: Identifier type

    Returns:
        New identifier value

    Raises:
        UnsupportedIdentifierGenerationError: If the type cannot be built from a string
    """
    value = uuid.uuid4()
    if id_type is uuid.UUID:
        return value
    if id_type is str:
        return str(value)
    if not supports_generation(id_type):
        raise UnsupportedIdentifierGenerationError(id_type)

    try:
        return id_type.from_string(str(value))
    except Exception as exc:
        raise UnsupportedIdentifierGenerationError(id_type) from exc


def with_id(entity: TEntity) -> TEntity:
    """Return the entity with an id, generating one if it is unset.

    Entities that already have an id are returned as-is.

    Raises:
        UnsupportedIdentifierGenerationError: If the id is unset and its type
            cannot be generated
    """
    if not is_unset_id(entity.id):
        return entity

    id_type = type(entity).id_type()
    new_id = generate_id(id_type)

    logger.debug(
        "Generated entity id",
        extra={"entity_type": type(entity).__name__, "entity_id": str(new_id)},
    )

    return entity.model_copy(update={"id": new_id})
