"""
Unit tests for wire documents.

Tests cover:
- Type discriminators and overrides
- Id serialization and namespacing
- Entity and value object envelopes
"""

import uuid

import pytest

from docmodel.documents import (
    EntityDocument,
    ValueObjectDocument,
    create_document_id,
    get_document_id,
    get_document_type,
    serialize_id,
)
from tests.domain import OrderId, Tag, Task


class TestDocumentType:
    """Tests for get_document_type."""

    def test_defaults_to_class_name(self):
        """Bare class name is the discriminator."""
        assert get_document_type(Task) == "Task"

    def test_override_wins(self):
        """Explicit document type replaces the class name."""
        assert get_document_type(Task, "TodoItem") == "TodoItem"

    def test_empty_override_rejected(self):
        """Empty override is a configuration error."""
        with pytest.raises(ValueError):
            get_document_type(Task, "")


class TestDocumentId:
    """Tests for id serialization and namespacing."""

    def test_string_id_is_bare(self):
        assert serialize_id("abc") == "abc"

    def test_int_id(self):
        assert serialize_id(5) == "5"

    def test_uuid_id(self):
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert serialize_id(value) == "12345678-1234-5678-1234-567812345678"

    def test_root_model_id(self):
        """Wrapper ids serialize as their wrapped value."""
        assert serialize_id(OrderId("o-1"), OrderId) == "o-1"

    def test_structured_id_is_compact_json(self):
        """Structured ids are compact JSON with sorted keys."""
        assert serialize_id({"b": 1, "a": "x"}) == '{"a":"x","b":1}'

    def test_create_document_id(self):
        assert create_document_id("1", "Task") == "Task_1"

    def test_get_document_id(self):
        """Equal ids of different types never collide."""
        assert get_document_id("1", "Task") == "Task_1"
        assert get_document_id("1", "Note") != get_document_id("1", "Task")


class TestEntityDocument:
    """Tests for EntityDocument."""

    def test_create_namespaces_id(self):
        document = EntityDocument.create("42", "Task", {"id": "42", "title": "x"})

        assert document.id == "Task_42"
        assert document.type == "Task"
        assert document.entity == {"id": "42", "title": "x"}

    def test_to_dict_field_names(self):
        """Wire field names are fixed."""
        document = EntityDocument.create("42", "Task", {"id": "42"})

        assert document.to_dict() == {"id": "Task_42", "Type": "Task", "Entity": {"id": "42"}}

    def test_from_dict(self):
        document = EntityDocument.from_dict({"id": "Task_1", "Type": "Task", "Entity": {"id": "1"}})

        assert document == EntityDocument(id="Task_1", type="Task", entity={"id": "1"})

    def test_from_dict_missing_field(self):
        with pytest.raises(KeyError):
            EntityDocument.from_dict({"id": "Task_1", "Type": "Task"})


class TestValueObjectDocument:
    """Tests for ValueObjectDocument."""

    def test_create_leaves_id_unset(self):
        """The store assigns value object ids."""
        document = ValueObjectDocument.create("Tag", Tag(name="red").model_dump())

        assert document.id is None
        assert document.to_dict() == {"id": None, "Type": "Tag", "ValueObject": {"name": "red"}}

    def test_from_dict_with_store_id(self):
        document = ValueObjectDocument.from_dict(
            {"id": "abc", "Type": "Tag", "ValueObject": {"name": "red"}, "_etag": "1"}
        )

        assert document.id == "abc"
        assert document.value == {"name": "red"}
