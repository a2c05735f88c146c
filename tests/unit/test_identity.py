"""
Unit tests for the identifier policy.

Tests cover:
- Supported id types (str, UUID, StringConvertibleId)
- Unsupported id types
- Unset id detection
"""

import uuid

import pytest

from docmodel.errors import UnsupportedIdentifierGenerationError
from docmodel.identity import generate_id, supports_generation, with_id
from docmodel.model import is_unset_id, unwrap_optional
from tests.domain import Counter, Device, Order, OrderId, Shipment, Task


class TestWithId:
    """Tests for with_id."""

    def test_generates_string_id(self):
        """Unset str ids become UUID text."""
        task = with_id(Task(title="a"))

        assert isinstance(task.id, str)
        assert uuid.UUID(task.id)

    def test_generates_uuid_id(self):
        device = with_id(Device(name="phone"))

        assert isinstance(device.id, uuid.UUID)

    def test_generates_string_convertible_id(self):
        """from_string() is applied to fresh UUID text."""
        order = with_id(Order(total=5))

        assert isinstance(order.id, OrderId)
        assert uuid.UUID(order.id.root)

    def test_keeps_existing_id(self):
        """A set id is returned unchanged."""
        task = Task(id="t-1", title="a")

        assert with_id(task) is task

    def test_empty_string_counts_as_unset(self):
        task = with_id(Task(id="", title="a"))

        assert task.id

    def test_does_not_mutate_input(self):
        task = Task(title="a")
        with_id(task)

        assert task.id is None

    def test_generated_ids_are_unique(self):
        ids = {with_id(Task(title="a")).id for _ in range(20)}

        assert len(ids) == 20

    def test_unsupported_type_raises(self):
        """int ids cannot be generated."""
        with pytest.raises(UnsupportedIdentifierGenerationError) as exc_info:
            with_id(Counter())

        assert exc_info.value.id_type is int
        assert str(exc_info.value) == "Automatic generation of int ID not supported."

    def test_unsupported_type_with_id_is_fine(self):
        counter = Counter(id=3)

        assert with_id(counter) is counter

    def test_failing_conversion_raises(self):
        """A from_string() failure is reported as unsupported generation."""
        with pytest.raises(UnsupportedIdentifierGenerationError) as exc_info:
            with_id(Shipment())

        assert isinstance(exc_info.value.__cause__, ValueError)


class TestGenerateId:
    """Tests for supports_generation and generate_id."""

    @pytest.mark.parametrize("id_type", [str, uuid.UUID, OrderId])
    def test_supported(self, id_type):
        assert supports_generation(id_type)
        assert isinstance(generate_id(id_type), id_type)

    @pytest.mark.parametrize("id_type", [int, float, bytes])
    def test_unsupported(self, id_type):
        assert not supports_generation(id_type)
        with pytest.raises(UnsupportedIdentifierGenerationError):
            generate_id(id_type)


class TestUnsetId:
    """Tests for is_unset_id and id type resolution."""

    @pytest.mark.parametrize("value", [None, "", 0])
    def test_unset(self, value):
        assert is_unset_id(value)

    @pytest.mark.parametrize("value", ["x", 1, uuid.uuid4(), OrderId("o")])
    def test_set(self, value):
        assert not is_unset_id(value)

    def test_unwrap_optional(self):
        assert unwrap_optional(OrderId | None) is OrderId
        assert unwrap_optional(int) is int

    def test_entity_id_type(self):
        assert Task.id_type() is str
        assert Device.id_type() is uuid.UUID
        assert Counter.id_type() is int

    def test_has_id(self):
        assert Task(id="1", title="a").has_id
        assert not Task(title="a").has_id
