"""
Filter expressions for predicate pushdown.

A filter is a small expression tree built with Python operators over field
paths of the wire (DTO) shape of a payload:

    >>> from docmodel.filters import F
    >>> expr = (F("value") > 1) & ~F("name").is_in(["A", "B"])
    >>> expr = F("address.city") == "London"
    >>> expr = F() == "red"  # the payload itself

Facades re-root the expression under the envelope's payload field and combine
it with the type discriminator, then hand it to the document client. Each
client evaluates it inside the store: SQLite compiles it to SQL over
``json_extract``; the in-memory client evaluates it against stored dicts.

Invariants:
    - Comparison values are scalars in wire form (str, int, float, bool, None)
    - Evaluation uses SQL three-valued logic: comparing a missing or null
      field is unknown, and unknown never matches, not even under NOT
    - ``== None`` / ``!= None`` test for null or missing fields explicitly
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic_core import to_jsonable_python

from .errors import UnsupportedFilterError

_MISSING = object()

SCALAR_TYPES = (str, int, float, bool)

_PYTHON_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "lt": operator.lt,
    "le": operator.le,
    "gt": operator.gt,
    "ge": operator.ge,
}

_SQL_OPS = {
    "eq": "=",
    "ne": "!=",
    "lt": "<",
    "le": "<=",
    "gt": ">",
    "ge": ">=",
}

_SYMBOLS = {
    "eq": "==",
    "ne": "!=",
    "lt": "<",
    "le": "<=",
    "gt": ">",
    "ge": ">=",
    "in": "in",
}


def _to_wire(value: Any) -> Any:
    """Convert a comparison value to its wire form and check it is a scalar."""
    wire = to_jsonable_python(value)
    if wire is not None and not isinstance(wire, SCALAR_TYPES):
        raise UnsupportedFilterError(
            f"Filter values must be scalars, got {type(value).__name__}",
            expression=repr(value),
        )
    return wire


def _resolve(document: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    current: Any = document
    for part in path:
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _json_path(path: tuple[str, ...]) -> str:
    for part in path:
        if '"' in part:
            raise UnsupportedFilterError(f"Field name cannot contain quotes: {part!r}")
    return "$" + "".join(f'."{part}"' for part in path)


class Filter:
    """Base class of filter expressions."""

    def __and__(self, other: Filter) -> Filter:
        return And((self, other))

    def __or__(self, other: Filter) -> Filter:
        return Or((self, other))

    def __invert__(self) -> Filter:
        return Not(self)

    def evaluate(self, document: Mapping[str, Any]) -> bool:
        """Whether a document matches."""
        return self._evaluate(document) is True

    def _evaluate(self, document: Mapping[str, Any]) -> Optional[bool]:
        raise NotImplementedError

    def to_sql(self, column: str) -> tuple[str, list[Any]]:
        """Compile to a SQLite boolean expression over a JSON column.

        Returns:
            Tuple of (sql, params)
        """
        raise NotImplementedError

    def rebase(self, *prefix: str) -> Filter:
        """Copy of the expression with every path nested under prefix."""
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class Field:
    """Reference to a (dotted) field path; comparisons build filters."""

    path: tuple[str, ...]

    def __eq__(self, value: Any) -> Comparison:  # type: ignore[override]
        return Comparison(self.path, "eq", _to_wire(value))

    def __ne__(self, value: Any) -> Comparison:  # type: ignore[override]
        return Comparison(self.path, "ne", _to_wire(value))

    def __lt__(self, value: Any) -> Comparison:
        return Comparison(self.path, "lt", _to_wire(value))

    def __le__(self, value: Any) -> Comparison:
        return Comparison(self.path, "le", _to_wire(value))

    def __gt__(self, value: Any) -> Comparison:
        return Comparison(self.path, "gt", _to_wire(value))

    def __ge__(self, value: Any) -> Comparison:
        return Comparison(self.path, "ge", _to_wire(value))

    __hash__ = object.__hash__

    def is_in(self, values: Iterable[Any]) -> Comparison:
        """Match when the field equals any of the values."""
        wire = tuple(_to_wire(v) for v in values)
        if any(v is None for v in wire):
            raise UnsupportedFilterError("is_in() values cannot be None", expression=repr(wire))
        return Comparison(self.path, "in", wire)


def F(path: Optional[str] = None) -> Field:
    """Field reference from a dotted path, e.g. ``F("address.city")``.

    ``F()`` refers to the payload itself, for value objects stored as a
    bare scalar (``F() == "red"``).
    """
    if path is None:
        return Field(())
    parts = tuple(path.split("."))
    if not path or any(not part for part in parts):
        raise ValueError(f"Invalid field path: {path!r}")
    return Field(parts)


@dataclass(frozen=True)
class Comparison(Filter):
    """Comparison of a field against a value."""

    path: tuple[str, ...]
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _SYMBOLS:
            raise UnsupportedFilterError(f"Unknown operator: {self.op}")
        if self.value is None and self.op not in ("eq", "ne"):
            raise UnsupportedFilterError(
                "Only == and != can compare against None", expression=str(self)
            )

    def _evaluate(self, document: Mapping[str, Any]) -> Optional[bool]:
        actual = _resolve(document, self.path)
        is_null = actual is _MISSING or actual is None

        if self.value is None:
            return is_null if self.op == "eq" else not is_null
        if self.op == "in" and not self.value:
            return False
        if is_null:
            return None
        if self.op == "in":
            return actual in self.value
        try:
            return bool(_PYTHON_OPS[self.op](actual, self.value))
        except TypeError:
            return None

    def to_sql(self, column: str) -> tuple[str, list[Any]]:
        target = f"json_extract({column}, ?)"
        params: list[Any] = [_json_path(self.path)]

        if self.value is None:
            keyword = "IS NULL" if self.op == "eq" else "IS NOT NULL"
            return f"{target} {keyword}", params
        if self.op == "in":
            if not self.value:
                return f"{target} IN ()", params
            placeholders = ", ".join("?" for _ in self.value)
            return f"{target} IN ({placeholders})", params + list(self.value)
        return f"{target} {_SQL_OPS[self.op]} ?", params + [self.value]

    def rebase(self, *prefix: str) -> Filter:
        return replace(self, path=tuple(prefix) + self.path)

    def __str__(self) -> str:
        return f"{'.'.join(self.path) or '$'} {_SYMBOLS[self.op]} {self.value!r}"


@dataclass(frozen=True)
class And(Filter):
    """All operands match."""

    operands: tuple[Filter, ...]

    def _evaluate(self, document: Mapping[str, Any]) -> Optional[bool]:
        results = [operand._evaluate(document) for operand in self.operands]
        if any(result is False for result in results):
            return False
        if any(result is None for result in results):
            return None
        return True

    def to_sql(self, column: str) -> tuple[str, list[Any]]:
        return _join_sql(self.operands, " AND ", column)

    def rebase(self, *prefix: str) -> Filter:
        return And(tuple(operand.rebase(*prefix) for operand in self.operands))

    def __str__(self) -> str:
        return "(" + " & ".join(str(o) for o in self.operands) + ")"


@dataclass(frozen=True)
class Or(Filter):
    """Any operand matches."""

    operands: tuple[Filter, ...]

    def _evaluate(self, document: Mapping[str, Any]) -> Optional[bool]:
        results = [operand._evaluate(document) for operand in self.operands]
        if any(result is True for result in results):
            return True
        if any(result is None for result in results):
            return None
        return False

    def to_sql(self, column: str) -> tuple[str, list[Any]]:
        return _join_sql(self.operands, " OR ", column)

    def rebase(self, *prefix: str) -> Filter:
        return Or(tuple(operand.rebase(*prefix) for operand in self.operands))

    def __str__(self) -> str:
        return "(" + " | ".join(str(o) for o in self.operands) + ")"


@dataclass(frozen=True)
class Not(Filter):
    """Operand does not match (unknown stays unknown)."""

    operand: Filter

    def _evaluate(self, document: Mapping[str, Any]) -> Optional[bool]:
        result = self.operand._evaluate(document)
        return None if result is None else not result

    def to_sql(self, column: str) -> tuple[str, list[Any]]:
        sql, params = self.operand.to_sql(column)
        return f"NOT ({sql})", params

    def rebase(self, *prefix: str) -> Filter:
        return Not(self.operand.rebase(*prefix))

    def __str__(self) -> str:
        return f"~{self.operand}"


def _join_sql(operands: tuple[Filter, ...], joiner: str, column: str) -> tuple[str, list[Any]]:
    parts: list[str] = []
    params: list[Any] = []
    for operand in operands:
        sql, operand_params = operand.to_sql(column)
        parts.append(f"({sql})")
        params.extend(operand_params)
    return joiner.join(parts), params

