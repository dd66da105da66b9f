"""Store-agnostic filter expressions.

Filters are built as a small tagged tree (``Eq``, ``Like``, ``Range``,
``In``, ``And``, ``Or``) and compiled by each store into its own query
language. ``evaluate`` is the reference interpretation over plain dict rows.

Field names may use a dotted path (``"metadata.category"``) to reach into
a nested JSON value.
"""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Eq:
    """Field equals value."""

    field: str
    value: Any


@dataclass(frozen=True)
class Like:
    """Case-insensitive substring match."""

    field: str
    value: str


@dataclass(frozen=True)
class Range:
    """Inclusive numeric range. A missing bound is unconstrained."""

    field: str
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class In:
    """Field value is one of ``values``."""

    field: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class And:
    """All clauses hold."""

    clauses: tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    """At least one clause holds."""

    clauses: tuple["Predicate", ...]


Predicate = Union[Eq, Like, Range, In, And, Or]


def all_of(*clauses: Predicate | None) -> Predicate | None:
    """Combine clauses with AND, dropping ``None`` entries.

    Returns:
        ``None`` when nothing is left, the single clause when only one
        remains, otherwise an ``And`` node.
    """
    present = tuple(c for c in clauses if c is not None)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return And(present)


def any_of(*clauses: Predicate | None) -> Predicate | None:
    """Combine clauses with OR, dropping ``None`` entries."""
    present = tuple(c for c in clauses if c is not None)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return Or(present)


def resolve_field(row: dict[str, Any], field: str) -> Any:
    """Read a possibly dotted field path from a dict row."""
    value: Any = row
    for part in field.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def evaluate(predicate: Predicate, row: dict[str, Any]) -> bool:
    """Evaluate a predicate against a dict row.

    Args:
        predicate: Expression tree to evaluate.
        row: Row as returned by a store.

    Returns:
        True if the row satisfies the predicate.

    Raises:
        TypeError: If the predicate node type is unknown.
    """
    if isinstance(predicate, And):
        return all(evaluate(c, row) for c in predicate.clauses)

    if isinstance(predicate, Or):
        return any(evaluate(c, row) for c in predicate.clauses)

    value = resolve_field(row, predicate.field)

    if isinstance(predicate, Eq):
        return value == predicate.value

    if isinstance(predicate, Like):
        if value is None:
            return False
        return predicate.value.lower() in str(value).lower()

    if isinstance(predicate, Range):
        number = _as_number(value)
        if number is None:
            return False
        if predicate.min is not None and number < predicate.min:
            return False
        if predicate.max is not None and number > predicate.max:
            return False
        return True

    if isinstance(predicate, In):
        return value in predicate.values

    raise TypeError(f"Unknown predicate node: {predicate!r}")
