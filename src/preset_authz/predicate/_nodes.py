"""FilterPredicate — a small boolean expression tree over record fields.

The same tree is evaluated in memory for single-document checks and
translated into SQL (or a where-document) for bulk listing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

__all__ = [
    "And",
    "Const",
    "Contains",
    "Eq",
    "FilterPredicate",
    "In",
    "Not",
    "Or",
    "and_",
    "contains",
    "eq",
    "false",
    "in_",
    "not_",
    "or_",
    "true",
]


class FilterPredicate:
    """Base class for predicate nodes.

    Supports ``&`` (AND), ``|`` (OR) and ``~`` (NOT) composition; the
    operators go through the simplifying factories below.

    Example::

        mine = eq("created_by", actor.id)
        shared = contains("access.read.extra.users", actor.id)
        combined = mine | shared
    """

    __slots__ = ()

    def __and__(self, other: FilterPredicate) -> FilterPredicate:
        return and_(self, other)

    def __or__(self, other: FilterPredicate) -> FilterPredicate:
        return or_(self, other)

    def __invert__(self) -> FilterPredicate:
        return not_(self)


@dataclass(frozen=True, slots=True)
class Const(FilterPredicate):
    """Constant ``TRUE`` / ``FALSE``."""

    value: bool


@dataclass(frozen=True, slots=True)
class Eq(FilterPredicate):
    """``field == value``."""

    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class In(FilterPredicate):
    """``field IN values``."""

    field: str
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        # Use object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True, slots=True)
class Contains(FilterPredicate):
    """List-valued ``field`` holds ``value``."""

    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class And(FilterPredicate):
    """Conjunction of two or more clauses."""

    clauses: tuple[FilterPredicate, ...]


@dataclass(frozen=True, slots=True)
class Or(FilterPredicate):
    """Disjunction of two or more clauses."""

    clauses: tuple[FilterPredicate, ...]


@dataclass(frozen=True, slots=True)
class Not(FilterPredicate):
    """Negation."""

    clause: FilterPredicate


_TRUE = Const(True)
_FALSE = Const(False)


def true() -> FilterPredicate:
    """Predicate matching every record."""
    return _TRUE


def false() -> FilterPredicate:
    """Predicate matching no record."""
    return _FALSE


def eq(field: str, value: Any) -> FilterPredicate:
    return Eq(field, value)


def in_(field: str, values: Iterable[Any]) -> FilterPredicate:
    vals = tuple(values)
    if not vals:
        return _FALSE
    return In(field, vals)


def contains(field: str, value: Any) -> FilterPredicate:
    return Contains(field, value)


def and_(*clauses: FilterPredicate) -> FilterPredicate:
    """AND the clauses together, folding constants and flattening nested ANDs.

    ``and_()`` with no clauses is ``true()``.
    """
    flat: list[FilterPredicate] = []
    for clause in clauses:
        _check_node(clause)
        if isinstance(clause, Const):
            if not clause.value:
                return _FALSE
            continue
        if isinstance(clause, And):
            flat.extend(clause.clauses)
        else:
            flat.append(clause)
    if not flat:
        return _TRUE
    if len(flat) == 1:
        return flat[0]
    return And(tuple(flat))


def or_(*clauses: FilterPredicate) -> FilterPredicate:
    """OR the clauses together, folding constants and flattening nested ORs.

    ``or_()`` with no clauses is ``false()``.
    """
    flat: list[FilterPredicate] = []
    for clause in clauses:
        _check_node(clause)
        if isinstance(clause, Const):
            if clause.value:
                return _TRUE
            continue
        if isinstance(clause, Or):
            flat.extend(clause.clauses)
        else:
            flat.append(clause)
    if not flat:
        return _FALSE
    if len(flat) == 1:
        return flat[0]
    return Or(tuple(flat))


def not_(clause: FilterPredicate) -> FilterPredicate:
    _check_node(clause)
    if isinstance(clause, Const):
        return _FALSE if clause.value else _TRUE
    if isinstance(clause, Not):
        return clause.clause
    return Not(clause)


def _check_node(clause: object) -> None:
    if not isinstance(clause, FilterPredicate):
        raise TypeError(f"Expected a FilterPredicate, got {type(clause).__name__}")
