"""In-memory predicate evaluator for single-document checks.

Walks the FilterPredicate tree and evaluates it against one record,
so ``can_perform`` never needs a round-trip to the storage engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from preset_authz.exceptions import UnsupportedExpressionError
from preset_authz.predicate._nodes import And, Const, Contains, Eq, In, Not, Or

__all__ = ["eval_predicate", "resolve_path"]

_MISSING = object()


def eval_predicate(predicate: Any, record: Any) -> bool:
    """Evaluate a FilterPredicate against a record in-memory.

    Args:
        predicate: A ``FilterPredicate`` tree.
        record: A ``PresetRecord``, mapping, or any object whose
            attributes/keys the predicate's field paths address.

    Returns:
        ``True`` if the record matches, ``False`` otherwise.

    Raises:
        UnsupportedExpressionError: If the tree contains an unknown node.

    Example::

        record = PresetRecord(id=1, name="Mine", created_by=7)
        eval_predicate(eq("created_by", 7), record)  # True
    """
    return _eval(predicate, record)


def resolve_path(record: Any, path: str) -> Any:
    """Resolve a dotted field path against a record.

    Each segment is looked up as a mapping key or an attribute. A
    missing segment resolves the whole path to ``None``.
    """
    current = record
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment, None)
        else:
            value = getattr(current, segment, _MISSING)
            current = None if value is _MISSING else value
    return current


def _eval(expr: Any, record: Any) -> bool:
    """Recursively evaluate a predicate node."""
    if isinstance(expr, Const):
        return bool(expr.value)

    if isinstance(expr, And):
        return all(_eval(clause, record) for clause in expr.clauses)
    if isinstance(expr, Or):
        return any(_eval(clause, record) for clause in expr.clauses)
    if isinstance(expr, Not):
        return not _eval(expr.clause, record)

    if isinstance(expr, Eq):
        left = resolve_path(record, expr.field)
        try:
            return bool(left == expr.value)
        except TypeError:
            # Incompatible types -- treat as non-match
            return False

    if isinstance(expr, In):
        left = resolve_path(record, expr.field)
        return _member(left, expr.values)

    if isinstance(expr, Contains):
        left = resolve_path(record, expr.field)
        if not isinstance(left, (list, tuple, set, frozenset)):
            return False
        return _member(expr.value, left)

    raise UnsupportedExpressionError(f"Unsupported predicate type: {type(expr).__name__}")


def _member(value: Any, collection: Any) -> bool:
    try:
        return value in collection
    except TypeError:
        return False
