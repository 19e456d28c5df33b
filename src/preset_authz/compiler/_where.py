"""Render predicates as JSON-serializable where-documents."""

from __future__ import annotations

from typing import Any

from preset_authz.exceptions import UnsupportedExpressionError
from preset_authz.predicate._nodes import And, Const, Contains, Eq, FilterPredicate, In, Not, Or

__all__ = ["compile_where"]


def compile_where(predicate: FilterPredicate) -> dict[str, Any]:
    """Render a predicate as a where-document for an external query engine.

    The document shape is::

        {"and": [...]}  {"or": [...]}  {"not": {...}}  {"const": True}
        {"created_by": {"equals": 7}}
        {"access.read.constraint": {"in": ["onlyMe", "everyone"]}}
        {"access.read.extra.users": {"contains": 7}}

    Example::

        compile_where(eq("created_by", 7) | eq("access.read.constraint", "everyone"))
        # {"or": [{"created_by": {"equals": 7}},
        #         {"access.read.constraint": {"equals": "everyone"}}]}
    """
    if isinstance(predicate, Const):
        return {"const": bool(predicate.value)}
    if isinstance(predicate, And):
        return {"and": [compile_where(c) for c in predicate.clauses]}
    if isinstance(predicate, Or):
        return {"or": [compile_where(c) for c in predicate.clauses]}
    if isinstance(predicate, Not):
        return {"not": compile_where(predicate.clause)}
    if isinstance(predicate, Eq):
        return {predicate.field: {"equals": predicate.value}}
    if isinstance(predicate, In):
        return {predicate.field: {"in": list(predicate.values)}}
    if isinstance(predicate, Contains):
        return {predicate.field: {"contains": predicate.value}}
    raise UnsupportedExpressionError(f"Unsupported predicate type: {type(predicate).__name__}")
