"""authorize_query() — push list-mode access filters into SELECT statements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select

from preset_authz._types import ActorLike, Operation
from preset_authz.compiler._sql import to_sql

if TYPE_CHECKING:
    from preset_authz.access._evaluator import AccessEvaluator

__all__ = ["authorize_query"]


def authorize_query(
    stmt: Select[Any],
    *,
    actor: ActorLike,
    operation: Operation,
    evaluator: AccessEvaluator,
    model: type | None = None,
) -> Select[Any]:
    """Apply the list-mode access filter to a SQLAlchemy SELECT statement.

    Compiles ``evaluator.list_filter(operation, actor)`` once and adds it
    as a WHERE clause, so the database returns only presets the actor may
    access without loading each one.

    Args:
        stmt: A SQLAlchemy 2.0 Select statement over the preset model.
        actor: The requesting actor.
        operation: The operation being performed (e.g. ``"read"``).
        evaluator: The access evaluator to derive the filter from.
        model: The preset model. Defaults to every entity the statement
            selects.

    Returns:
        A new Select with the access filter applied.

    Example::

        stmt = select(Preset).order_by(Preset.name)
        stmt = authorize_query(stmt, actor=user, operation="read", evaluator=evaluator)
    """
    predicate = evaluator.list_filter(operation, actor)

    if model is not None:
        return stmt.where(to_sql(predicate, model))

    desc_list: list[dict[str, Any]] = stmt.column_descriptions
    for desc in desc_list:
        entity: type | None = desc.get("entity")
        if entity is None:
            continue
        stmt = stmt.where(to_sql(predicate, entity))

    return stmt
