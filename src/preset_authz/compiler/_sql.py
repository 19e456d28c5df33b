"""SQL translation — turn FilterPredicate trees into SQLAlchemy expressions."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ColumnElement, and_, false, func, literal, not_, or_, select, true
from sqlalchemy import inspect as sa_inspect

from preset_authz.exceptions import PredicateCompilationError, UnsupportedExpressionError
from preset_authz.predicate._nodes import And, Const, Contains, Eq, FilterPredicate, In, Not, Or

__all__ = ["to_sql"]

# Storage classes a literal may compare equal to, keyed by literal kind.
# ``typeof()`` names for plain columns, ``json_type()`` names for JSON.
_COLUMN_TYPES = {"number": ("integer", "real"), "text": ("text",)}
_JSON_TYPES = {"number": ("integer", "real", "true", "false"), "text": ("text",)}


def to_sql(predicate: FilterPredicate, model: type) -> ColumnElement[bool]:
    """Translate a predicate into a ``ColumnElement[bool]`` for *model*.

    The first segment of each field path names a mapped column on the
    model. Any remaining segments address into that column as a JSON
    document: scalar comparisons use ``json_extract`` and ``Contains``
    becomes an ``EXISTS`` over ``json_each``. The JSON functions target
    SQLite's JSON1 extension.

    Every comparison is guarded by the stored value's type and never
    yields NULL, so the result selects exactly the rows for which
    ``eval_predicate`` returns ``True``: a missing path or NULL column
    equals ``None``, ``not_`` admits such rows, and ``"7"`` does not
    match a stored ``7``.

    Args:
        predicate: The predicate to translate.
        model: A mapped SQLAlchemy model class.

    Returns:
        A filter expression suitable for ``Select.where()``.

    Raises:
        PredicateCompilationError: If a field path does not name a
            mapped column, addresses into a non-JSON column, or
            compares against a value that is not ``None``, a bool, a
            number or a string.

    Example::

        expr = to_sql(eq("access.read.constraint", "everyone"), Preset)
        # coalesce(json_type(presets.access, '$.read.constraint'), 'null') IN ('text')
        #   AND json_extract(presets.access, '$.read.constraint') IS 'everyone'
    """
    if isinstance(predicate, Const):
        return true() if predicate.value else false()
    if isinstance(predicate, And):
        return and_(*(to_sql(c, model) for c in predicate.clauses))
    if isinstance(predicate, Or):
        return or_(*(to_sql(c, model) for c in predicate.clauses))
    if isinstance(predicate, Not):
        return not_(to_sql(predicate.clause, model))
    if isinstance(predicate, Eq):
        return _Target(model, predicate.field).matches_any((predicate.value,))
    if isinstance(predicate, In):
        return _Target(model, predicate.field).matches_any(predicate.values)
    if isinstance(predicate, Contains):
        return _Target(model, predicate.field).contains(predicate.value)
    raise UnsupportedExpressionError(f"Unsupported predicate type: {type(predicate).__name__}")


class _Target:
    """The value a field path addresses, plus an expression for its storage type."""

    def __init__(self, model: type, field: str) -> None:
        head, _, rest = field.partition(".")
        mapper = sa_inspect(model)
        if head not in mapper.column_attrs:
            raise PredicateCompilationError(
                f"Field {field!r} does not name a mapped column on {model.__name__}"
            )
        self.field = field
        self.column = getattr(model, head)
        self.is_json = isinstance(mapper.column_attrs[head].columns[0].type, JSON)
        if rest and not self.is_json:
            raise PredicateCompilationError(
                f"Field {field!r} addresses into {head!r}, which is not a JSON column"
            )
        self.json_path = "$." + rest if rest else "$"

    @property
    def value(self) -> Any:
        if self.is_json:
            return func.json_extract(self.column, self.json_path)
        return self.column

    @property
    def storage_type(self) -> Any:
        if self.is_json:
            return func.coalesce(func.json_type(self.column, self.json_path), "null")
        return func.typeof(self.column)

    def matches_any(self, values: tuple[Any, ...]) -> ColumnElement[bool]:
        type_names = _JSON_TYPES if self.is_json else _COLUMN_TYPES
        groups: dict[str, list[Any]] = {}
        clauses = []
        for value in values:
            if value is None:
                clauses.append(self.storage_type == "null")
            else:
                kind, bound = _literal(self.field, value)
                groups.setdefault(kind, []).append(bound)
        for kind, bound_values in groups.items():
            typed = self.storage_type.in_(type_names[kind])
            if len(bound_values) == 1:
                match = self.value.is_not_distinct_from(literal(bound_values[0]))
            else:
                match = self.value.in_(bound_values)
            clauses.append(and_(typed, match))
        return or_(*clauses) if clauses else false()

    def contains(self, value: Any) -> ColumnElement[bool]:
        if not self.is_json:
            # Scalar columns never hold a list.
            return false()
        elements = func.json_each(self.column, self.json_path).table_valued("value", "type")
        if value is None:
            element_match = elements.c["type"] == "null"
        else:
            kind, bound = _literal(self.field, value)
            element_match = and_(
                elements.c["type"].in_(_JSON_TYPES[kind]),
                elements.c.value == literal(bound),
            )
        is_array = self.storage_type == "array"
        return and_(is_array, select(elements.c.value).where(element_match).exists())


def _literal(field: str, value: Any) -> tuple[str, Any]:
    """Classify a comparison literal and return the value to bind."""
    if isinstance(value, bool):
        return "number", int(value)
    if isinstance(value, (int, float)):
        return "number", value
    if isinstance(value, str):
        return "text", value
    raise PredicateCompilationError(
        f"Cannot compare {field!r} against {type(value).__name__} in SQL; "
        "only None, bool, int, float and str values translate"
    )
