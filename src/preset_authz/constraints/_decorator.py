"""@constraint decorator — declare custom constraints next to their resolver."""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel

from preset_authz._types import ResolverFn
from preset_authz.constraints._base import ConstraintDefinition

__all__ = ["constraint"]


def constraint(
    value: str,
    *,
    label: str | None = None,
    fields: type[BaseModel] | None = None,
) -> Callable[[ResolverFn], ConstraintDefinition]:
    """Decorator that turns a resolver function into a ``ConstraintDefinition``.

    The decorated function receives ``(actor, context)`` and returns
    ``True``/``False`` or a ``FilterPredicate``. It must also work when
    ``context.record`` is ``None`` (list mode).

    Args:
        value: The identifier stored on presets.
        label: Display label. Defaults to *value*.
        fields: Optional pydantic model for the ``extra`` payload.

    Example::

        class RolesFields(BaseModel):
            roles: list[str]

        @constraint("specificRoles", label="Specific Roles", fields=RolesFields)
        def specific_roles(actor, context):
            return or_(*(
                contains(f"access.{context.operation}.extra.roles", role)
                for role in actor.roles
            ))
    """

    def decorator(fn: ResolverFn) -> ConstraintDefinition:
        return ConstraintDefinition(
            value=value,
            label=label if label is not None else value,
            resolve=fn,
            fields=fields,
            description=fn.__doc__ or "",
        )

    return decorator
