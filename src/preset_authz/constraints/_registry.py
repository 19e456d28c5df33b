"""ConstraintRegistry — ordered, append-only catalogue of constraints."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from preset_authz._types import OPERATIONS, PolicyOperation, policy_operation
from preset_authz.constraints._base import ConstraintDefinition
from preset_authz.constraints._builtins import BUILTIN_CONSTRAINTS, builtin_constraints
from preset_authz.exceptions import (
    ConfigurationError,
    DuplicateConstraintError,
    UnknownConstraintError,
)

__all__ = ["ConstraintRegistry", "build_registry"]


class ConstraintRegistry:
    """Registry mapping each operation to its ordered constraint definitions.

    Append-only during configuration. After :meth:`freeze` it is
    read-only and safe for unsynchronized concurrent reads.

    Example::

        registry = ConstraintRegistry()
        registry.register("read", specific_roles)
        registry.freeze()
        [c.value for c in registry.list("read")]
    """

    def __init__(self) -> None:
        self._constraints: dict[PolicyOperation, dict[str, ConstraintDefinition]] = {
            op: {} for op in OPERATIONS
        }
        self._frozen = False

    def register(self, operation: str, definition: ConstraintDefinition) -> None:
        """Append a constraint definition for *operation*.

        Args:
            operation: ``"read"``, ``"update"`` or ``"delete"``.
            definition: The constraint to add.

        Raises:
            DuplicateConstraintError: If ``definition.value`` is already
                registered for the operation.
            ConfigurationError: If the registry is frozen or the
                operation carries no policy of its own.
        """
        if self._frozen:
            raise ConfigurationError("ConstraintRegistry is frozen; register constraints at startup")
        if operation not in OPERATIONS:
            raise ConfigurationError(
                f"Cannot register constraints for {operation!r}; expected one of {OPERATIONS!r}"
            )
        if not isinstance(definition, ConstraintDefinition):
            raise ConfigurationError(
                f"Expected a ConstraintDefinition for {operation!r}, got {type(definition).__name__}"
            )
        bucket = self._constraints[operation]  # type: ignore[index]
        if definition.value in bucket:
            raise DuplicateConstraintError(operation=operation, value=definition.value)
        bucket[definition.value] = definition

    def list(self, operation: str) -> list[ConstraintDefinition]:
        """Return the constraints for *operation* in registration order.

        Returns a copy so callers cannot mutate the registry state.
        ``"create"`` shares the ``"update"`` constraints.
        """
        return list(self._constraints[policy_operation(operation)].values())

    def resolve(self, operation: str, value: str) -> ConstraintDefinition:
        """Look up one constraint.

        Raises:
            UnknownConstraintError: If *value* is not registered for the
                operation.
        """
        op = policy_operation(operation)
        try:
            return self._constraints[op][value]
        except (KeyError, TypeError):
            raise UnknownConstraintError(operation=op, value=value) from None

    def has_constraint(self, operation: str, value: str) -> bool:
        return value in self._constraints[policy_operation(operation)]

    def freeze(self) -> None:
        """Close the registry to further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __repr__(self) -> str:
        counts = ", ".join(f"{op}={len(self._constraints[op])}" for op in OPERATIONS)
        return f"ConstraintRegistry({counts}, frozen={self._frozen})"


def build_registry(
    constraints: Mapping[str, Sequence[ConstraintDefinition]] | None = None,
    *,
    exclude_builtins: Iterable[str] = (),
    owner_field: str = "created_by",
) -> ConstraintRegistry:
    """Build and freeze a registry: built-ins first, then custom constraints.

    Args:
        constraints: Custom constraints per operation, in picker order.
        exclude_builtins: Built-in values to leave out.
        owner_field: Record field the ``onlyMe`` built-in compares against.

    Returns:
        A frozen ``ConstraintRegistry``.

    Raises:
        DuplicateConstraintError: If a custom value collides with a
            built-in or another custom value.
        ConfigurationError: If an excluded name is not a built-in.

    Example::

        registry = build_registry({"read": [specific_roles]}, exclude_builtins=["everyone"])
    """
    excluded = frozenset(exclude_builtins)
    unknown = excluded.difference(BUILTIN_CONSTRAINTS)
    if unknown:
        raise ConfigurationError(f"Cannot exclude unknown built-in constraints: {sorted(unknown)!r}")

    registry = ConstraintRegistry()
    custom = constraints or {}
    for operation in OPERATIONS:
        for definition in builtin_constraints(owner_field=owner_field, exclude=excluded):
            registry.register(operation, definition)
        for definition in custom.get(operation, ()):
            registry.register(operation, definition)
    registry.freeze()
    return registry
