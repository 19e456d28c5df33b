"""PresetsConfig — the host application's preset access configuration."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from preset_authz._types import OPERATIONS, CollectionPolicyFn, FilterConstraintsFn
from preset_authz.constraints._base import ConstraintDefinition
from preset_authz.constraints._builtins import BUILTIN_CONSTRAINTS, ONLY_ME
from preset_authz.exceptions import ConfigurationError

__all__ = ["PresetsConfig"]


@dataclass(frozen=True, slots=True)
class PresetsConfig:
    """Static configuration supplied by the host at startup.

    Attributes:
        collection_policy: Per-operation collection-level policy. A
            missing operation means "allow, defer to the document".
        constraints: Custom constraints per operation, appended after
            the built-ins in the given order.
        filter_constraints: Optional ``(operation, actor, options)``
            override for the option filter. It *replaces* the default
            (identity), so it must return every option it wants kept,
            built-ins included.
        exclude_builtins: Built-in constraint values to leave out.
        owner_field: Record field holding the author's id.
        default_constraint: Constraint applied to operations a new
            preset does not specify.

    Example::

        config = PresetsConfig(
            collection_policy={"delete": lambda actor: "admin" in actor.roles},
            constraints={"read": [specific_roles]},
            filter_constraints=hide_everyone_from_non_admins,
        )
    """

    collection_policy: Mapping[str, CollectionPolicyFn] = field(default_factory=dict)
    constraints: Mapping[str, Sequence[ConstraintDefinition]] = field(default_factory=dict)
    filter_constraints: FilterConstraintsFn | None = None
    exclude_builtins: frozenset[str] = frozenset()
    owner_field: str = "created_by"
    default_constraint: str = ONLY_ME

    def __post_init__(self) -> None:
        # Use object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "exclude_builtins", frozenset(self.exclude_builtins))

        for op, fn in self.collection_policy.items():
            if op not in OPERATIONS:
                raise ConfigurationError(
                    f"collection_policy has unknown operation {op!r}; expected one of {OPERATIONS!r}"
                )
            if not callable(fn):
                raise ConfigurationError(f"collection_policy[{op!r}] is not callable")

        for op, definitions in self.constraints.items():
            if op not in OPERATIONS:
                raise ConfigurationError(
                    f"constraints has unknown operation {op!r}; expected one of {OPERATIONS!r}"
                )
            if isinstance(definitions, (str, bytes)) or not isinstance(definitions, Sequence):
                raise ConfigurationError(f"constraints[{op!r}] must be a sequence of definitions")

        if self.filter_constraints is not None and not callable(self.filter_constraints):
            raise ConfigurationError("filter_constraints must be callable")

        unknown = self.exclude_builtins.difference(BUILTIN_CONSTRAINTS)
        if unknown:
            raise ConfigurationError(
                f"exclude_builtins names unknown built-in constraints: {sorted(unknown)!r}"
            )

        if not self.owner_field:
            raise ConfigurationError("owner_field must be a non-empty field name")
