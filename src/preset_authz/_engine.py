"""PresetAccess — the wired registry, option filter, evaluator and validator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from preset_authz._types import OPERATIONS, ActorLike, PolicyOperation, policy_operation
from preset_authz.access._evaluator import AccessEvaluator
from preset_authz.access._options import OptionFilter
from preset_authz.access._validator import ConstraintValidator
from preset_authz.config._presets import PresetsConfig
from preset_authz.constraints._base import ConstraintDefinition
from preset_authz.constraints._registry import ConstraintRegistry, build_registry
from preset_authz.exceptions import ConfigurationError
from preset_authz.predicate._nodes import FilterPredicate
from preset_authz.preset._record import ConstraintAccess, PresetRecord

__all__ = ["PresetAccess", "build_preset_access"]


@dataclass(frozen=True, slots=True)
class PresetAccess:
    """Everything a host needs to enforce preset access, built once at startup.

    Attributes:
        config: The configuration the components were built from.
        registry: The frozen constraint registry.
        option_filter: Shared by pickers and the validator.
        evaluator: Single-document and list-mode evaluation.
        validator: Write-time enforcement.
    """

    config: PresetsConfig
    registry: ConstraintRegistry
    option_filter: OptionFilter
    evaluator: AccessEvaluator
    validator: ConstraintValidator

    def available_options(self, operation: str, actor: ActorLike) -> list[ConstraintDefinition]:
        """Constraints *actor* may currently select for *operation*."""
        op = policy_operation(operation)
        return self.option_filter.available_options(op, actor, self.registry.list(op))

    def select_options(self, operation: str, actor: ActorLike) -> list[dict[str, Any]]:
        """``[{"label", "value"}]`` for a constraint picker."""
        return [c.option() for c in self.available_options(operation, actor)]

    def select_options_by_operation(
        self, actor: ActorLike
    ) -> dict[PolicyOperation, list[dict[str, Any]]]:
        return {op: self.select_options(op, actor) for op in OPERATIONS}

    def can_perform(self, operation: str, actor: ActorLike, record: PresetRecord) -> bool:
        return self.evaluator.can_perform(operation, actor, record)

    def authorize(self, operation: str, actor: ActorLike, record: PresetRecord) -> None:
        self.evaluator.authorize(operation, actor, record)

    def list_filter(self, operation: str, actor: ActorLike) -> FilterPredicate:
        return self.evaluator.list_filter(operation, actor)

    def validate_access(
        self,
        actor: ActorLike,
        submitted: Mapping[str, Any] | None,
        *,
        previous: Mapping[PolicyOperation, ConstraintAccess] | None = None,
    ) -> dict[PolicyOperation, ConstraintAccess]:
        return self.validator.validate_access(actor, submitted, previous=previous)


def build_preset_access(config: PresetsConfig | None = None) -> PresetAccess:
    """Build the preset access components from *config*.

    Registers built-ins and custom constraints, freezes the registry and
    wires the evaluator, option filter and validator to it.

    Raises:
        ConfigurationError: If the configuration is inconsistent, e.g.
            the default constraint is excluded.
        DuplicateConstraintError: If constraint values collide.

    Example::

        presets = build_preset_access(PresetsConfig(constraints={"read": [specific_roles]}))
        presets.can_perform("read", user, record)
    """
    cfg = config if config is not None else PresetsConfig()
    registry = build_registry(
        cfg.constraints,
        exclude_builtins=cfg.exclude_builtins,
        owner_field=cfg.owner_field,
    )
    for op in OPERATIONS:
        if not registry.has_constraint(op, cfg.default_constraint):
            raise ConfigurationError(
                f"Default constraint {cfg.default_constraint!r} is not registered for {op!r}"
            )

    option_filter = OptionFilter(cfg.filter_constraints)
    return PresetAccess(
        config=cfg,
        registry=registry,
        option_filter=option_filter,
        evaluator=AccessEvaluator(registry, collection_policy=cfg.collection_policy),
        validator=ConstraintValidator(
            registry, option_filter, default_constraint=cfg.default_constraint
        ),
    )
