"""OptionFilter — which constraints an actor may currently select."""

from __future__ import annotations

from collections.abc import Sequence

from preset_authz._types import ActorLike, FilterConstraintsFn, policy_operation
from preset_authz.constraints._base import ConstraintDefinition
from preset_authz.exceptions import AccessEvaluationError

__all__ = ["OptionFilter"]


class OptionFilter:
    """Restrict the constraint choices offered to, and accepted from, an actor.

    The same instance drives picker rendering and write-time validation,
    so the two can never disagree for equal inputs.

    Without an override every candidate is available. An override
    *replaces* that default: it receives ``(operation, actor, options)``
    and must return every option it wants to keep, built-ins included.
    It may return definitions or bare values; the result is reduced to
    the candidates it names, in candidate order, so an override cannot
    introduce an option that is not registered.

    Example::

        def hide_everyone(operation, actor, options):
            if "admin" in actor.roles:
                return options
            return [o for o in options if o.value != "everyone"]

        option_filter = OptionFilter(hide_everyone)
        option_filter.available_options("read", user, registry.list("read"))
    """

    def __init__(self, override: FilterConstraintsFn | None = None) -> None:
        self._override = override

    @property
    def has_override(self) -> bool:
        return self._override is not None

    def available_options(
        self,
        operation: str,
        actor: ActorLike,
        all_options: Sequence[ConstraintDefinition],
    ) -> list[ConstraintDefinition]:
        """Return the subset of *all_options* selectable by *actor*.

        Pure and deterministic for a given ``(operation, actor, all_options)``.

        Raises:
            AccessEvaluationError: If the override raises.
        """
        candidates = list(all_options)
        if self._override is None:
            return candidates

        op = policy_operation(operation)
        try:
            chosen = self._override(op, actor, list(candidates))
        except Exception as exc:
            raise AccessEvaluationError(
                operation=op,
                constraint=None,
                reason=f"filter_constraints raised {type(exc).__name__}: {exc}",
            ) from exc

        keep: set[str] = set()
        for item in chosen or ():
            if isinstance(item, ConstraintDefinition):
                keep.add(item.value)
            elif isinstance(item, str):
                keep.add(item)
            else:
                raise AccessEvaluationError(
                    operation=op,
                    constraint=None,
                    reason=f"filter_constraints returned {type(item).__name__} item",
                )
        return [c for c in candidates if c.value in keep]
