"""explain_access() / explain_list_filter() — report access decisions with reasons."""

from __future__ import annotations

from preset_authz._types import ActorLike, policy_operation
from preset_authz.access._evaluator import AccessEvaluator
from preset_authz.compiler._where import compile_where
from preset_authz.exceptions import AccessEvaluationError
from preset_authz.explain._models import (
    AccessExplanation,
    BranchExplanation,
    ListFilterExplanation,
)
from preset_authz.preset._record import PresetRecord

__all__ = ["explain_access", "explain_list_filter"]


def explain_access(
    evaluator: AccessEvaluator,
    operation: str,
    actor: ActorLike,
    record: PresetRecord,
) -> AccessExplanation:
    """Explain why an actor can or cannot perform an operation on a preset.

    Unlike :meth:`AccessEvaluator.can_perform` this never raises for a
    faulting policy function; the fault becomes a denial carrying the
    diagnostic text.

    Args:
        evaluator: The evaluator to consult.
        operation: The operation (``create`` is explained as ``update``).
        actor: The requesting actor.
        record: The preset under check.

    Returns:
        An ``AccessExplanation`` with the verdict and its reason.
    """
    op = policy_operation(operation)
    try:
        decision = evaluator.decide(op, actor, record)
    except AccessEvaluationError as exc:
        return AccessExplanation(
            actor_repr=repr(actor),
            operation=op,
            preset_id=record.id,
            allowed=False,
            reason="policy evaluation failed",
            constraint=exc.constraint,
            collection="error" if exc.constraint is None else "allow",
            error=exc.reason,
        )

    return AccessExplanation(
        actor_repr=repr(actor),
        operation=op,
        preset_id=record.id,
        allowed=decision.allowed,
        reason=decision.reason,
        constraint=decision.constraint,
        collection=decision.collection,
    )


def explain_list_filter(
    evaluator: AccessEvaluator,
    operation: str,
    actor: ActorLike,
) -> ListFilterExplanation:
    """Explain how the list filter for *actor* is assembled, branch by branch.

    Returns:
        A ``ListFilterExplanation`` whose ``where`` equals
        ``compile_where(evaluator.list_filter(operation, actor))``.
    """
    op = policy_operation(operation)
    plan = evaluator.plan_list_filter(op, actor)
    labels = {c.value: c.label for c in evaluator.registry.list(op)}
    branches = [
        BranchExplanation(
            constraint=result.constraint,
            label=labels.get(result.constraint, result.constraint),
            status=result.status,
            where=compile_where(result.predicate),
            reason=result.reason,
        )
        for result in plan.branches
    ]

    return ListFilterExplanation(
        actor_repr=repr(actor),
        operation=op,
        collection=plan.collection.state,
        collection_where=compile_where(plan.collection.predicate),
        branches=branches,
        where=compile_where(plan.predicate),
    )
