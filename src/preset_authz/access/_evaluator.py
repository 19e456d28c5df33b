"""AccessEvaluator — combine collection policy with per-preset constraints."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from preset_authz._audit import (
    log_access_decision,
    log_branch_failure,
    log_list_filter,
    log_unknown_constraint,
)
from preset_authz._types import (
    ActorLike,
    CollectionPolicyFn,
    Decision,
    PolicyOperation,
    access_path,
    policy_operation,
)
from preset_authz.compiler._eval import eval_predicate
from preset_authz.compiler._where import compile_where
from preset_authz.config._config import get_global_config
from preset_authz.constraints._base import ConstraintDefinition, ResolveContext
from preset_authz.constraints._registry import ConstraintRegistry
from preset_authz.exceptions import (
    AccessDenied,
    AccessEvaluationError,
    UnknownConstraintError,
    UnsupportedExpressionError,
)
from preset_authz.predicate._nodes import Const, FilterPredicate, and_, eq, false, or_, true
from preset_authz.preset._record import PresetRecord

__all__ = [
    "AccessDecision",
    "AccessEvaluator",
    "BranchResult",
    "CollectionResult",
    "ListFilterPlan",
]

logger = logging.getLogger(__name__)

CollectionState = Literal["allow", "deny", "filter", "error"]
BranchStatus = Literal["included", "declined", "failed"]


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """Outcome of a single-document check.

    Attributes:
        allowed: The final verdict.
        reason: Why the verdict was reached.
        constraint: The stored constraint consulted, if any.
        collection: How the collection policy answered.
    """

    allowed: bool
    reason: str
    constraint: str | None = None
    collection: CollectionState = "allow"


@dataclass(frozen=True, slots=True)
class CollectionResult:
    """Collection policy outcome in list mode."""

    state: CollectionState
    predicate: FilterPredicate
    reason: str = ""


@dataclass(frozen=True, slots=True)
class BranchResult:
    """One constraint's contribution to a list filter.

    Attributes:
        constraint: The constraint value the branch is guarded by.
        status: ``"included"`` when the branch can match, ``"declined"``
            when the resolver answered ``False``, ``"failed"`` when it
            raised or returned an invalid decision.
        predicate: The guarded branch, or ``false()`` unless included.
        reason: Diagnostic detail for declined/failed branches.
    """

    constraint: str
    status: BranchStatus
    predicate: FilterPredicate
    reason: str = ""


@dataclass(frozen=True, slots=True)
class ListFilterPlan:
    """How a list filter is assembled.

    Attributes:
        collection: The collection policy outcome.
        branches: Per-constraint results; empty when the collection
            policy denied or faulted.
        predicate: The assembled filter.
    """

    collection: CollectionResult
    branches: list[BranchResult]
    predicate: FilterPredicate


class AccessEvaluator:
    """Evaluate preset access for single documents and for bulk listing.

    The collection-level policy always runs first and short-circuits on
    ``False``. The document-level policy is the constraint stored on the
    preset for the operation, looked up in the registry.

    Args:
        registry: The (frozen) constraint registry.
        collection_policy: Optional mapping of operation to
            ``(actor) -> bool | FilterPredicate``. A missing operation
            allows and defers to the document-level constraint.

    Example::

        evaluator = AccessEvaluator(registry, collection_policy={"delete": admins_only})
        evaluator.can_perform("update", user, record)
        stmt = select(Preset).where(to_sql(evaluator.list_filter("read", user), Preset))
    """

    def __init__(
        self,
        registry: ConstraintRegistry,
        *,
        collection_policy: Mapping[str, CollectionPolicyFn] | None = None,
    ) -> None:
        self._registry = registry
        self._collection_policy: dict[str, CollectionPolicyFn] = dict(collection_policy or {})

    @property
    def registry(self) -> ConstraintRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Single-document path
    # ------------------------------------------------------------------

    def can_perform(self, operation: str, actor: ActorLike, record: PresetRecord) -> bool:
        """Check whether *actor* may perform *operation* on *record*.

        Args:
            operation: ``"create"``, ``"read"``, ``"update"`` or ``"delete"``.
            actor: The requesting actor.
            record: The preset under check.

        Returns:
            ``True`` only if both the collection policy and the stored
            constraint admit the actor.

        Raises:
            AccessEvaluationError: If a policy function raised or returned
                something other than a bool or ``FilterPredicate``.
        """
        return self.decide(operation, actor, record).allowed

    def authorize(self, operation: str, actor: ActorLike, record: PresetRecord) -> None:
        """Raise :class:`AccessDenied` unless :meth:`can_perform` admits the actor."""
        if not self.can_perform(operation, actor, record):
            raise AccessDenied(actor=actor, operation=operation, preset_id=record.id)

    def allows_collection(self, operation: str, actor: ActorLike, record: PresetRecord) -> bool:
        """Check only the collection-level policy against *record*.

        Used for ``create``, where the new preset has no stored
        constraint to consult yet.

        Raises:
            AccessEvaluationError: If the collection policy faults.
        """
        op = policy_operation(operation)
        collection = self._call_collection_policy(op, actor)
        if isinstance(collection, bool):
            return collection
        return self._match(collection, record, op, None)

    def decide(self, operation: str, actor: ActorLike, record: PresetRecord) -> AccessDecision:
        """Like :meth:`can_perform` but returns the reason with the verdict."""
        op = policy_operation(operation)
        decision = self._decide(op, actor, record)
        if get_global_config().log_access_decisions:
            log_access_decision(
                operation=op,
                actor=actor,
                preset_id=record.id,
                constraint=decision.constraint,
                allowed=decision.allowed,
                reason=decision.reason,
            )
        return decision

    def _decide(
        self, operation: PolicyOperation, actor: ActorLike, record: PresetRecord
    ) -> AccessDecision:
        collection = self._call_collection_policy(operation, actor)
        collection_state: CollectionState = "allow"
        if collection is False:
            return AccessDecision(False, "collection policy denied", None, "deny")
        if isinstance(collection, FilterPredicate):
            collection_state = "filter"
            if not self._match(collection, record, operation, None):
                return AccessDecision(
                    False, "collection policy filter did not match", None, collection_state
                )

        entry = record.access_for(operation)
        if entry is None:
            return AccessDecision(False, "no access entry stored", None, collection_state)

        try:
            definition = self._registry.resolve(operation, entry.constraint)
        except UnknownConstraintError:
            if get_global_config().on_unknown_constraint == "warn":
                log_unknown_constraint(
                    operation=operation, preset_id=record.id, constraint=entry.constraint
                )
            return AccessDecision(
                False, "constraint not registered", entry.constraint, collection_state
            )

        result = self._call_resolver(definition, actor, ResolveContext(operation, record))
        matched = self._match(result, record, operation, definition.value)
        reason = "constraint matched" if matched else "constraint did not match"
        return AccessDecision(matched, reason, definition.value, collection_state)

    def _call_collection_policy(self, operation: PolicyOperation, actor: ActorLike) -> Decision:
        fn = self._collection_policy.get(operation)
        if fn is None:
            return True
        try:
            result = fn(actor)
        except Exception as exc:
            raise AccessEvaluationError(
                operation=operation,
                constraint=None,
                reason=f"collection policy raised {type(exc).__name__}: {exc}",
            ) from exc
        if not isinstance(result, (bool, FilterPredicate)):
            raise AccessEvaluationError(
                operation=operation,
                constraint=None,
                reason=f"collection policy returned {type(result).__name__}",
            )
        return result

    def _call_resolver(
        self, definition: ConstraintDefinition, actor: ActorLike, context: ResolveContext
    ) -> Decision:
        try:
            result = definition.resolve(actor, context)
        except Exception as exc:
            raise AccessEvaluationError(
                operation=context.operation,
                constraint=definition.value,
                reason=f"resolver raised {type(exc).__name__}: {exc}",
            ) from exc
        if not isinstance(result, (bool, FilterPredicate)):
            raise AccessEvaluationError(
                operation=context.operation,
                constraint=definition.value,
                reason=f"resolver returned {type(result).__name__}",
            )
        return result

    def _match(
        self,
        result: Decision,
        record: PresetRecord,
        operation: PolicyOperation,
        constraint: str | None,
    ) -> bool:
        if isinstance(result, bool):
            return result
        try:
            return eval_predicate(result, record)
        except UnsupportedExpressionError as exc:
            raise AccessEvaluationError(
                operation=operation, constraint=constraint, reason=str(exc)
            ) from exc

    # ------------------------------------------------------------------
    # List-filtering path
    # ------------------------------------------------------------------

    def list_filter(self, operation: str, actor: ActorLike) -> FilterPredicate:
        """Compile one predicate selecting every preset *actor* may access.

        The result is a disjunction over the registered constraints, each
        branch guarded by the stored constraint value::

            (access.<op>.constraint == C1 AND sub1) OR (... == C2 AND sub2) ...

        AND-ed with the collection policy's filter when it returns one. It
        never needs the records themselves, so it can be pushed into a
        query. A resolver that raises drops only its own branch.

        Returns:
            A ``FilterPredicate``; ``false()`` when nothing can match.
        """
        op = policy_operation(operation)
        plan = self.plan_list_filter(op, actor)
        if get_global_config().log_access_decisions:
            log_list_filter(
                operation=op,
                actor=actor,
                branch_count=sum(1 for b in plan.branches if b.status == "included"),
                where=compile_where(plan.predicate),
            )
        return plan.predicate

    def plan_list_filter(self, operation: str, actor: ActorLike) -> ListFilterPlan:
        """Assemble the list filter and keep the pieces it was built from."""
        op = policy_operation(operation)
        collection = self.collection_filter(op, actor)
        if collection.state in ("deny", "error"):
            return ListFilterPlan(collection, [], false())
        branches = self.evaluate_branches(op, actor)
        included = [b.predicate for b in branches if b.status == "included"]
        return ListFilterPlan(collection, branches, and_(collection.predicate, or_(*included)))

    def collection_filter(self, operation: str, actor: ActorLike) -> CollectionResult:
        """Evaluate the collection policy for list mode.

        A collection policy that raises yields an ``"error"`` result
        matching nothing.
        """
        op = policy_operation(operation)
        try:
            decision = self._call_collection_policy(op, actor)
        except AccessEvaluationError as exc:
            logger.warning("List filter for %s denied: %s", op, exc.reason, exc_info=True)
            return CollectionResult("error", false(), exc.reason)
        if decision is False:
            return CollectionResult("deny", false(), "collection policy denied")
        if decision is True:
            return CollectionResult("allow", true())
        return CollectionResult("filter", decision)  # type: ignore[arg-type]

    def evaluate_branches(self, operation: str, actor: ActorLike) -> list[BranchResult]:
        """Resolve every registered constraint without record context.

        Returns one ``BranchResult`` per constraint, in registry order.
        """
        op = policy_operation(operation)
        context = ResolveContext(op)
        results: list[BranchResult] = []
        for definition in self._registry.list(op):
            guard = eq(access_path(op, "constraint"), definition.value)
            try:
                sub = self._call_resolver(definition, actor, context)
            except AccessEvaluationError as exc:
                log_branch_failure(
                    operation=op,
                    constraint=definition.value,
                    reason=exc.reason,
                    exc_info=exc.__cause__ is not None,
                )
                results.append(BranchResult(definition.value, "failed", false(), exc.reason))
                continue

            if sub is True:
                results.append(BranchResult(definition.value, "included", guard))
            elif sub is False or (isinstance(sub, Const) and not sub.value):
                results.append(
                    BranchResult(definition.value, "declined", false(), "resolver declined")
                )
            else:
                results.append(BranchResult(definition.value, "included", and_(guard, sub)))  # type: ignore[arg-type]
        return results
