"""Access engine — evaluation, option filtering and write-time validation."""

from preset_authz.access._evaluator import (
    AccessDecision,
    AccessEvaluator,
    BranchResult,
    CollectionResult,
    ListFilterPlan,
)
from preset_authz.access._options import OptionFilter
from preset_authz.access._validator import ConstraintValidator

__all__ = [
    "AccessDecision",
    "AccessEvaluator",
    "BranchResult",
    "CollectionResult",
    "ConstraintValidator",
    "ListFilterPlan",
    "OptionFilter",
]
