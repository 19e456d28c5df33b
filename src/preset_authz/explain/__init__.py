"""Explain mode — structured insight into access decisions."""

from preset_authz.explain._access import explain_access, explain_list_filter
from preset_authz.explain._models import (
    AccessExplanation,
    BranchExplanation,
    ListFilterExplanation,
)

__all__ = [
    "AccessExplanation",
    "BranchExplanation",
    "ListFilterExplanation",
    "explain_access",
    "explain_list_filter",
]
