"""Predicate tree — composable filters over preset record fields."""

from preset_authz.predicate._nodes import (
    And,
    Const,
    Contains,
    Eq,
    FilterPredicate,
    In,
    Not,
    Or,
    and_,
    contains,
    eq,
    false,
    in_,
    not_,
    or_,
    true,
)

__all__ = [
    "And",
    "Const",
    "Contains",
    "Eq",
    "FilterPredicate",
    "In",
    "Not",
    "Or",
    "and_",
    "contains",
    "eq",
    "false",
    "in_",
    "not_",
    "or_",
    "true",
]
