"""Constraint registry — built-in and custom per-operation access rules."""

from preset_authz.constraints._base import ConstraintDefinition, ResolveContext
from preset_authz.constraints._builtins import (
    BUILTIN_CONSTRAINTS,
    EVERYONE,
    ONLY_ME,
    SPECIFIC_USERS,
    SpecificUsersFields,
    builtin_constraints,
)
from preset_authz.constraints._decorator import constraint
from preset_authz.constraints._registry import ConstraintRegistry, build_registry

__all__ = [
    "BUILTIN_CONSTRAINTS",
    "EVERYONE",
    "ONLY_ME",
    "SPECIFIC_USERS",
    "ConstraintDefinition",
    "ConstraintRegistry",
    "ResolveContext",
    "SpecificUsersFields",
    "build_registry",
    "builtin_constraints",
    "constraint",
]
