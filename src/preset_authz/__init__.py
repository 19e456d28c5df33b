"""preset-authz — access control for user-authored, shareable query presets.

Each preset stores, per operation, a constraint chosen by its author from
a registry of named rules. A static collection-level policy sits on top.
The engine answers single-document checks in memory and compiles one
pushdown filter for listing.

Example::

    from preset_authz import PresetsConfig, build_preset_access

    presets = build_preset_access(
        PresetsConfig(collection_policy={"delete": lambda actor: "admin" in actor.roles})
    )

    presets.can_perform("update", current_user, record)
    stmt = authorize_query(
        select(Preset), actor=current_user, operation="read", evaluator=presets.evaluator
    )
"""

from importlib.metadata import PackageNotFoundError, version

from preset_authz._engine import PresetAccess, build_preset_access
from preset_authz._types import ActorLike, Operation
from preset_authz.access._evaluator import AccessDecision, AccessEvaluator
from preset_authz.access._options import OptionFilter
from preset_authz.access._validator import ConstraintValidator
from preset_authz.compiler._eval import eval_predicate
from preset_authz.compiler._query import authorize_query
from preset_authz.compiler._sql import to_sql
from preset_authz.compiler._where import compile_where
from preset_authz.config._config import RuntimeConfig, configure
from preset_authz.config._presets import PresetsConfig
from preset_authz.constraints._base import ConstraintDefinition, ResolveContext
from preset_authz.constraints._decorator import constraint
from preset_authz.constraints._registry import ConstraintRegistry, build_registry
from preset_authz.exceptions import (
    AccessDenied,
    AccessEvaluationError,
    ConfigurationError,
    ConstraintValidationError,
    DuplicateConstraintError,
    ForbiddenConstraintError,
    InvalidConstraintDataError,
    PresetAuthzError,
    PresetNotFoundError,
    UnknownConstraintError,
)
from preset_authz.predicate._nodes import FilterPredicate
from preset_authz.preset._record import ConstraintAccess, PresetRecord

try:
    __version__ = version("preset-authz")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "__version__",
    "AccessDecision",
    "AccessDenied",
    "AccessEvaluationError",
    "AccessEvaluator",
    "ActorLike",
    "ConfigurationError",
    "ConstraintAccess",
    "ConstraintDefinition",
    "ConstraintRegistry",
    "ConstraintValidationError",
    "ConstraintValidator",
    "DuplicateConstraintError",
    "FilterPredicate",
    "ForbiddenConstraintError",
    "InvalidConstraintDataError",
    "Operation",
    "OptionFilter",
    "PresetAccess",
    "PresetAuthzError",
    "PresetNotFoundError",
    "PresetRecord",
    "PresetsConfig",
    "ResolveContext",
    "RuntimeConfig",
    "UnknownConstraintError",
    "authorize_query",
    "build_preset_access",
    "build_registry",
    "compile_where",
    "configure",
    "constraint",
    "eval_predicate",
    "to_sql",
]
