"""Shared protocols and type aliases for preset-authz."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Literal, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from preset_authz.constraints._base import ConstraintDefinition, ResolveContext
    from preset_authz.predicate._nodes import FilterPredicate

__all__ = [
    "OPERATIONS",
    "ActorLike",
    "CollectionPolicyFn",
    "Decision",
    "FilterConstraintsFn",
    "OnUnknownConstraint",
    "Operation",
    "PolicyOperation",
    "ResolverFn",
    "access_path",
    "policy_operation",
]

# Every operation a caller may ask about.
Operation = Literal["create", "read", "update", "delete"]

# Operations that carry their own policy; "create" borrows "update".
PolicyOperation = Literal["read", "update", "delete"]

OPERATIONS: tuple[PolicyOperation, ...] = ("read", "update", "delete")

# Valid values for RuntimeConfig.on_unknown_constraint.
OnUnknownConstraint = Literal["silent", "warn"]


@runtime_checkable
class ActorLike(Protocol):
    """Structural type for the requesting identity.

    Any object with an ``id`` attribute satisfies this protocol. Resolvers
    may read further attributes (``roles``, ``org_id``, ...) on their own.

    Example::

        @dataclass
        class User:
            id: int
            roles: tuple[str, ...] = ()

        assert isinstance(User(id=1), ActorLike)
    """

    @property
    def id(self) -> int | str: ...


# Result of a collection policy or a constraint resolver.
Decision = Union[bool, "FilterPredicate"]

CollectionPolicyFn = Callable[[ActorLike], Decision]

ResolverFn = Callable[[ActorLike, "ResolveContext"], Decision]

FilterConstraintsFn = Callable[
    [PolicyOperation, ActorLike, "list[ConstraintDefinition]"],
    "Iterable[ConstraintDefinition | str]",
]


def policy_operation(operation: str) -> PolicyOperation:
    """Map a requested operation onto the operation whose policy governs it.

    ``create`` is governed by the ``update`` policy.

    Raises:
        ValueError: If *operation* is not a known operation.
    """
    if operation == "create":
        return "update"
    if operation in OPERATIONS:
        return operation  # type: ignore[return-value]
    raise ValueError(f"Unknown operation {operation!r}; expected one of create, read, update, delete")


def access_path(operation: str, *parts: str) -> str:
    """Dotted record path into the stored access entry for *operation*.

    Example::

        access_path("read", "constraint")  # "access.read.constraint"
        access_path("read", "extra", "users")  # "access.read.extra.users"
    """
    return ".".join(("access", operation, *parts))
