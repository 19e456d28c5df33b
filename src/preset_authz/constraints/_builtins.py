"""Built-in constraints: onlyMe, everyone, specificUsers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from preset_authz._types import ActorLike, Decision, access_path
from preset_authz.constraints._base import ConstraintDefinition, ResolveContext
from preset_authz.predicate._nodes import contains, eq

__all__ = [
    "BUILTIN_CONSTRAINTS",
    "EVERYONE",
    "ONLY_ME",
    "SPECIFIC_USERS",
    "SpecificUsersFields",
    "builtin_constraints",
]

ONLY_ME = "onlyMe"
EVERYONE = "everyone"
SPECIFIC_USERS = "specificUsers"

# Registration order, which is also the default picker order.
BUILTIN_CONSTRAINTS: tuple[str, ...] = (ONLY_ME, EVERYONE, SPECIFIC_USERS)


class SpecificUsersFields(BaseModel):
    """Extra data for ``specificUsers``: the ids granted access."""

    model_config = ConfigDict(extra="forbid")

    users: list[int | str] = Field(default_factory=list)


def _only_me(owner_field: str) -> ConstraintDefinition:
    def only_me(actor: ActorLike, context: ResolveContext) -> Decision:
        return eq(owner_field, actor.id)

    return ConstraintDefinition(
        value=ONLY_ME,
        label="Only Me",
        resolve=only_me,
        description="Only the author of the preset.",
    )


def _everyone() -> ConstraintDefinition:
    def everyone(actor: ActorLike, context: ResolveContext) -> Decision:
        return True

    return ConstraintDefinition(
        value=EVERYONE,
        label="Everyone",
        resolve=everyone,
        description="Any actor the collection policy admits.",
    )


def _specific_users() -> ConstraintDefinition:
    def specific_users(actor: ActorLike, context: ResolveContext) -> Decision:
        return contains(access_path(context.operation, "extra", "users"), actor.id)

    return ConstraintDefinition(
        value=SPECIFIC_USERS,
        label="Specific Users",
        resolve=specific_users,
        fields=SpecificUsersFields,
        description="Actors listed in the preset's user list.",
    )


def builtin_constraints(
    *,
    owner_field: str = "created_by",
    exclude: frozenset[str] = frozenset(),
) -> list[ConstraintDefinition]:
    """Return fresh built-in constraint definitions, minus *exclude*.

    Args:
        owner_field: Record field holding the author's id (``onlyMe``).
        exclude: Built-in values the host configuration opted out of.

    Example::

        [c.value for c in builtin_constraints()]
        # ["onlyMe", "everyone", "specificUsers"]
    """
    factories = {
        ONLY_ME: lambda: _only_me(owner_field),
        EVERYONE: _everyone,
        SPECIFIC_USERS: _specific_users,
    }
    return [factories[value]() for value in BUILTIN_CONSTRAINTS if value not in exclude]
