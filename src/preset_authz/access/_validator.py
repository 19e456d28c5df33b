"""ConstraintValidator — enforce access choices at write time."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from preset_authz._types import OPERATIONS, ActorLike, PolicyOperation, policy_operation
from preset_authz.access._options import OptionFilter
from preset_authz.constraints._base import ConstraintDefinition
from preset_authz.constraints._builtins import ONLY_ME
from preset_authz.constraints._registry import ConstraintRegistry
from preset_authz.exceptions import ForbiddenConstraintError, InvalidConstraintDataError
from preset_authz.preset._record import ConstraintAccess

__all__ = ["ConstraintValidator"]


class ConstraintValidator:
    """Re-check submitted access choices against the options the actor may pick.

    Never trusts a client-side filtered list: the option set is
    recomputed from the registry and the :class:`OptionFilter` for the
    acting actor on every write.

    Args:
        registry: The constraint registry.
        option_filter: The option filter shared with the UI layer.
        default_constraint: Applied to operations a new preset leaves out.

    Example::

        validator = ConstraintValidator(registry, OptionFilter(hide_everyone))
        access = validator.validate_access(user, {"read": {"constraint": "everyone"}})
        # raises ForbiddenConstraintError for non-admins
    """

    def __init__(
        self,
        registry: ConstraintRegistry,
        option_filter: OptionFilter | None = None,
        *,
        default_constraint: str = ONLY_ME,
    ) -> None:
        self._registry = registry
        self._option_filter = option_filter if option_filter is not None else OptionFilter()
        self._default_constraint = default_constraint

    def validate(
        self,
        operation: str,
        actor: ActorLike,
        access: ConstraintAccess | Mapping[str, Any] | str,
    ) -> ConstraintAccess:
        """Validate one operation's access choice.

        Args:
            operation: The operation the choice is for (``create`` counts
                as ``update``).
            actor: The actor performing the write.
            access: A ``ConstraintAccess``, its dict form, or a bare value.

        Returns:
            The normalized ``ConstraintAccess`` (``extra`` passed through
            the constraint's fields model).

        Raises:
            ForbiddenConstraintError: If the value is not among the
                options available to *actor*.
            InvalidConstraintDataError: If ``extra`` does not match the
                constraint's fields.
        """
        op = policy_operation(operation)
        try:
            entry = ConstraintAccess.coerce(access)
        except (TypeError, ValueError) as exc:
            raise InvalidConstraintDataError(
                operation=op, value=str(access), message=f"Invalid access entry for {op!r}: {exc}"
            ) from exc

        available = self._option_filter.available_options(op, actor, self._registry.list(op))
        definition = next((c for c in available if c.value == entry.constraint), None)
        if definition is None:
            raise ForbiddenConstraintError(operation=op, value=entry.constraint, actor=actor)

        return ConstraintAccess(entry.constraint, self._check_extra(op, definition, entry))

    def validate_access(
        self,
        actor: ActorLike,
        submitted: Mapping[str, ConstraintAccess | Mapping[str, Any] | str] | None,
        *,
        previous: Mapping[PolicyOperation, ConstraintAccess] | None = None,
    ) -> dict[PolicyOperation, ConstraintAccess]:
        """Validate a whole access map for a create or update.

        Entries identical to the stored ones are kept without re-checking,
        so editing a preset does not require the editor to be able to
        pick every constraint already on it. On create (``previous`` is
        ``None``) unspecified operations get the default constraint.

        Returns:
            The complete access map to persist.
        """
        result: dict[PolicyOperation, ConstraintAccess] = (
            dict(previous)
            if previous is not None
            else {op: ConstraintAccess(self._default_constraint) for op in OPERATIONS}
        )
        for key, raw in (submitted or {}).items():
            try:
                op = policy_operation(key)
            except ValueError as exc:
                raise InvalidConstraintDataError(
                    operation=str(key), value="", message=str(exc)
                ) from exc
            try:
                candidate = ConstraintAccess.coerce(raw)
            except (TypeError, ValueError):
                candidate = None
            if previous is not None and candidate is not None and previous.get(op) == candidate:
                continue
            result[op] = self.validate(op, actor, raw)
        return result

    def _check_extra(
        self, operation: PolicyOperation, definition: ConstraintDefinition, entry: ConstraintAccess
    ) -> dict[str, Any]:
        if definition.fields is None:
            if entry.extra:
                raise InvalidConstraintDataError(
                    operation=operation,
                    value=entry.constraint,
                    message=f"Constraint {entry.constraint!r} on {operation!r} takes no extra data",
                )
            return {}
        try:
            model = definition.fields.model_validate(entry.extra)
        except ValidationError as exc:
            raise InvalidConstraintDataError(
                operation=operation,
                value=entry.constraint,
                errors=exc.errors(include_url=False, include_context=False),
            ) from exc
        return model.model_dump(mode="json")
