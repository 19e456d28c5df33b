"""Exception hierarchy for preset-authz."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

__all__ = [
    "AccessDenied",
    "AccessEvaluationError",
    "ConfigurationError",
    "ConstraintValidationError",
    "DuplicateConstraintError",
    "ForbiddenConstraintError",
    "InvalidConstraintDataError",
    "PredicateCompilationError",
    "PresetAuthzError",
    "PresetNotFoundError",
    "UnknownConstraintError",
    "UnsupportedExpressionError",
]


class PresetAuthzError(Exception):
    """Base exception for all preset-authz errors."""


class ConfigurationError(PresetAuthzError):
    """The host configuration is malformed.

    Raised while building the registry and evaluator. These errors are
    meant to stop application startup.
    """


class DuplicateConstraintError(ConfigurationError):
    """A constraint value was registered twice for the same operation.

    Attributes:
        operation: The operation the constraint was registered for.
        value: The duplicated constraint value.
    """

    def __init__(self, *, operation: str, value: str) -> None:
        self.operation = operation
        self.value = value
        super().__init__(f"Constraint {value!r} is already registered for {operation!r}")


class UnknownConstraintError(PresetAuthzError):
    """No constraint with this value is registered for the operation.

    The evaluator converts this into a denial; it only escapes from
    direct ``ConstraintRegistry.resolve`` calls.

    Attributes:
        operation: The operation looked up.
        value: The constraint value that was not found.
    """

    def __init__(self, *, operation: str, value: str) -> None:
        self.operation = operation
        self.value = value
        super().__init__(f"No constraint {value!r} registered for {operation!r}")


class ConstraintValidationError(PresetAuthzError):
    """A submitted access choice was rejected at write time.

    User-facing validation failure, not a system fault.
    """


class ForbiddenConstraintError(ConstraintValidationError):
    """The actor may not select this constraint for this operation.

    Attributes:
        operation: The operation whose access was being written.
        value: The submitted constraint value.
        actor: The actor performing the write.

    Example::

        try:
            validator.validate("read", user, {"constraint": "everyone"})
        except ForbiddenConstraintError as exc:
            print(f"{exc.value} is not available for {exc.operation}")
    """

    def __init__(self, *, operation: str, value: str, actor: object) -> None:
        self.operation = operation
        self.value = value
        self.actor = actor
        super().__init__(
            f"Constraint {value!r} is not available to actor {actor!r} for {operation!r}"
        )


class InvalidConstraintDataError(ConstraintValidationError):
    """The ``extra`` payload does not match the constraint's declared fields.

    Attributes:
        operation: The operation whose access was being written.
        value: The submitted constraint value.
        errors: Field-level error details.
    """

    def __init__(
        self,
        *,
        operation: str,
        value: str,
        errors: Sequence[dict[str, Any]] = (),
        message: str | None = None,
    ) -> None:
        self.operation = operation
        self.value = value
        self.errors = list(errors)
        if message is None:
            message = f"Invalid data for constraint {value!r} on {operation!r}"
            if self.errors:
                details = "; ".join(
                    f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}"
                    for e in self.errors
                )
                message = f"{message}: {details}"
        super().__init__(message)


class AccessEvaluationError(PresetAuthzError):
    """A policy function faulted during a single-document check.

    The original exception, if any, is chained as ``__cause__``.

    Attributes:
        operation: The operation being checked.
        constraint: The constraint value being resolved, or ``None`` when
            the collection policy faulted.
        reason: Short diagnostic text.
    """

    def __init__(self, *, operation: str, constraint: str | None, reason: str) -> None:
        self.operation = operation
        self.constraint = constraint
        self.reason = reason
        where = f"constraint {constraint!r}" if constraint is not None else "collection policy"
        super().__init__(f"Access evaluation failed for {operation!r} ({where}): {reason}")


class AccessDenied(PresetAuthzError):  # noqa: N818
    """Actor is not authorized to perform the operation on the preset.

    Attributes:
        actor: The actor that was denied.
        operation: The operation that was attempted.
        preset_id: Identifier of the preset involved.
    """

    def __init__(
        self,
        *,
        actor: object,
        operation: str,
        preset_id: object,
        message: str | None = None,
    ) -> None:
        self.actor = actor
        self.operation = operation
        self.preset_id = preset_id
        if message is None:
            message = f"Actor {actor!r} is not authorized to {operation} preset {preset_id!r}"
        super().__init__(message)


class PresetNotFoundError(PresetAuthzError):
    """No preset exists with the requested identifier."""

    def __init__(self, preset_id: object) -> None:
        self.preset_id = preset_id
        super().__init__(f"Preset {preset_id!r} does not exist")


class UnsupportedExpressionError(PresetAuthzError):
    """Predicate node type is not supported by the in-memory evaluator."""


class PredicateCompilationError(PresetAuthzError):
    """Predicate cannot be translated into a SQL expression.

    Raised when a field path does not name a mapped column or a JSON
    path below one.
    """
