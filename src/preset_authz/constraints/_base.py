"""ConstraintDefinition and ResolveContext — the registry's value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from preset_authz._types import PolicyOperation, ResolverFn
from preset_authz.exceptions import ConfigurationError

if TYPE_CHECKING:
    from preset_authz.preset._record import PresetRecord

__all__ = ["ConstraintDefinition", "ResolveContext"]


@dataclass(frozen=True, slots=True)
class ResolveContext:
    """What a resolver knows about the check it is part of.

    Attributes:
        operation: The policy operation being checked.
        record: The preset under a single-document check, or ``None``
            when building a list filter. Resolvers must produce a
            decision in both cases.
    """

    operation: PolicyOperation
    record: PresetRecord | None = None

    @property
    def has_record(self) -> bool:
        return self.record is not None


@dataclass(frozen=True, slots=True)
class ConstraintDefinition:
    """A named, selectable access rule for one operation.

    Attributes:
        value: Identifier stored on the preset (unique per operation).
        label: Display label for pickers.
        resolve: ``(actor, ResolveContext) -> bool | FilterPredicate``.
        fields: Optional pydantic model describing the ``extra`` payload
            the author supplies with this choice.
        description: Human-readable description (from docstring).
    """

    value: str
    label: str
    resolve: ResolverFn
    fields: type[BaseModel] | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise ConfigurationError(f"Constraint value must be a non-empty string, got {self.value!r}")
        if not callable(self.resolve):
            raise ConfigurationError(f"Constraint {self.value!r} resolver is not callable")
        if self.fields is not None and not (
            isinstance(self.fields, type) and issubclass(self.fields, BaseModel)
        ):
            raise ConfigurationError(
                f"Constraint {self.value!r} fields must be a pydantic BaseModel subclass, "
                f"got {self.fields!r}"
            )

    def option(self) -> dict[str, Any]:
        """Return the ``{"label", "value"}`` pair a picker renders."""
        return {"label": self.label, "value": self.value}
