"""PresetRecord and ConstraintAccess — the persisted preset shape."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from preset_authz._types import OPERATIONS, PolicyOperation, policy_operation
from preset_authz.constraints._builtins import ONLY_ME

__all__ = ["ConstraintAccess", "PresetRecord", "default_access"]


@dataclass(frozen=True, slots=True)
class ConstraintAccess:
    """The access choice stored for one operation.

    A tagged union: ``constraint`` selects the variant and ``extra``
    holds that variant's payload (shaped by the constraint's fields).

    Attributes:
        constraint: The chosen constraint value.
        extra: Constraint-specific data, e.g. ``{"users": [1, 2]}``.
    """

    constraint: str
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the on-disk representation."""
        return {"constraint": self.constraint, "extra": copy.deepcopy(self.extra)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConstraintAccess:
        extra = data.get("extra")
        if extra is None:
            extra = {}
        elif not isinstance(extra, Mapping):
            raise TypeError(f"Access entry 'extra' must be a mapping, got {type(extra).__name__}")
        return cls(constraint=data["constraint"], extra=copy.deepcopy(dict(extra)))

    @classmethod
    def coerce(cls, value: ConstraintAccess | Mapping[str, Any] | str) -> ConstraintAccess:
        """Accept a ``ConstraintAccess``, its dict form, or a bare value."""
        if isinstance(value, ConstraintAccess):
            return value
        if isinstance(value, str):
            return cls(constraint=value)
        if isinstance(value, Mapping):
            if "constraint" not in value:
                raise ValueError(f"Access entry is missing 'constraint': {dict(value)!r}")
            return cls.from_dict(value)
        raise TypeError(f"Cannot interpret {type(value).__name__} as a ConstraintAccess")


def default_access(default_constraint: str = ONLY_ME) -> dict[PolicyOperation, ConstraintAccess]:
    """Access map used when a preset is created without explicit choices."""
    return {op: ConstraintAccess(default_constraint) for op in OPERATIONS}


@dataclass(slots=True)
class PresetRecord:
    """A named, persisted bundle of dataset settings with its own access policy.

    Attributes:
        id: Storage identifier (``None`` before the first save).
        name: Display name.
        created_by: Id of the authoring actor.
        dataset: Opaque filter / column / sort payload.
        access: Per-operation access choices. The only source of
            document-level policy.

    Example::

        record = PresetRecord(
            id=1,
            name="Open tickets",
            created_by=7,
            dataset={"where": {"status": {"equals": "open"}}},
            access={"read": ConstraintAccess("specificUsers", {"users": [7, 9]})},
        )
    """

    id: int | str | None
    name: str
    created_by: int | str | None = None
    dataset: dict[str, Any] = field(default_factory=dict)
    access: dict[PolicyOperation, ConstraintAccess] = field(default_factory=dict)

    def access_for(self, operation: str) -> ConstraintAccess | None:
        """Return the stored access entry governing *operation*."""
        return self.access.get(policy_operation(operation))

    def access_to_dict(self) -> dict[str, dict[str, Any]]:
        return {op: entry.to_dict() for op, entry in self.access.items()}

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "created_by": self.created_by,
            "dataset": copy.deepcopy(self.dataset),
            "access": self.access_to_dict(),
        }

    @staticmethod
    def access_from_dict(
        data: Mapping[str, Any] | None,
    ) -> dict[PolicyOperation, ConstraintAccess]:
        """Parse the on-disk access map, ignoring keys that are not operations."""
        parsed: dict[PolicyOperation, ConstraintAccess] = {}
        for op in OPERATIONS:
            entry = (data or {}).get(op)
            if isinstance(entry, Mapping) and "constraint" in entry:
                parsed[op] = ConstraintAccess.from_dict(entry)
        return parsed

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PresetRecord:
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            created_by=data.get("created_by"),
            dataset=copy.deepcopy(dict(data.get("dataset") or {})),
            access=cls.access_from_dict(data.get("access")),
        )
