"""Data models for explain output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["AccessExplanation", "BranchExplanation", "ListFilterExplanation"]


@dataclass(frozen=True, slots=True)
class AccessExplanation:
    """Why an actor can or cannot perform an operation on one preset.

    Attributes:
        actor_repr: String representation of the actor.
        operation: The policy operation checked.
        preset_id: Identifier of the preset.
        allowed: The verdict.
        reason: Why the verdict was reached.
        constraint: The stored constraint consulted, if any.
        collection: How the collection policy answered
            (``"allow"``, ``"deny"``, ``"filter"`` or ``"error"``).
        error: Diagnostic text when a policy function faulted.
    """

    actor_repr: str
    operation: str
    preset_id: Any
    allowed: bool
    reason: str
    constraint: str | None
    collection: str
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "actor_repr": self.actor_repr,
            "operation": self.operation,
            "preset_id": self.preset_id,
            "allowed": self.allowed,
            "reason": self.reason,
            "constraint": self.constraint,
            "collection": self.collection,
            "error": self.error,
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        verdict = "ALLOWED" if self.allowed else "DENIED"
        lines: list[str] = []
        lines.append(f"Access Check: {verdict}")
        lines.append(f"  Actor: {self.actor_repr}")
        lines.append(f"  Operation: {self.operation}")
        lines.append(f"  Preset: {self.preset_id!r}")
        lines.append(f"  Collection policy: {self.collection}")
        lines.append(f"  Constraint: {self.constraint if self.constraint is not None else '-'}")
        lines.append(f"  Reason: {self.reason}")
        if self.error:
            lines.append(f"  Error: {self.error}")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class BranchExplanation:
    """One constraint branch of a list filter.

    Attributes:
        constraint: The constraint value guarding the branch.
        label: The constraint's display label.
        status: ``"included"``, ``"declined"`` or ``"failed"``.
        where: The branch as a where-document.
        reason: Detail for declined or failed branches.
    """

    constraint: str
    label: str
    status: str
    where: dict[str, Any]
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "constraint": self.constraint,
            "label": self.label,
            "status": self.status,
            "where": self.where,
            "reason": self.reason,
        }


@dataclass(frozen=True, slots=True)
class ListFilterExplanation:
    """How the list filter for an actor and operation was assembled.

    Attributes:
        actor_repr: String representation of the actor.
        operation: The policy operation.
        collection: How the collection policy answered.
        collection_where: The collection filter as a where-document.
        branches: Per-constraint branches, in registry order. Empty when
            the collection policy short-circuited.
        where: The combined filter as a where-document.
    """

    actor_repr: str
    operation: str
    collection: str
    collection_where: dict[str, Any]
    branches: list[BranchExplanation]
    where: dict[str, Any]

    @property
    def failed(self) -> list[str]:
        """Constraint values whose branch was dropped because it faulted."""
        return [b.constraint for b in self.branches if b.status == "failed"]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "actor_repr": self.actor_repr,
            "operation": self.operation,
            "collection": self.collection,
            "collection_where": self.collection_where,
            "branches": [b.to_dict() for b in self.branches],
            "where": self.where,
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        lines: list[str] = []
        lines.append(f"List Filter Explanation for operation={self.operation!r}")
        lines.append(f"  Actor: {self.actor_repr}")
        lines.append(f"  Collection policy: {self.collection}")
        lines.append("")
        if not self.branches:
            lines.append("    NO BRANCHES (collection policy short-circuited)")
        for b in self.branches:
            status = b.status.upper()
            suffix = f" — {b.reason}" if b.reason else ""
            lines.append(f"    - {b.constraint} [{status}]: {b.label}{suffix}")
        lines.append("")
        lines.append(f"  Where: {self.where}")
        if self.failed:
            lines.append(f"  WARNING: branches dropped after resolver errors: {self.failed}")
        return "\n".join(lines)
