"""Declarative mixin mapping PresetRecord onto a SQLAlchemy table."""

from __future__ import annotations

import copy
from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from preset_authz.preset._record import PresetRecord

__all__ = ["PresetMixin"]


class PresetMixin:
    """Columns for a preset table; combine with the host's declarative base.

    ``access`` stores the operation-keyed map verbatim
    (``{"read": {"constraint": ..., "extra": {...}}, ...}``) so any
    constraint's payload round-trips without schema changes.
    ``created_by`` is an integer column; hosts with string actor ids
    redeclare it as ``String``.

    Example::

        class Base(DeclarativeBase):
            pass

        class Preset(PresetMixin, Base):
            __tablename__ = "presets"
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    dataset: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    access: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    def to_record(self) -> PresetRecord:
        """Return the row as a detached ``PresetRecord``."""
        return PresetRecord(
            id=self.id,
            name=self.name,
            created_by=self.created_by,
            dataset=copy.deepcopy(dict(self.dataset or {})),
            access=PresetRecord.access_from_dict(self.access),
        )

    def apply_record(self, record: PresetRecord) -> None:
        """Copy *record*'s fields onto the row (new objects, so JSON changes are tracked)."""
        if record.id is not None:
            self.id = record.id  # type: ignore[assignment]
        self.name = record.name
        self.created_by = record.created_by  # type: ignore[assignment]
        self.dataset = copy.deepcopy(record.dataset)
        self.access = record.access_to_dict()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r})"
