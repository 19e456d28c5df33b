"""PresetStore — validated writes and authorized reads over a SQLAlchemy session."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from preset_authz._types import ActorLike, Operation
from preset_authz.compiler._query import authorize_query
from preset_authz.exceptions import AccessDenied, PresetNotFoundError
from preset_authz.preset._record import PresetRecord
from preset_authz.storage._orm import PresetMixin

if TYPE_CHECKING:
    from preset_authz._engine import PresetAccess

__all__ = ["PresetStore"]

logger = logging.getLogger(__name__)


class PresetStore:
    """Persist presets through the access engine.

    Every write passes through the ``ConstraintValidator``; updates,
    deletes and reads of a single preset go through ``authorize``;
    listing pushes the compiled list filter into the query. The store
    flushes but never commits; transaction boundaries belong to the
    caller. Concurrent updates are last-write-wins.

    Args:
        session: A SQLAlchemy ``Session``.
        model: A mapped class using :class:`PresetMixin`.
        access: The wired ``PresetAccess`` components.

    Example::

        store = PresetStore(session, Preset, presets)
        record = store.create(user, "Open tickets", {"where": {...}})
        visible = store.list(other_user)
    """

    def __init__(self, session: Session, model: type[PresetMixin], access: PresetAccess) -> None:
        self._session = session
        self._model = model
        self._access = access

    def create(
        self,
        actor: ActorLike,
        name: str,
        dataset: Mapping[str, Any] | None = None,
        access: Mapping[str, Any] | None = None,
    ) -> PresetRecord:
        """Create a preset owned by *actor*.

        Operations missing from *access* default to the configured
        default constraint.

        Raises:
            ForbiddenConstraintError: If a chosen constraint is not
                available to the actor.
            InvalidConstraintDataError: If an ``extra`` payload is invalid.
            AccessDenied: If the collection policy refuses the create.
        """
        record = PresetRecord(
            id=None,
            name=name,
            created_by=actor.id,
            dataset=dict(dataset or {}),
        )
        record.access = self._access.validate_access(actor, access)
        if not self._access.evaluator.allows_collection("create", actor, record):
            raise AccessDenied(actor=actor, operation="create", preset_id=None)

        row = self._model()
        row.apply_record(record)
        self._session.add(row)
        self._session.flush()
        record.id = row.id
        logger.debug("Created preset %r for actor %r", record.id, actor)
        return record

    def get(self, actor: ActorLike, preset_id: Any) -> PresetRecord:
        """Load one preset the actor may read.

        Raises:
            PresetNotFoundError: If no such preset exists.
            AccessDenied: If the actor may not read it.
        """
        record = self._load(preset_id).to_record()
        self._access.authorize("read", actor, record)
        return record

    def list(self, actor: ActorLike, operation: Operation = "read") -> list[PresetRecord]:
        """Return every preset *actor* may perform *operation* on, ordered by id."""
        stmt = select(self._model).order_by(self._model.id)
        stmt = authorize_query(
            stmt,
            actor=actor,
            operation=operation,
            evaluator=self._access.evaluator,
            model=self._model,
        )
        return [row.to_record() for row in self._session.scalars(stmt)]

    def update(
        self,
        actor: ActorLike,
        preset_id: Any,
        *,
        name: str | None = None,
        dataset: Mapping[str, Any] | None = None,
        access: Mapping[str, Any] | None = None,
    ) -> PresetRecord:
        """Update a preset the actor may update.

        Only access entries that differ from the stored ones are
        re-validated.

        Raises:
            PresetNotFoundError: If no such preset exists.
            AccessDenied: If the actor may not update it.
            ForbiddenConstraintError: If a changed constraint is not
                available to the actor.
            InvalidConstraintDataError: If an ``extra`` payload is invalid.
        """
        row = self._load(preset_id)
        record = row.to_record()
        self._access.authorize("update", actor, record)

        if name is not None:
            record.name = name
        if dataset is not None:
            record.dataset = dict(dataset)
        if access is not None:
            record.access = self._access.validate_access(actor, access, previous=record.access)

        row.apply_record(record)
        self._session.flush()
        return record

    def delete(self, actor: ActorLike, preset_id: Any) -> None:
        """Delete a preset the actor may delete.

        Raises:
            PresetNotFoundError: If no such preset exists.
            AccessDenied: If the actor may not delete it.
        """
        row = self._load(preset_id)
        self._access.authorize("delete", actor, row.to_record())
        self._session.delete(row)
        self._session.flush()
        logger.debug("Deleted preset %r for actor %r", preset_id, actor)

    def _load(self, preset_id: Any) -> PresetMixin:
        row = self._session.get(self._model, preset_id)
        if row is None:
            raise PresetNotFoundError(preset_id)
        return row
