"""Audit logging for access decisions and list filters."""

from __future__ import annotations

import logging

from preset_authz._types import ActorLike

__all__ = ["log_access_decision", "log_branch_failure", "log_list_filter", "log_unknown_constraint"]

logger = logging.getLogger("preset_authz")


def log_access_decision(
    *,
    operation: str,
    actor: ActorLike,
    preset_id: object,
    constraint: str | None,
    allowed: bool,
    reason: str,
) -> None:
    """Log a single-document access decision.

    Logging levels:
    - INFO: Summary (operation, preset, verdict)
    - DEBUG: Detailed (constraint, reason)

    Example::

        log_access_decision(
            operation="update",
            actor=current_user,
            preset_id=record.id,
            constraint="onlyMe",
            allowed=False,
            reason="constraint did not match",
        )
    """
    logger.info(
        "Access check: %s preset %r for actor %r -> %s",
        operation,
        preset_id,
        actor,
        "allow" if allowed else "deny",
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Access detail for %s preset %r: constraint=%r reason=%s",
            operation,
            preset_id,
            constraint,
            reason,
        )


def log_list_filter(
    *,
    operation: str,
    actor: ActorLike,
    branch_count: int,
    where: object,
) -> None:
    """Log a compiled list filter.

    Logging levels:
    - INFO: Summary (operation, branch count)
    - DEBUG: The where-document
    """
    logger.info(
        "List filter: %s for actor %r — %d constraint branch(es)",
        operation,
        actor,
        branch_count,
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("List filter where for %s: %s", operation, where)


def log_branch_failure(
    *, operation: str, constraint: str, reason: str, exc_info: bool = False
) -> None:
    """Log a list-mode branch that was dropped.

    Pass ``exc_info=True`` from an ``except`` block to attach the traceback.
    """
    logger.warning(
        "Constraint %r dropped from %s list filter: %s",
        constraint,
        operation,
        reason,
        exc_info=exc_info,
    )


def log_unknown_constraint(*, operation: str, preset_id: object, constraint: str | None) -> None:
    """Log a record whose stored constraint is not registered (deny applied)."""
    logger.warning(
        "Preset %r references unregistered %s constraint %r — deny applied",
        preset_id,
        operation,
        constraint,
    )
