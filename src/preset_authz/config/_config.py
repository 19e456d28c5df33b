"""Runtime settings for preset-authz (global, merge-on-update)."""

from __future__ import annotations

from dataclasses import dataclass

from preset_authz._types import OnUnknownConstraint

__all__ = [
    "RuntimeConfig",
    "configure",
    "get_global_config",
    "_reset_global_config",
    "_set_global_config",
]

_VALID_UNKNOWN_CONSTRAINT: set[str] = {"silent", "warn"}


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Process-wide behaviour switches for evaluation and logging.

    Attributes:
        log_access_decisions: Log every single-document decision and
            every compiled list filter via the ``preset_authz`` logger.
        on_unknown_constraint: Whether an access check that finds a stored
            constraint no longer registered logs it. The check is denied
            either way; ``"warn"`` logs a WARNING, ``"silent"`` does not.

    Example::

        config = RuntimeConfig(log_access_decisions=True)
        merged = config.merge(on_unknown_constraint="silent")
    """

    log_access_decisions: bool = False
    on_unknown_constraint: OnUnknownConstraint = "warn"

    def __post_init__(self) -> None:
        if self.on_unknown_constraint not in _VALID_UNKNOWN_CONSTRAINT:
            raise ValueError(
                f"on_unknown_constraint must be one of {_VALID_UNKNOWN_CONSTRAINT!r}, "
                f"got {self.on_unknown_constraint!r}"
            )

    def merge(
        self,
        *,
        log_access_decisions: bool | None = None,
        on_unknown_constraint: OnUnknownConstraint | None = None,
    ) -> RuntimeConfig:
        """Return a new config with non-None overrides applied."""
        return RuntimeConfig(
            log_access_decisions=(
                log_access_decisions
                if log_access_decisions is not None
                else self.log_access_decisions
            ),
            on_unknown_constraint=(
                on_unknown_constraint
                if on_unknown_constraint is not None
                else self.on_unknown_constraint
            ),
        )


# ---------------------------------------------------------------------------
# Global configuration singleton
# ---------------------------------------------------------------------------

_global_config = RuntimeConfig()


def get_global_config() -> RuntimeConfig:
    """Return the current global runtime configuration."""
    return _global_config


def configure(
    *,
    log_access_decisions: bool | None = None,
    on_unknown_constraint: OnUnknownConstraint | None = None,
) -> RuntimeConfig:
    """Update the global runtime configuration by merging overrides.

    Only non-None values are applied. Returns the new global config.

    Example::

        configure(log_access_decisions=True)
    """
    global _global_config
    _global_config = _global_config.merge(
        log_access_decisions=log_access_decisions,
        on_unknown_constraint=on_unknown_constraint,
    )
    return _global_config


def _set_global_config(cfg: RuntimeConfig) -> None:
    """Replace global config with an exact snapshot. For testing only."""
    global _global_config
    _global_config = cfg


def _reset_global_config() -> None:
    """Reset global config to defaults. For testing only."""
    global _global_config
    _global_config = RuntimeConfig()
