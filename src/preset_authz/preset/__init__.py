"""Preset records — the persisted shape read by the evaluator and validator."""

from preset_authz.preset._record import ConstraintAccess, PresetRecord, default_access

__all__ = ["ConstraintAccess", "PresetRecord", "default_access"]
