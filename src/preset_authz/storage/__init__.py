"""Storage boundary — SQLAlchemy mapping and the validated preset store."""

from preset_authz.storage._orm import PresetMixin
from preset_authz.storage._store import PresetStore

__all__ = ["PresetMixin", "PresetStore"]
