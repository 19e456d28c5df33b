"""Configuration module for preset-authz."""

from __future__ import annotations

from preset_authz.config._config import RuntimeConfig, configure, get_global_config
from preset_authz.config._presets import PresetsConfig

__all__ = ["PresetsConfig", "RuntimeConfig", "configure", "get_global_config"]
