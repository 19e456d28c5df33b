"""Import fixtures from preset_authz.testing for test discovery."""

from preset_authz.testing._fixtures import (
    constraint_registry,
    isolated_runtime_config,
    preset_access,
)

__all__ = ["constraint_registry", "isolated_runtime_config", "preset_access"]
