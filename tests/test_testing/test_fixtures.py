"""Tests for preset_authz.testing._fixtures — pytest fixture functions."""

from __future__ import annotations

from preset_authz import PresetAccess
from preset_authz.config import RuntimeConfig, configure, get_global_config
from preset_authz.constraints import ConstraintRegistry


class TestConstraintRegistryFixture:
    def test_builtins_only(self, constraint_registry: ConstraintRegistry) -> None:
        assert [c.value for c in constraint_registry.list("read")] == [
            "onlyMe",
            "everyone",
            "specificUsers",
        ]

    def test_frozen(self, constraint_registry: ConstraintRegistry) -> None:
        assert constraint_registry.frozen


class TestPresetAccessFixture:
    def test_default_configuration(self, preset_access: PresetAccess) -> None:
        assert isinstance(preset_access, PresetAccess)
        assert not preset_access.option_filter.has_override


class TestIsolatedRuntimeConfigFixture:
    def test_starts_from_defaults(self, isolated_runtime_config: RuntimeConfig) -> None:
        assert isolated_runtime_config == RuntimeConfig()

    def test_changes_stay_inside_test(self, isolated_runtime_config: RuntimeConfig) -> None:
        configure(log_access_decisions=True)
        assert get_global_config().log_access_decisions is True
