"""Pytest fixtures for testing preset access policies."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from preset_authz._engine import PresetAccess, build_preset_access
from preset_authz.config._config import RuntimeConfig
from preset_authz.constraints._registry import ConstraintRegistry, build_registry

__all__ = ["constraint_registry", "isolated_runtime_config", "preset_access"]


@pytest.fixture()
def constraint_registry() -> ConstraintRegistry:
    """Provide a frozen registry holding only the built-in constraints.

    Example::

        def test_builtins(constraint_registry):
            assert constraint_registry.has_constraint("read", "onlyMe")
    """
    return build_registry()


@pytest.fixture()
def preset_access() -> PresetAccess:
    """Provide ``PresetAccess`` built from the default configuration."""
    return build_preset_access()


@pytest.fixture()
def isolated_runtime_config() -> Generator[RuntimeConfig, None, None]:
    """Reset the global runtime config for a test and restore it afterwards."""
    from preset_authz.testing._isolation import isolated_config

    with isolated_config() as cfg:
        yield cfg
