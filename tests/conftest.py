"""Shared test fixtures for preset-authz tests."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from preset_authz import PresetsConfig, build_preset_access
from preset_authz.config._config import _reset_global_config
from preset_authz.storage import PresetStore
from tests._support import Base, Preset, hide_everyone_from_non_admins, specific_roles


@pytest.fixture(autouse=True)
def _reset_runtime_config():
    _reset_global_config()
    yield
    _reset_global_config()


@pytest.fixture()
def presets():
    """PresetAccess with the specificRoles constraint on read and the everyone filter."""
    return build_preset_access(
        PresetsConfig(
            constraints={"read": [specific_roles]},
            filter_constraints=hide_everyone_from_non_admins,
        )
    )


@pytest.fixture()
def engine():
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture()
def session(engine):
    """Provide a session that rolls back after each test."""
    factory = sessionmaker(bind=engine)
    sess = factory()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()


@pytest.fixture()
def store(session, presets):
    return PresetStore(session, Preset, presets)
