"""preset-authz testing utilities — MockActor, assertions, and fixtures.

Provides test helpers for verifying preset access policies:

- **MockActor / factories**: Lightweight actors for tests.
- **Assertion helpers**: ``assert_can``, ``assert_cannot``,
  ``assert_paths_agree``.
- **Fixtures**: ``constraint_registry``, ``preset_access``,
  ``isolated_runtime_config``.

Example::

    from preset_authz.testing import make_user, assert_can

    def test_owner_updates(preset_access, record):
        assert_can(preset_access.evaluator, "update", make_user(record.created_by), record)
"""

from preset_authz.testing._actors import MockActor, make_admin, make_anonymous, make_user
from preset_authz.testing._assertions import assert_can, assert_cannot, assert_paths_agree
from preset_authz.testing._fixtures import (
    constraint_registry,
    isolated_runtime_config,
    preset_access,
)
from preset_authz.testing._isolation import isolated_config

__all__ = [
    "MockActor",
    "assert_can",
    "assert_cannot",
    "assert_paths_agree",
    "constraint_registry",
    "isolated_config",
    "isolated_runtime_config",
    "make_admin",
    "make_anonymous",
    "make_user",
    "preset_access",
]
