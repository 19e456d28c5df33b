"""Tests for audit logging."""

from __future__ import annotations

import logging

import pytest

from preset_authz.access import AccessEvaluator
from preset_authz.config import configure
from preset_authz.constraints import build_registry
from preset_authz.testing import make_user
from tests._support import make_record


@pytest.fixture()
def evaluator() -> AccessEvaluator:
    return AccessEvaluator(build_registry())


class TestAccessDecisionLogging:
    def test_disabled_by_default(self, evaluator, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="preset_authz"):
            evaluator.can_perform("read", make_user(1), make_record(created_by=1))
            evaluator.list_filter("read", make_user(1))
        assert len(caplog.records) == 0

    def test_info_summary(self, evaluator, caplog: pytest.LogCaptureFixture) -> None:
        configure(log_access_decisions=True)
        with caplog.at_level(logging.INFO, logger="preset_authz"):
            evaluator.can_perform("update", make_user(2), make_record(5, created_by=1))
        info = [r for r in caplog.records if r.levelno == logging.INFO]
        assert len(info) == 1
        msg = info[0].getMessage()
        assert "update" in msg
        assert "preset 5" in msg
        assert msg.endswith("deny")

    def test_debug_detail(self, evaluator, caplog: pytest.LogCaptureFixture) -> None:
        configure(log_access_decisions=True)
        with caplog.at_level(logging.DEBUG, logger="preset_authz"):
            evaluator.can_perform("read", make_user(1), make_record(5, created_by=1))
        debug = [r for r in caplog.records if r.levelno == logging.DEBUG]
        assert len(debug) == 1
        assert "constraint='onlyMe'" in debug[0].getMessage()
        assert "constraint matched" in debug[0].getMessage()


class TestListFilterLogging:
    def test_info_branch_count(self, evaluator, caplog: pytest.LogCaptureFixture) -> None:
        configure(log_access_decisions=True)
        with caplog.at_level(logging.INFO, logger="preset_authz"):
            evaluator.list_filter("read", make_user(1))
        info = [r for r in caplog.records if r.levelno == logging.INFO]
        assert len(info) == 1
        assert "3 constraint branch(es)" in info[0].getMessage()

    def test_debug_where(self, evaluator, caplog: pytest.LogCaptureFixture) -> None:
        configure(log_access_decisions=True)
        with caplog.at_level(logging.DEBUG, logger="preset_authz"):
            evaluator.list_filter("read", make_user(1))
        debug = [r for r in caplog.records if r.levelno == logging.DEBUG]
        assert "access.read.constraint" in debug[0].getMessage()


class TestUnknownConstraintLogging:
    def test_warn_mode_logs(self, evaluator, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="preset_authz"):
            evaluator.can_perform("read", make_user(1), make_record(8, read="retired"))
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "'retired'" in warnings[0].getMessage()
        assert "deny applied" in warnings[0].getMessage()

    def test_silent_mode_denies_without_logging(
        self, evaluator, caplog: pytest.LogCaptureFixture
    ) -> None:
        configure(on_unknown_constraint="silent")
        with caplog.at_level(logging.WARNING, logger="preset_authz"):
            allowed = evaluator.can_perform("read", make_user(1), make_record(8, read="retired"))
        assert allowed is False
        assert len(caplog.records) == 0
