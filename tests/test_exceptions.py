"""Tests for exceptions.py — PresetAuthzError hierarchy."""

from __future__ import annotations

import pytest

from preset_authz.exceptions import (
    AccessDenied,
    AccessEvaluationError,
    ConfigurationError,
    ConstraintValidationError,
    DuplicateConstraintError,
    ForbiddenConstraintError,
    InvalidConstraintDataError,
    PredicateCompilationError,
    PresetAuthzError,
    PresetNotFoundError,
    UnknownConstraintError,
    UnsupportedExpressionError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            AccessDenied,
            AccessEvaluationError,
            ConfigurationError,
            ConstraintValidationError,
            PredicateCompilationError,
            PresetNotFoundError,
            UnknownConstraintError,
            UnsupportedExpressionError,
        ],
    )
    def test_is_preset_authz_error(self, cls):
        assert issubclass(cls, PresetAuthzError)

    def test_configuration_errors(self):
        assert issubclass(DuplicateConstraintError, ConfigurationError)

    def test_validation_errors(self):
        assert issubclass(ForbiddenConstraintError, ConstraintValidationError)
        assert issubclass(InvalidConstraintDataError, ConstraintValidationError)

    def test_evaluation_error_is_not_validation_error(self):
        assert not issubclass(AccessEvaluationError, ConstraintValidationError)


class TestMessages:
    def test_duplicate(self):
        err = DuplicateConstraintError(operation="read", value="everyone")
        assert str(err) == "Constraint 'everyone' is already registered for 'read'"

    def test_unknown(self):
        err = UnknownConstraintError(operation="update", value="retired")
        assert (err.operation, err.value) == ("update", "retired")
        assert "retired" in str(err)

    def test_forbidden(self):
        err = ForbiddenConstraintError(operation="read", value="everyone", actor="user-1")
        assert err.actor == "user-1"
        assert "not available" in str(err)

    def test_invalid_data_with_errors(self):
        err = InvalidConstraintDataError(
            operation="read",
            value="specificUsers",
            errors=[{"loc": ("users", 0), "msg": "bad id"}],
        )
        assert str(err) == "Invalid data for constraint 'specificUsers' on 'read': users.0: bad id"

    def test_invalid_data_custom_message(self):
        err = InvalidConstraintDataError(operation="read", value="onlyMe", message="nope")
        assert str(err) == "nope"
        assert err.errors == []

    def test_evaluation_error_for_constraint(self):
        err = AccessEvaluationError(operation="read", constraint="broken", reason="boom")
        assert str(err) == "Access evaluation failed for 'read' (constraint 'broken'): boom"

    def test_evaluation_error_for_collection(self):
        err = AccessEvaluationError(operation="delete", constraint=None, reason="boom")
        assert "(collection policy)" in str(err)

    def test_access_denied(self):
        err = AccessDenied(actor="user-1", operation="delete", preset_id=3)
        assert str(err) == "Actor 'user-1' is not authorized to delete preset 3"

    def test_access_denied_custom_message(self):
        assert str(AccessDenied(actor=1, operation="read", preset_id=1, message="no")) == "no"

    def test_not_found(self):
        err = PresetNotFoundError(9)
        assert err.preset_id == 9
        assert str(err) == "Preset 9 does not exist"
