"""Tests for ConstraintValidator — write-time enforcement."""

from __future__ import annotations

import pytest

from preset_authz.access import ConstraintValidator, OptionFilter
from preset_authz.constraints import build_registry
from preset_authz.exceptions import (
    ConstraintValidationError,
    ForbiddenConstraintError,
    InvalidConstraintDataError,
)
from preset_authz.preset import ConstraintAccess
from preset_authz.testing import make_admin, make_user
from tests._support import hide_everyone_from_non_admins, specific_roles


@pytest.fixture()
def validator() -> ConstraintValidator:
    return ConstraintValidator(
        build_registry({"read": [specific_roles]}),
        OptionFilter(hide_everyone_from_non_admins),
    )


class TestValidate:
    def test_everyone_forbidden_for_non_admin(self, validator: ConstraintValidator) -> None:
        with pytest.raises(ForbiddenConstraintError) as exc_info:
            validator.validate("read", make_user(1), {"constraint": "everyone"})
        assert exc_info.value.value == "everyone"
        assert exc_info.value.operation == "read"

    def test_everyone_allowed_for_admin(self, validator: ConstraintValidator) -> None:
        assert validator.validate("read", make_admin(1), "everyone") == ConstraintAccess("everyone")

    def test_unregistered_value_forbidden(self, validator: ConstraintValidator) -> None:
        with pytest.raises(ForbiddenConstraintError):
            validator.validate("read", make_admin(1), "madeUp")

    def test_constraint_registered_for_other_operation(self, validator: ConstraintValidator) -> None:
        with pytest.raises(ForbiddenConstraintError):
            validator.validate("update", make_admin(1), "specificRoles")

    def test_specific_users(self, validator: ConstraintValidator) -> None:
        result = validator.validate(
            "read", make_user(1), {"constraint": "specificUsers", "extra": {"users": [2, 3]}}
        )
        assert result == ConstraintAccess("specificUsers", {"users": [2, 3]})

    def test_specific_users_defaults_missing_list(self, validator: ConstraintValidator) -> None:
        result = validator.validate("read", make_user(1), "specificUsers")
        assert result.extra == {"users": []}

    def test_invalid_extra(self, validator: ConstraintValidator) -> None:
        with pytest.raises(InvalidConstraintDataError) as exc_info:
            validator.validate(
                "read", make_user(1), {"constraint": "specificUsers", "extra": {"users": "bob"}}
            )
        assert exc_info.value.errors
        assert exc_info.value.errors[0]["loc"] == ("users",)

    def test_unexpected_extra_key(self, validator: ConstraintValidator) -> None:
        with pytest.raises(InvalidConstraintDataError):
            validator.validate(
                "read",
                make_user(1),
                {"constraint": "specificRoles", "extra": {"roles": ["a"], "users": [1]}},
            )

    def test_missing_required_extra(self, validator: ConstraintValidator) -> None:
        with pytest.raises(InvalidConstraintDataError):
            validator.validate("read", make_user(1), "specificRoles")

    def test_extra_on_constraint_without_fields(self, validator: ConstraintValidator) -> None:
        with pytest.raises(InvalidConstraintDataError, match="takes no extra data"):
            validator.validate("read", make_user(1), {"constraint": "onlyMe", "extra": {"x": 1}})

    def test_malformed_entry(self, validator: ConstraintValidator) -> None:
        with pytest.raises(InvalidConstraintDataError):
            validator.validate("read", make_user(1), {"extra": {}})
        with pytest.raises(InvalidConstraintDataError):
            validator.validate("read", make_user(1), 42)  # type: ignore[arg-type]

    def test_extra_given_as_pairs(self, validator: ConstraintValidator) -> None:
        with pytest.raises(InvalidConstraintDataError, match="must be a mapping"):
            validator.validate(
                "read", make_user(1), {"constraint": "specificUsers", "extra": [["users", [1]]]}
            )

    def test_errors_are_validation_errors(self) -> None:
        assert issubclass(ForbiddenConstraintError, ConstraintValidationError)
        assert issubclass(InvalidConstraintDataError, ConstraintValidationError)


class TestValidateAccess:
    def test_create_fills_defaults(self, validator: ConstraintValidator) -> None:
        access = validator.validate_access(make_user(1), {"read": "specificUsers"})
        assert access == {
            "read": ConstraintAccess("specificUsers", {"users": []}),
            "update": ConstraintAccess("onlyMe"),
            "delete": ConstraintAccess("onlyMe"),
        }

    def test_create_without_choices(self, validator: ConstraintValidator) -> None:
        access = validator.validate_access(make_user(1), None)
        assert set(access) == {"read", "update", "delete"}

    def test_custom_default(self) -> None:
        validator = ConstraintValidator(build_registry(), default_constraint="everyone")
        access = validator.validate_access(make_user(1), {})
        assert access["read"] == ConstraintAccess("everyone")

    def test_forbidden_choice_rejected(self, validator: ConstraintValidator) -> None:
        with pytest.raises(ForbiddenConstraintError):
            validator.validate_access(make_user(1), {"read": "everyone"})

    def test_create_key_maps_to_update(self, validator: ConstraintValidator) -> None:
        access = validator.validate_access(make_user(1), {"create": "specificUsers"})
        assert access["update"].constraint == "specificUsers"

    def test_unknown_operation_key(self, validator: ConstraintValidator) -> None:
        with pytest.raises(InvalidConstraintDataError, match="archive"):
            validator.validate_access(make_user(1), {"archive": "onlyMe"})

    def test_unchanged_entries_skip_recheck(self, validator: ConstraintValidator) -> None:
        previous = {
            "read": ConstraintAccess("everyone"),
            "update": ConstraintAccess("onlyMe"),
            "delete": ConstraintAccess("onlyMe"),
        }
        access = validator.validate_access(
            make_user(1),
            {"read": {"constraint": "everyone", "extra": {}}, "delete": "specificUsers"},
            previous=previous,
        )
        assert access["read"] == ConstraintAccess("everyone")
        assert access["delete"] == ConstraintAccess("specificUsers", {"users": []})

    def test_changed_entry_is_rechecked(self, validator: ConstraintValidator) -> None:
        previous = {"read": ConstraintAccess("onlyMe")}
        with pytest.raises(ForbiddenConstraintError):
            validator.validate_access(make_user(1), {"read": "everyone"}, previous=previous)

    def test_previous_entries_kept(self, validator: ConstraintValidator) -> None:
        previous = {
            "read": ConstraintAccess("everyone"),
            "update": ConstraintAccess("onlyMe"),
            "delete": ConstraintAccess("onlyMe"),
        }
        access = validator.validate_access(make_user(1), {"update": "specificUsers"}, previous=previous)
        assert access["read"] == ConstraintAccess("everyone")
