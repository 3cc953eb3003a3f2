"""Tests for declarative permission requirements."""

from __future__ import annotations

import dataclasses

import pytest

from lexaccess.exceptions import ConfigurationError
from lexaccess.permissions import (
    Permission,
    PermissionRequirement,
    RequirementMode,
    Role,
    all_of,
    any_of,
    require,
    role_in,
)


class TestRequire:
    """Single-permission requirements."""

    def test_satisfied(self) -> None:
        req = require(Permission.DELETE_CASES)
        assert req.is_satisfied_by(Role.PARTNER) is True
        assert req.is_satisfied_by(Role.SENIOR_ASSOCIATE) is False

    def test_accepts_stored_spelling(self) -> None:
        req = require("view_cases")
        assert req.permissions == (Permission.VIEW_CASES,)
        assert req.is_satisfied_by("guest") is True

    def test_unknown_permission_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            require("case:archive")

    def test_unknown_role_never_satisfies(self) -> None:
        assert require(Permission.VIEW_CASES).is_satisfied_by("intern") is False
        assert require(Permission.VIEW_CASES).is_satisfied_by(None) is False

    def test_describe(self) -> None:
        assert require(Permission.DELETE_CASES).describe() == "case:delete"


class TestAnyAll:
    """any_of / all_of requirements."""

    def test_any_of(self) -> None:
        req = any_of(Permission.DELETE_CASES, Permission.VIEW_CASES)
        assert req.mode is RequirementMode.ANY
        assert req.is_satisfied_by(Role.GUEST) is True
        assert any_of(Permission.DELETE_CASES, Permission.ASSIGN_CASES).is_satisfied_by(Role.GUEST) is False

    def test_all_of(self) -> None:
        req = all_of(Permission.VIEW_CASES, Permission.DELETE_CASES)
        assert req.is_satisfied_by(Role.PARTNER) is True
        assert req.is_satisfied_by(Role.SENIOR_ASSOCIATE) is False

    @pytest.mark.parametrize("factory", [any_of, all_of])
    def test_empty_rejected(self, factory) -> None:
        with pytest.raises(ConfigurationError):
            factory()

    def test_describe(self) -> None:
        req = all_of(Permission.VIEW_CASES, Permission.DELETE_CASES)
        assert req.describe() == "all of [case:view, case:delete]"
        assert str(any_of(Permission.VIEW_CASES)) == "any of [case:view]"


class TestRoleIn:
    """role_in requirements."""

    def test_role_in(self) -> None:
        req = role_in(Role.SUPER_ADMIN, "partner")
        assert req.roles == (Role.SUPER_ADMIN, Role.PARTNER)
        assert req.is_satisfied_by("PARTNER") is True
        assert req.is_satisfied_by(Role.SENIOR_ASSOCIATE) is False

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            role_in("intern")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            role_in()

    def test_describe(self) -> None:
        assert role_in(Role.SUPER_ADMIN, Role.PARTNER).describe() == "role in [super_admin, partner]"


class TestImmutability:
    """Requirements are frozen and hashable."""

    def test_frozen(self) -> None:
        req = require(Permission.VIEW_CASES)
        with pytest.raises(dataclasses.FrozenInstanceError):
            req.mode = RequirementMode.ALL  # type: ignore[misc]

    def test_equal_and_hashable(self) -> None:
        assert require("case:view") == require(Permission.VIEW_CASES)
        assert len({require("case:view"), require(Permission.VIEW_CASES)}) == 1
        assert isinstance(require("case:view"), PermissionRequirement)
