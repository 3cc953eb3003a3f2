"""Tests for lexaccess.permissions catalogs, matrix and evaluator."""

from __future__ import annotations

import pytest

from lexaccess.exceptions import ConfigurationError
from lexaccess.permissions import (
    ROLE_PERMISSIONS,
    UNKNOWN_LEVEL,
    Permission,
    Role,
    build_role_permissions,
    can_access_resource,
    get_role_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
    hierarchy_level,
)

# ── Golden matrix ────────────────────────────────────────────────
# Written out by value so a change to the grant table shows up here.

_CONTENT = {
    "content:create", "content:view", "content:update", "content:delete",
    "content_category:manage", "newsletter:manage", "content_analytics:view",
}
_EXPENSES = {
    "expense:create", "expense:view", "expense:update", "expense:delete", "expense:approve",
}
_SUPPORT = {
    "support:read_all", "support:assign", "support:update", "support:view_stats",
    "feedback:read_all", "feedback:update", "feedback:view_stats", "feedback:search",
    "feedback:view_trends", "feedback:view_analytics",
}

_ALL = {p.value for p in Permission}

GOLDEN: dict[Role, set[str]] = {
    Role.SUPER_ADMIN: set(_ALL),
    Role.PARTNER: _ALL - {"user:delete", "system_settings:manage", "admin_panel:access", "document:read"},
    Role.SENIOR_ASSOCIATE: {
        "user:view",
        "client:view", "client:create", "client:update",
        "case:view", "case:create", "case:update", "case:assign",
        "document:view", "document:upload", "document:update", "document:download",
        "time_entry:view", "time_entry:create", "time_entry:update", "time_entry:delete",
        "invoice:view", "invoice:create", "invoice:update",
        "billing_rate:view", "billing_rate:create", "billing_rate:update",
        "payment:view", "payment:create", "payment:update",
        "calendar:view", "event:create", "event:update", "event:delete",
        "report:view", "report:generate",
        "task:view", "task:create", "task:update", "task:delete", "task:assign",
        "communication:view", "communication:create", "communication:update",
        "communication:delete", "message:send",
        "financial_report:view", "financial_report:create", "financial_report:export",
        "productivity_report:view", "productivity_report:create", "productivity_report:export",
        "report:create", "report:update", "report:delete", "report:export",
        "global_search:use", "search_statistics:view",
    } | _CONTENT | _EXPENSES | _SUPPORT,
    Role.ASSOCIATE: {
        "user:view",
        "client:view", "client:create", "client:update",
        "case:view", "case:create", "case:update",
        "document:view", "document:upload", "document:update", "document:download",
        "time_entry:view", "time_entry:create", "time_entry:update",
        "invoice:view", "invoice:create",
        "billing_rate:view",
        "payment:view", "payment:create",
        "calendar:view", "event:create", "event:update",
        "report:view",
        "task:view", "task:create", "task:update", "task:delete",
        "communication:view", "communication:create", "communication:update", "message:send",
        "financial_report:view", "financial_report:create",
        "productivity_report:view", "productivity_report:create",
        "report:create", "report:update", "report:export",
        "global_search:use",
    } | _CONTENT | _EXPENSES,
    Role.JUNIOR_ASSOCIATE: {
        "user:view",
        "client:view", "client:update",
        "case:view", "case:update",
        "document:view", "document:upload", "document:update", "document:download",
        "time_entry:view", "time_entry:create", "time_entry:update",
        "invoice:view", "billing_rate:view", "payment:view",
        "calendar:view", "event:create", "event:update",
        "report:view",
        "content:create", "content:view", "content:update",
        "expense:view", "expense:create", "expense:update",
        "task:view", "task:create", "task:update",
        "communication:view", "communication:create", "message:send",
        "financial_report:view", "productivity_report:view",
        "report:create", "report:export",
        "global_search:use",
    },
    Role.PARALEGAL: {
        "user:view",
        "client:view", "client:update",
        "case:view", "case:update",
        "document:view", "document:upload", "document:update", "document:download",
        "time_entry:view", "time_entry:create", "time_entry:update",
        "invoice:view", "billing_rate:view", "payment:view",
        "calendar:view", "event:create", "event:update",
        "report:view",
        "task:view", "task:create", "task:update",
        "communication:view", "communication:create", "communication:update",
        "financial_report:view", "productivity_report:view",
        "report:create", "report:export",
        "global_search:use",
    } | _CONTENT | _EXPENSES,
    Role.CLIENT: {
        "case:view",
        "document:view", "document:download",
        "invoice:view", "payment:view",
        "calendar:view",
        "communication:view", "communication:create", "message:send",
        "global_search:use",
    } | _CONTENT,
    Role.GUEST: {
        "case:view",
        "document:view",
        "global_search:use",
    } | _CONTENT,
}

_PAIRS = [(role, permission) for role in Role for permission in Permission]


class TestCatalog:
    """Role and Permission catalog tests."""

    def test_roles_are_closed(self) -> None:
        assert {r.value for r in Role} == {
            "super_admin", "partner", "senior_associate", "associate",
            "junior_associate", "paralegal", "client", "guest",
        }

    def test_permission_values_are_unique(self) -> None:
        values = [p.value for p in Permission]
        assert len(values) == len(set(values)) == 90

    def test_permission_format(self) -> None:
        for permission in Permission:
            resource, _, action = permission.value.partition(":")
            assert resource and action
            assert permission.resource == resource
            assert permission.action == action

    def test_role_parse(self) -> None:
        assert Role.parse(Role.PARTNER) is Role.PARTNER
        assert Role.parse("partner") is Role.PARTNER
        assert Role.parse("PARTNER") is Role.PARTNER
        assert Role.parse("  senior_associate ") is Role.SENIOR_ASSOCIATE

    @pytest.mark.parametrize("value", [None, "", "intern", 7, "partners", b"partner"])
    def test_role_parse_unknown(self, value) -> None:
        assert Role.parse(value) is None

    def test_permission_parse_spellings(self) -> None:
        """Canonical values and both stored name spellings resolve."""
        assert Permission.parse("case:view") is Permission.VIEW_CASES
        assert Permission.parse("view_cases") is Permission.VIEW_CASES
        assert Permission.parse("VIEW_CASES") is Permission.VIEW_CASES
        assert Permission.parse("VIEW_CONTENT") is Permission.VIEW_CONTENT
        assert Permission.parse("document_read") is Permission.DOCUMENT_READ
        assert Permission.parse("DOCUMENT_READ") is Permission.DOCUMENT_READ

    @pytest.mark.parametrize("value", [None, "", "case:archive", "view_everything", 3])
    def test_permission_parse_unknown(self, value) -> None:
        assert Permission.parse(value) is None

    def test_for_resource(self) -> None:
        assert Permission.for_resource("case", "view") is Permission.VIEW_CASES
        assert Permission.for_resource(" Case ", "VIEW") is Permission.VIEW_CASES
        assert Permission.for_resource("case", "archive") is None
        assert Permission.for_resource("", "view") is None


class TestHierarchy:
    """hierarchy_level tests."""

    def test_levels(self) -> None:
        assert [hierarchy_level(r) for r in Role] == [7, 6, 5, 4, 3, 2, 1, 0]

    def test_levels_are_distinct(self) -> None:
        assert len({r.level for r in Role}) == len(Role)

    def test_super_admin_is_top_and_guest_is_bottom(self) -> None:
        levels = {r: hierarchy_level(r) for r in Role}
        assert max(levels, key=levels.get) is Role.SUPER_ADMIN
        assert min(levels, key=levels.get) is Role.GUEST

    def test_unknown_ranks_below_guest(self) -> None:
        assert hierarchy_level("intern") == UNKNOWN_LEVEL
        assert hierarchy_level(None) == UNKNOWN_LEVEL
        assert UNKNOWN_LEVEL < hierarchy_level(Role.GUEST)

    def test_string_input(self) -> None:
        assert hierarchy_level("partner") == 6


class TestMatrix:
    """ROLE_PERMISSIONS and has_permission tests."""

    @pytest.mark.parametrize("role,permission", _PAIRS)
    def test_golden_table(self, role: Role, permission: Permission) -> None:
        assert has_permission(role, permission) is (permission.value in GOLDEN[role])

    def test_every_role_has_an_entry(self) -> None:
        assert set(ROLE_PERMISSIONS) == set(Role)

    def test_super_admin_holds_everything(self) -> None:
        assert get_role_permissions(Role.SUPER_ADMIN) == frozenset(Permission)

    def test_senior_associate_cannot_delete_cases(self) -> None:
        assert has_permission(Role.SENIOR_ASSOCIATE, Permission.DELETE_CASES) is False
        assert has_permission(Role.PARTNER, Permission.DELETE_CASES) is True

    def test_string_inputs(self) -> None:
        assert has_permission("client", "view_cases") is True
        assert has_permission("CLIENT", "case:view") is True
        assert has_permission("guest", "document_read") is False
        assert has_permission("paralegal", "message:send") is False

    @pytest.mark.parametrize(
        "role,permission",
        [
            (None, Permission.VIEW_CASES),
            ("intern", Permission.VIEW_CASES),
            (Role.SUPER_ADMIN, None),
            (Role.SUPER_ADMIN, "case:archive"),
            (42, object()),
        ],
    )
    def test_invalid_input_denies(self, role, permission) -> None:
        assert has_permission(role, permission) is False

    def test_deterministic(self) -> None:
        results = {has_permission(Role.ASSOCIATE, Permission.APPROVE_EXPENSES) for _ in range(50)}
        assert results == {True}


class TestImmutability:
    """The shared matrix cannot be altered at runtime."""

    def test_matrix_rejects_assignment(self) -> None:
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[Role.GUEST] = frozenset(Permission)  # type: ignore[index]

    def test_accessor_result_is_frozen(self) -> None:
        perms = get_role_permissions(Role.GUEST)
        assert isinstance(perms, frozenset)
        assert not hasattr(perms, "add")

    def test_accessor_result_does_not_leak(self) -> None:
        before = set(get_role_permissions(Role.GUEST))
        copy = set(get_role_permissions(Role.GUEST))
        copy.add(Permission.DELETE_USERS)
        assert set(get_role_permissions(Role.GUEST)) == before
        assert has_permission(Role.GUEST, Permission.DELETE_USERS) is False

    def test_unknown_role_gets_empty_set(self) -> None:
        assert get_role_permissions("intern") == frozenset()


class TestBuildRolePermissions:
    """build_role_permissions validation."""

    def test_missing_role_raises(self) -> None:
        grants = {role: () for role in Role if role is not Role.GUEST}
        with pytest.raises(ConfigurationError, match="guest"):
            build_role_permissions(grants)

    def test_foreign_key_raises(self) -> None:
        grants = {role: () for role in Role}
        grants["intern"] = ()  # type: ignore[index]
        with pytest.raises(ConfigurationError):
            build_role_permissions(grants)

    def test_non_permission_value_raises(self) -> None:
        grants = {role: () for role in Role}
        grants[Role.GUEST] = ("case:view",)  # type: ignore[assignment]
        with pytest.raises(ConfigurationError) as exc_info:
            build_role_permissions(grants)
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_builds_frozen_mapping(self) -> None:
        grants = {role: () for role in Role}
        grants[Role.GUEST] = (Permission.VIEW_CASES, Permission.VIEW_CASES)
        matrix = build_role_permissions(grants)
        assert matrix[Role.GUEST] == frozenset({Permission.VIEW_CASES})
        with pytest.raises(TypeError):
            matrix[Role.GUEST] = frozenset()  # type: ignore[index]


class TestCompositeChecks:
    """has_any_permission / has_all_permissions / can_access_resource."""

    def test_any(self) -> None:
        assert has_any_permission(Role.CLIENT, [Permission.DELETE_CASES, Permission.VIEW_CASES])
        assert not has_any_permission(Role.CLIENT, [Permission.DELETE_CASES, Permission.CREATE_CASES])

    def test_any_empty_is_false(self) -> None:
        assert has_any_permission(Role.SUPER_ADMIN, []) is False
        assert has_any_permission(Role.SUPER_ADMIN, None) is False

    def test_all(self) -> None:
        assert has_all_permissions(Role.PARTNER, [Permission.VIEW_CASES, Permission.DELETE_CASES])
        assert not has_all_permissions(Role.SENIOR_ASSOCIATE, [Permission.VIEW_CASES, Permission.DELETE_CASES])

    def test_all_empty_is_vacuous_for_known_role(self) -> None:
        assert has_all_permissions(Role.GUEST, []) is True
        assert has_all_permissions("intern", []) is False

    def test_all_with_unknown_permission_is_false(self) -> None:
        assert has_all_permissions(Role.SUPER_ADMIN, [Permission.VIEW_CASES, "case:archive"]) is False

    @pytest.mark.parametrize("permissions", [5, 1.5, object(), "case:view", b"case:view"])
    def test_non_collection_is_false(self, permissions) -> None:
        assert has_any_permission(Role.PARTNER, permissions) is False
        assert has_all_permissions(Role.PARTNER, permissions) is False

    def test_generator_input(self) -> None:
        assert has_all_permissions(Role.PARTNER, (p for p in [Permission.VIEW_CASES, Permission.DELETE_CASES]))
        assert has_any_permission(Role.CLIENT, (p for p in [Permission.VIEW_CASES]))

    def test_can_access_resource(self) -> None:
        assert can_access_resource(Role.PARALEGAL, "case", "view") is True
        assert can_access_resource(Role.PARALEGAL, "case", "delete") is False
        assert can_access_resource(Role.SUPER_ADMIN, "case", "archive") is False
        assert can_access_resource(Role.SUPER_ADMIN, None, "view") is False
        assert can_access_resource("intern", "case", "view") is False
