"""Role → permission matrix and the class-level permission evaluator.

Provides:
- ``ROLE_PERMISSIONS`` — read-only mapping, every Role → frozenset of Permission.
- ``has_permission()`` / ``has_any_permission()`` / ``has_all_permissions()``
- ``get_role_permissions()`` — immutable view of one role's capabilities.
- ``can_access_resource()`` — check by (resource, action) pair.

The matrix is built once at import from ``_GRANTS`` and cannot be mutated
afterwards. A role missing from ``_GRANTS`` fails the import with
``ConfigurationError``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ..exceptions import ConfigurationError
from .constants import Permission, Role

P = Permission

# ── Grant table ─────────────────────────────────────────
# Shared blocks first, then one entry per role.

_CONTENT_SUITE: tuple[Permission, ...] = (
    P.CREATE_CONTENT,
    P.VIEW_CONTENT,
    P.UPDATE_CONTENT,
    P.DELETE_CONTENT,
    P.MANAGE_CONTENT_CATEGORIES,
    P.MANAGE_NEWSLETTERS,
    P.VIEW_CONTENT_ANALYTICS,
)

_SUPPORT_AND_FEEDBACK: tuple[Permission, ...] = (
    P.SUPPORT_READ_ALL,
    P.SUPPORT_ASSIGN,
    P.SUPPORT_UPDATE,
    P.SUPPORT_VIEW_STATS,
    P.FEEDBACK_READ_ALL,
    P.FEEDBACK_UPDATE,
    P.FEEDBACK_VIEW_STATS,
    P.FEEDBACK_SEARCH,
    P.FEEDBACK_VIEW_TRENDS,
    P.FEEDBACK_VIEW_ANALYTICS,
)

_EXPENSES_ALL: tuple[Permission, ...] = (
    P.CREATE_EXPENSES,
    P.VIEW_EXPENSES,
    P.UPDATE_EXPENSES,
    P.DELETE_EXPENSES,
    P.APPROVE_EXPENSES,
)

_PARTNER: tuple[Permission, ...] = (
    P.VIEW_USERS, P.CREATE_USERS, P.UPDATE_USERS, P.MANAGE_USER_ROLES,
    P.VIEW_CLIENTS, P.CREATE_CLIENTS, P.UPDATE_CLIENTS, P.DELETE_CLIENTS,
    P.VIEW_CASES, P.CREATE_CASES, P.UPDATE_CASES, P.DELETE_CASES, P.ASSIGN_CASES,
    P.VIEW_DOCUMENTS, P.UPLOAD_DOCUMENTS, P.UPDATE_DOCUMENTS, P.DELETE_DOCUMENTS, P.DOWNLOAD_DOCUMENTS,
    P.VIEW_TIME_ENTRIES, P.CREATE_TIME_ENTRIES, P.UPDATE_TIME_ENTRIES, P.DELETE_TIME_ENTRIES,
    P.VIEW_INVOICES, P.CREATE_INVOICES, P.UPDATE_INVOICES, P.DELETE_INVOICES,
    P.VIEW_BILLING_RATES, P.CREATE_BILLING_RATES, P.UPDATE_BILLING_RATES, P.DELETE_BILLING_RATES,
    P.VIEW_PAYMENTS, P.CREATE_PAYMENTS, P.UPDATE_PAYMENTS, P.DELETE_PAYMENTS,
    P.VIEW_CALENDAR, P.CREATE_EVENTS, P.UPDATE_EVENTS, P.DELETE_EVENTS,
    P.VIEW_REPORTS, P.GENERATE_REPORTS, P.EXPORT_DATA,
    P.VIEW_AUDIT_LOGS,
    *_CONTENT_SUITE,
    *_EXPENSES_ALL,
    P.VIEW_TASKS, P.CREATE_TASKS, P.UPDATE_TASKS, P.DELETE_TASKS, P.ASSIGN_TASKS,
    P.VIEW_COMMUNICATION, P.CREATE_COMMUNICATION, P.UPDATE_COMMUNICATION, P.DELETE_COMMUNICATION,
    P.SEND_MESSAGES,
    P.VIEW_FINANCIAL_REPORTS, P.CREATE_FINANCIAL_REPORTS, P.EXPORT_FINANCIAL_REPORTS,
    P.VIEW_PRODUCTIVITY_REPORTS, P.CREATE_PRODUCTIVITY_REPORTS, P.EXPORT_PRODUCTIVITY_REPORTS,
    P.CREATE_REPORTS, P.UPDATE_REPORTS, P.DELETE_REPORTS, P.EXPORT_REPORTS,
    P.USE_GLOBAL_SEARCH, P.VIEW_SEARCH_STATISTICS,
    *_SUPPORT_AND_FEEDBACK,
)

_GRANTS: dict[Role, tuple[Permission, ...]] = {
    # Everything in the catalog
    Role.SUPER_ADMIN: tuple(Permission),
    # Firm management, no system administration
    Role.PARTNER: _PARTNER,
    Role.SENIOR_ASSOCIATE: (
        P.VIEW_USERS,
        P.VIEW_CLIENTS, P.CREATE_CLIENTS, P.UPDATE_CLIENTS,
        P.VIEW_CASES, P.CREATE_CASES, P.UPDATE_CASES, P.ASSIGN_CASES,
        P.VIEW_DOCUMENTS, P.UPLOAD_DOCUMENTS, P.UPDATE_DOCUMENTS, P.DOWNLOAD_DOCUMENTS,
        P.VIEW_TIME_ENTRIES, P.CREATE_TIME_ENTRIES, P.UPDATE_TIME_ENTRIES, P.DELETE_TIME_ENTRIES,
        P.VIEW_INVOICES, P.CREATE_INVOICES, P.UPDATE_INVOICES,
        P.VIEW_BILLING_RATES, P.CREATE_BILLING_RATES, P.UPDATE_BILLING_RATES,
        P.VIEW_PAYMENTS, P.CREATE_PAYMENTS, P.UPDATE_PAYMENTS,
        P.VIEW_CALENDAR, P.CREATE_EVENTS, P.UPDATE_EVENTS, P.DELETE_EVENTS,
        P.VIEW_REPORTS, P.GENERATE_REPORTS,
        *_CONTENT_SUITE,
        *_EXPENSES_ALL,
        P.VIEW_TASKS, P.CREATE_TASKS, P.UPDATE_TASKS, P.DELETE_TASKS, P.ASSIGN_TASKS,
        P.VIEW_COMMUNICATION, P.CREATE_COMMUNICATION, P.UPDATE_COMMUNICATION, P.DELETE_COMMUNICATION,
        P.SEND_MESSAGES,
        P.VIEW_FINANCIAL_REPORTS, P.CREATE_FINANCIAL_REPORTS, P.EXPORT_FINANCIAL_REPORTS,
        P.VIEW_PRODUCTIVITY_REPORTS, P.CREATE_PRODUCTIVITY_REPORTS, P.EXPORT_PRODUCTIVITY_REPORTS,
        P.CREATE_REPORTS, P.UPDATE_REPORTS, P.DELETE_REPORTS, P.EXPORT_REPORTS,
        P.USE_GLOBAL_SEARCH, P.VIEW_SEARCH_STATISTICS,
        *_SUPPORT_AND_FEEDBACK,
    ),
    Role.ASSOCIATE: (
        P.VIEW_USERS,
        P.VIEW_CLIENTS, P.CREATE_CLIENTS, P.UPDATE_CLIENTS,
        P.VIEW_CASES, P.CREATE_CASES, P.UPDATE_CASES,
        P.VIEW_DOCUMENTS, P.UPLOAD_DOCUMENTS, P.UPDATE_DOCUMENTS, P.DOWNLOAD_DOCUMENTS,
        P.VIEW_TIME_ENTRIES, P.CREATE_TIME_ENTRIES, P.UPDATE_TIME_ENTRIES,
        P.VIEW_INVOICES, P.CREATE_INVOICES,
        P.VIEW_BILLING_RATES,
        P.VIEW_PAYMENTS, P.CREATE_PAYMENTS,
        P.VIEW_CALENDAR, P.CREATE_EVENTS, P.UPDATE_EVENTS,
        P.VIEW_REPORTS,
        *_CONTENT_SUITE,
        *_EXPENSES_ALL,
        P.VIEW_TASKS, P.CREATE_TASKS, P.UPDATE_TASKS, P.DELETE_TASKS,
        P.VIEW_COMMUNICATION, P.CREATE_COMMUNICATION, P.UPDATE_COMMUNICATION,
        P.SEND_MESSAGES,
        P.VIEW_FINANCIAL_REPORTS, P.CREATE_FINANCIAL_REPORTS,
        P.VIEW_PRODUCTIVITY_REPORTS, P.CREATE_PRODUCTIVITY_REPORTS,
        P.CREATE_REPORTS, P.UPDATE_REPORTS, P.EXPORT_REPORTS,
        P.USE_GLOBAL_SEARCH,
    ),
    Role.JUNIOR_ASSOCIATE: (
        P.VIEW_USERS,
        P.VIEW_CLIENTS, P.UPDATE_CLIENTS,
        P.VIEW_CASES, P.UPDATE_CASES,
        P.VIEW_DOCUMENTS, P.UPLOAD_DOCUMENTS, P.UPDATE_DOCUMENTS, P.DOWNLOAD_DOCUMENTS,
        P.VIEW_TIME_ENTRIES, P.CREATE_TIME_ENTRIES, P.UPDATE_TIME_ENTRIES,
        P.VIEW_INVOICES,
        P.VIEW_BILLING_RATES,
        P.VIEW_PAYMENTS,
        P.VIEW_CALENDAR, P.CREATE_EVENTS, P.UPDATE_EVENTS,
        P.VIEW_REPORTS,
        P.CREATE_CONTENT, P.VIEW_CONTENT, P.UPDATE_CONTENT,
        P.VIEW_EXPENSES, P.CREATE_EXPENSES, P.UPDATE_EXPENSES,
        P.VIEW_TASKS, P.CREATE_TASKS, P.UPDATE_TASKS,
        P.VIEW_COMMUNICATION, P.CREATE_COMMUNICATION,
        P.SEND_MESSAGES,
        P.VIEW_FINANCIAL_REPORTS,
        P.VIEW_PRODUCTIVITY_REPORTS,
        P.CREATE_REPORTS, P.EXPORT_REPORTS,
        P.USE_GLOBAL_SEARCH,
    ),
    Role.PARALEGAL: (
        P.VIEW_USERS,
        P.VIEW_CLIENTS, P.UPDATE_CLIENTS,
        P.VIEW_CASES, P.UPDATE_CASES,
        P.VIEW_DOCUMENTS, P.UPLOAD_DOCUMENTS, P.UPDATE_DOCUMENTS, P.DOWNLOAD_DOCUMENTS,
        P.VIEW_TIME_ENTRIES, P.CREATE_TIME_ENTRIES, P.UPDATE_TIME_ENTRIES,
        P.VIEW_INVOICES,
        P.VIEW_BILLING_RATES,
        P.VIEW_PAYMENTS,
        P.VIEW_CALENDAR, P.CREATE_EVENTS, P.UPDATE_EVENTS,
        P.VIEW_REPORTS,
        *_CONTENT_SUITE,
        *_EXPENSES_ALL,
        P.VIEW_TASKS, P.CREATE_TASKS, P.UPDATE_TASKS,
        P.VIEW_COMMUNICATION, P.CREATE_COMMUNICATION, P.UPDATE_COMMUNICATION,
        P.VIEW_FINANCIAL_REPORTS,
        P.VIEW_PRODUCTIVITY_REPORTS,
        P.CREATE_REPORTS, P.EXPORT_REPORTS,
        P.USE_GLOBAL_SEARCH,
    ),
    Role.CLIENT: (
        P.VIEW_CASES,
        P.VIEW_DOCUMENTS, P.DOWNLOAD_DOCUMENTS,
        P.VIEW_INVOICES,
        P.VIEW_PAYMENTS,
        P.VIEW_CALENDAR,
        *_CONTENT_SUITE,
        P.VIEW_COMMUNICATION, P.CREATE_COMMUNICATION,
        P.SEND_MESSAGES,
        P.USE_GLOBAL_SEARCH,
    ),
    Role.GUEST: (
        P.VIEW_CASES,
        P.VIEW_DOCUMENTS,
        *_CONTENT_SUITE,
        P.USE_GLOBAL_SEARCH,
    ),
}


def build_role_permissions(
    grants: Mapping[Role, Iterable[Permission]],
) -> Mapping[Role, frozenset[Permission]]:
    """Build the read-only matrix from a grant table.

    Raises:
        ConfigurationError: if a Role has no entry, a key is not a Role,
            or a grant is not a Permission.
    """
    unknown_keys = [key for key in grants if not isinstance(key, Role)]
    if unknown_keys:
        raise ConfigurationError(
            f"Grant table has keys outside the role catalog: {unknown_keys!r}",
            unknown=unknown_keys,
        )

    missing = [role for role in Role if role not in grants]
    if missing:
        raise ConfigurationError(
            f"Grant table has no entry for: {', '.join(r.value for r in missing)}",
            missing=missing,
        )

    matrix: dict[Role, frozenset[Permission]] = {}
    for role in Role:
        granted = tuple(grants[role])
        invalid = [p for p in granted if not isinstance(p, Permission)]
        if invalid:
            raise ConfigurationError(
                f"Grant table entry for {role.value} has values outside the permission catalog",
                role=role,
                invalid=invalid,
            )
        matrix[role] = frozenset(granted)

    return MappingProxyType(matrix)


ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = build_role_permissions(_GRANTS)


# ── Evaluator ───────────────────────────────────────────


def has_permission(role: Role | str | None, permission: Permission | str | None) -> bool:
    """Check whether a role holds a permission.

    Both arguments may be catalog members or external strings (see
    ``Role.parse`` / ``Permission.parse``). Anything that does not resolve
    to the catalog yields False. Never raises.

    Example::

        has_permission(Role.PARTNER, Permission.DELETE_CASES)           # True
        has_permission(Role.SENIOR_ASSOCIATE, Permission.DELETE_CASES)  # False
        has_permission("client", "view_cases")                          # True
        has_permission("intern", Permission.VIEW_CASES)                 # False
    """
    parsed_role = Role.parse(role)
    parsed_permission = Permission.parse(permission)
    if parsed_role is None or parsed_permission is None:
        return False
    return parsed_permission in ROLE_PERMISSIONS[parsed_role]


def _as_list(permissions: Any) -> list[Any] | None:
    """Materialize a permission collection; None if it is not one."""
    if permissions is None:
        return []
    if isinstance(permissions, (str, bytes)) or not isinstance(permissions, Iterable):
        return None
    return list(permissions)


def has_any_permission(role: Role | str | None, permissions: Iterable[Any] | None) -> bool:
    """True if the role holds at least one of ``permissions``. Empty → False."""
    items = _as_list(permissions)
    if not items:
        return False
    return any(has_permission(role, permission) for permission in items)


def has_all_permissions(role: Role | str | None, permissions: Iterable[Any] | None) -> bool:
    """True if the role holds every one of ``permissions``.

    An empty requirement is vacuously satisfied, but only for a role that is
    in the catalog.
    """
    items = _as_list(permissions)
    if items is None or Role.parse(role) is None:
        return False
    return all(has_permission(role, permission) for permission in items)


def get_role_permissions(role: Role | str | None) -> frozenset[Permission]:
    """Return the capabilities of a role.

    The result is immutable; callers cannot alter the shared matrix through it.
    Unknown roles get an empty set.
    """
    parsed = Role.parse(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def can_access_resource(role: Role | str | None, resource_type: str | None, action: str | None) -> bool:
    """Check a capability by its (resource, action) pair.

    Example::

        can_access_resource(Role.PARALEGAL, "case", "view")    # True
        can_access_resource(Role.PARALEGAL, "case", "delete")  # False
        can_access_resource(Role.PARTNER, "case", "archive")   # False (no such capability)
    """
    if not isinstance(resource_type, str) or not isinstance(action, str):
        return False
    permission = Permission.for_resource(resource_type, action)
    if permission is None:
        return False
    return has_permission(role, permission)


__all__ = [
    "ROLE_PERMISSIONS",
    "build_role_permissions",
    "can_access_resource",
    "get_role_permissions",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
]
