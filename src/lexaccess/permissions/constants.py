"""Role and permission catalogs for lexaccess.

Provides:
- ``Role`` — the closed set of organizational roles.
- ``Permission`` — the closed set of capabilities (``resource:action`` format).
- ``hierarchy_level()`` — seniority rank of a role (higher = more senior).
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class Role(str, Enum):
    """Organizational roles, most senior first."""

    SUPER_ADMIN = "super_admin"
    PARTNER = "partner"
    SENIOR_ASSOCIATE = "senior_associate"
    ASSOCIATE = "associate"
    JUNIOR_ASSOCIATE = "junior_associate"
    PARALEGAL = "paralegal"
    CLIENT = "client"
    GUEST = "guest"

    @property
    def level(self) -> int:
        """Seniority rank, see :func:`hierarchy_level`."""
        return _HIERARCHY[self]

    @classmethod
    def parse(cls, value: Any) -> Role | None:
        """Resolve an external role value, or None if it is not in the catalog.

        Accepts a ``Role``, its value (``"partner"``) or its name in any case
        (``"PARTNER"``). Surrounding whitespace is ignored.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        raw = value.strip()
        try:
            return cls(raw)
        except ValueError:
            return cls.__members__.get(raw.upper())


class Permission(str, Enum):
    """Atomic capabilities, one per (resource, action) pair.

    Format: ``{resource}:{action}``

    Member names keep the identifiers the routes were written against
    (``VIEW_CASES``, ``CREATE_CONTENT``); values are canonical::

        Permission.VIEW_CASES.value     → "case:view"
        Permission.VIEW_CASES.resource  → "case"
        Permission.VIEW_CASES.action    → "view"
    """

    # ── Users ───────────────────────────────────────────
    VIEW_USERS = "user:view"
    CREATE_USERS = "user:create"
    UPDATE_USERS = "user:update"
    DELETE_USERS = "user:delete"
    MANAGE_USER_ROLES = "user:manage_roles"

    # ── Clients ─────────────────────────────────────────
    VIEW_CLIENTS = "client:view"
    CREATE_CLIENTS = "client:create"
    UPDATE_CLIENTS = "client:update"
    DELETE_CLIENTS = "client:delete"

    # ── Cases ───────────────────────────────────────────
    VIEW_CASES = "case:view"
    CREATE_CASES = "case:create"
    UPDATE_CASES = "case:update"
    DELETE_CASES = "case:delete"
    ASSIGN_CASES = "case:assign"

    # ── Documents ───────────────────────────────────────
    VIEW_DOCUMENTS = "document:view"
    UPLOAD_DOCUMENTS = "document:upload"
    UPDATE_DOCUMENTS = "document:update"
    DELETE_DOCUMENTS = "document:delete"
    DOWNLOAD_DOCUMENTS = "document:download"
    # Instance-level read of a single document. Held only through super_admin's
    # full grant, so the fallback in ``can_access_document`` denies.
    DOCUMENT_READ = "document:read"

    # ── Time & Billing ──────────────────────────────────
    VIEW_TIME_ENTRIES = "time_entry:view"
    CREATE_TIME_ENTRIES = "time_entry:create"
    UPDATE_TIME_ENTRIES = "time_entry:update"
    DELETE_TIME_ENTRIES = "time_entry:delete"
    VIEW_INVOICES = "invoice:view"
    CREATE_INVOICES = "invoice:create"
    UPDATE_INVOICES = "invoice:update"
    DELETE_INVOICES = "invoice:delete"
    VIEW_BILLING_RATES = "billing_rate:view"
    CREATE_BILLING_RATES = "billing_rate:create"
    UPDATE_BILLING_RATES = "billing_rate:update"
    DELETE_BILLING_RATES = "billing_rate:delete"
    VIEW_PAYMENTS = "payment:view"
    CREATE_PAYMENTS = "payment:create"
    UPDATE_PAYMENTS = "payment:update"
    DELETE_PAYMENTS = "payment:delete"

    # ── Calendar ────────────────────────────────────────
    VIEW_CALENDAR = "calendar:view"
    CREATE_EVENTS = "event:create"
    UPDATE_EVENTS = "event:update"
    DELETE_EVENTS = "event:delete"

    # ── Reports & Administration ────────────────────────
    VIEW_REPORTS = "report:view"
    GENERATE_REPORTS = "report:generate"
    CREATE_REPORTS = "report:create"
    UPDATE_REPORTS = "report:update"
    DELETE_REPORTS = "report:delete"
    EXPORT_REPORTS = "report:export"
    EXPORT_DATA = "data:export"
    VIEW_AUDIT_LOGS = "audit_log:view"
    MANAGE_SYSTEM_SETTINGS = "system_settings:manage"
    ACCESS_ADMIN_PANEL = "admin_panel:access"
    VIEW_FINANCIAL_REPORTS = "financial_report:view"
    CREATE_FINANCIAL_REPORTS = "financial_report:create"
    EXPORT_FINANCIAL_REPORTS = "financial_report:export"
    VIEW_PRODUCTIVITY_REPORTS = "productivity_report:view"
    CREATE_PRODUCTIVITY_REPORTS = "productivity_report:create"
    EXPORT_PRODUCTIVITY_REPORTS = "productivity_report:export"

    # ── Content ─────────────────────────────────────────
    CREATE_CONTENT = "content:create"
    VIEW_CONTENT = "content:view"
    UPDATE_CONTENT = "content:update"
    DELETE_CONTENT = "content:delete"
    MANAGE_CONTENT_CATEGORIES = "content_category:manage"
    MANAGE_NEWSLETTERS = "newsletter:manage"
    VIEW_CONTENT_ANALYTICS = "content_analytics:view"

    # ── Expenses ────────────────────────────────────────
    CREATE_EXPENSES = "expense:create"
    VIEW_EXPENSES = "expense:view"
    UPDATE_EXPENSES = "expense:update"
    DELETE_EXPENSES = "expense:delete"
    APPROVE_EXPENSES = "expense:approve"

    # ── Tasks ───────────────────────────────────────────
    VIEW_TASKS = "task:view"
    CREATE_TASKS = "task:create"
    UPDATE_TASKS = "task:update"
    DELETE_TASKS = "task:delete"
    ASSIGN_TASKS = "task:assign"

    # ── Communication ───────────────────────────────────
    VIEW_COMMUNICATION = "communication:view"
    CREATE_COMMUNICATION = "communication:create"
    UPDATE_COMMUNICATION = "communication:update"
    DELETE_COMMUNICATION = "communication:delete"
    SEND_MESSAGES = "message:send"

    # ── Search ──────────────────────────────────────────
    USE_GLOBAL_SEARCH = "global_search:use"
    VIEW_SEARCH_STATISTICS = "search_statistics:view"

    # ── Support & Feedback ──────────────────────────────
    SUPPORT_READ_ALL = "support:read_all"
    SUPPORT_ASSIGN = "support:assign"
    SUPPORT_UPDATE = "support:update"
    SUPPORT_VIEW_STATS = "support:view_stats"
    FEEDBACK_READ_ALL = "feedback:read_all"
    FEEDBACK_UPDATE = "feedback:update"
    FEEDBACK_VIEW_STATS = "feedback:view_stats"
    FEEDBACK_SEARCH = "feedback:search"
    FEEDBACK_VIEW_TRENDS = "feedback:view_trends"
    FEEDBACK_VIEW_ANALYTICS = "feedback:view_analytics"

    @property
    def resource(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def action(self) -> str:
        return self.value.split(":", 1)[1]

    @classmethod
    def parse(cls, value: Any) -> Permission | None:
        """Resolve an external permission value, or None if it is not in the catalog.

        Accepts, in order:
        1. a ``Permission`` member
        2. the canonical value (``"case:view"``)
        3. the member name in any case, which covers both stored spellings
           (``"view_cases"`` and ``"VIEW_CONTENT"``)

        Example::

            Permission.parse("view_cases")     # Permission.VIEW_CASES
            Permission.parse("VIEW_CONTENT")   # Permission.VIEW_CONTENT
            Permission.parse("document_read")  # Permission.DOCUMENT_READ
            Permission.parse("case:archive")   # None
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        raw = value.strip()
        try:
            return cls(raw)
        except ValueError:
            pass
        return cls.__members__.get(raw.upper())

    @classmethod
    def for_resource(cls, resource: str, action: str) -> Permission | None:
        """Look up the permission for a (resource, action) pair.

        Returns None when the catalog has no such pair.
        """
        if not resource or not action:
            return None
        try:
            return cls(f"{resource.strip().lower()}:{action.strip().lower()}")
        except ValueError:
            return None


_HIERARCHY: dict[Role, int] = {
    Role.SUPER_ADMIN: 7,
    Role.PARTNER: 6,
    Role.SENIOR_ASSOCIATE: 5,
    Role.ASSOCIATE: 4,
    Role.JUNIOR_ASSOCIATE: 3,
    Role.PARALEGAL: 2,
    Role.CLIENT: 1,
    Role.GUEST: 0,
}

# Below every catalogued role, so unknown values never tie with GUEST.
UNKNOWN_LEVEL = -1


def hierarchy_level(role: Role | str | None) -> int:
    """Seniority rank of a role (higher = more senior).

    Values outside the catalog rank at ``UNKNOWN_LEVEL``.
    """
    parsed = Role.parse(role)
    if parsed is None:
        return UNKNOWN_LEVEL
    return _HIERARCHY[parsed]


__all__ = [
    "Permission",
    "Role",
    "UNKNOWN_LEVEL",
    "hierarchy_level",
]
