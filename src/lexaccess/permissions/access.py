"""Instance-level access checks for cases and documents.

Provides pure functions that decide whether a user may touch one specific
record, given a snapshot of its assignment fields. Route handlers combine
the result with the class-level check from ``matrix`` using logical AND.

Every function returns a bool and never raises; missing or malformed input
is a denial.
"""

from __future__ import annotations

from typing import Any, Mapping

from .constants import Permission, Role
from .matrix import has_permission
from .models import CaseAssignment, DocumentRecord, coerce_snapshot


# Unconditional access to every case
CASE_BYPASS_ROLES: frozenset[Role] = frozenset({Role.SUPER_ADMIN, Role.PARTNER})

# Access only to cases they are assigned to
CASE_ASSIGNED_ROLES: frozenset[Role] = frozenset(
    {Role.SENIOR_ASSOCIATE, Role.JUNIOR_ASSOCIATE, Role.PARALEGAL}
)


def _normalize_user_id(user_id: Any) -> str | None:
    if user_id is None:
        return None
    s = str(user_id).strip()
    return s or None


def can_access_case(
    role: Role | str | None,
    user_id: Any,
    case: CaseAssignment | Mapping[str, Any] | None,
) -> bool:
    """Check if a user may access a specific case.

    Checks in order:
    1. ``super_admin`` / ``partner`` — every case, assigned or not
    2. ``senior_associate`` / ``junior_associate`` / ``paralegal`` — only if
       ``user_id`` is the assigned partner or one of the assigned associates
    3. ``client`` — never (clients are not yet linked to their own cases here)
    4. anything else — never

    Args:
        role: Requesting role (member or external string).
        user_id: Requesting user's identifier.
        case: Assignment snapshot, as a ``CaseAssignment`` or a mapping of its fields.

    Returns:
        True if access is granted.

    Example::

        case = CaseAssignment(assigned_partner="U1", assigned_associates=("U2",))
        can_access_case(Role.JUNIOR_ASSOCIATE, "U2", case)  # True
        can_access_case(Role.JUNIOR_ASSOCIATE, "U3", case)  # False
        can_access_case(Role.PARTNER, "U9", CaseAssignment())  # True
    """
    snapshot = coerce_snapshot(CaseAssignment, case)
    if snapshot is None:
        return False

    parsed = Role.parse(role)
    if parsed is None:
        return False

    if parsed in CASE_BYPASS_ROLES:
        return True

    if parsed in CASE_ASSIGNED_ROLES:
        uid = _normalize_user_id(user_id)
        if uid is None:
            return False
        return snapshot.involves(uid)

    # CLIENT holds VIEW_CASES in the matrix but has no instance-level path yet.
    return False


def can_access_document(
    role: Role | str | None,
    user_id: Any,
    document: DocumentRecord | Mapping[str, Any] | None,
) -> bool:
    """Check if a user may access a specific document.

    Checks in order:
    1. ``super_admin`` — every document
    2. ``partner`` — every document that is not confidential
    3. anything else — the ``document:read`` capability, regardless of who
       uploaded the document or which case owns it. No role below
       ``partner`` holds it, so this branch currently denies.

    ``user_id`` does not influence the outcome; it is accepted so that the
    signature matches ``can_access_case``.

    Example::

        secret = DocumentRecord(is_confidential=True)
        can_access_document(Role.SUPER_ADMIN, "U1", secret)  # True
        can_access_document(Role.PARTNER, "U1", secret)      # False
    """
    snapshot = coerce_snapshot(DocumentRecord, document)
    if snapshot is None:
        return False

    parsed = Role.parse(role)
    if parsed is None:
        return False

    if parsed is Role.SUPER_ADMIN:
        return True

    if parsed is Role.PARTNER:
        return not snapshot.is_confidential

    return has_permission(parsed, Permission.DOCUMENT_READ)


__all__ = [
    "CASE_ASSIGNED_ROLES",
    "CASE_BYPASS_ROLES",
    "can_access_case",
    "can_access_document",
]
