"""Role assignment and user management rules.

Provides:
- ``get_assignable_roles()`` / ``can_assign_role()`` — explicit assignment table.
- ``can_manage_user()`` — strict seniority comparison.
- ``assignment_discrepancies()`` — where the two rules disagree.

The assignment table and the seniority rule are independent and do not
agree everywhere: ``super_admin`` may assign ``super_admin`` but cannot
manage a peer, and only ``super_admin``'s table lists ``associate``.
``assignment_discrepancies()`` lists every such pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .constants import Role, hierarchy_level

# ── Assignment table ────────────────────────────────────

ASSIGNABLE_ROLES: Mapping[Role, frozenset[Role]] = MappingProxyType(
    {
        Role.SUPER_ADMIN: frozenset(Role),
        Role.PARTNER: frozenset(
            {
                Role.SENIOR_ASSOCIATE,
                Role.JUNIOR_ASSOCIATE,
                Role.PARALEGAL,
                Role.CLIENT,
                Role.GUEST,
            }
        ),
        Role.SENIOR_ASSOCIATE: frozenset({Role.JUNIOR_ASSOCIATE, Role.PARALEGAL}),
        Role.ASSOCIATE: frozenset(),
        Role.JUNIOR_ASSOCIATE: frozenset(),
        Role.PARALEGAL: frozenset(),
        Role.CLIENT: frozenset(),
        Role.GUEST: frozenset(),
    }
)


def get_assignable_roles(current_role: Role | str | None) -> frozenset[Role]:
    """Roles that ``current_role`` may hand out to other users.

    Unknown roles may assign nothing.
    """
    parsed = Role.parse(current_role)
    if parsed is None:
        return frozenset()
    return ASSIGNABLE_ROLES[parsed]


def can_assign_role(current_role: Role | str | None, target_role: Role | str | None) -> bool:
    """Check if ``current_role`` may assign ``target_role``.

    Example::

        can_assign_role(Role.PARTNER, Role.CLIENT)   # True
        can_assign_role(Role.PARTNER, Role.PARTNER)  # False
    """
    target = Role.parse(target_role)
    if target is None:
        return False
    return target in get_assignable_roles(current_role)


def can_manage_user(current_role: Role | str | None, target_role: Role | str | None) -> bool:
    """Check if a user with ``current_role`` may manage a user with ``target_role``.

    Strictly more senior only: nobody manages their own tier. If either role
    is outside the catalog the answer is False.
    """
    current = Role.parse(current_role)
    target = Role.parse(target_role)
    if current is None or target is None:
        return False
    return hierarchy_level(current) > hierarchy_level(target)


# ── Consistency report ──────────────────────────────────


class DiscrepancyKind(str, Enum):
    """How the assignment table and the seniority rule disagree."""

    # Table allows the assignment, seniority rule does not
    ASSIGNABLE_NOT_MANAGEABLE = "assignable_not_manageable"
    # Seniority rule allows management, table does not list the role
    MANAGEABLE_NOT_ASSIGNABLE = "manageable_not_assignable"


@dataclass(frozen=True)
class AssignmentDiscrepancy:
    """One (current, target) pair on which the two rules disagree."""

    current: Role
    target: Role
    kind: DiscrepancyKind

    def __str__(self) -> str:
        return f"{self.current.value} -> {self.target.value}: {self.kind.value}"


def assignment_discrepancies() -> frozenset[AssignmentDiscrepancy]:
    """Every (current, target) pair where ``can_assign_role`` and
    ``can_manage_user`` give different answers.
    """
    found: set[AssignmentDiscrepancy] = set()
    for current in Role:
        for target in Role:
            assignable = can_assign_role(current, target)
            manageable = can_manage_user(current, target)
            if assignable and not manageable:
                found.add(AssignmentDiscrepancy(current, target, DiscrepancyKind.ASSIGNABLE_NOT_MANAGEABLE))
            elif manageable and not assignable:
                found.add(AssignmentDiscrepancy(current, target, DiscrepancyKind.MANAGEABLE_NOT_ASSIGNABLE))
    return frozenset(found)


__all__ = [
    "ASSIGNABLE_ROLES",
    "AssignmentDiscrepancy",
    "DiscrepancyKind",
    "assignment_discrepancies",
    "can_assign_role",
    "can_manage_user",
    "get_assignable_roles",
]
