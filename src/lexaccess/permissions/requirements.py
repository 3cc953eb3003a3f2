"""Declarative class-level requirements for route and RPC guards.

A ``PermissionRequirement`` names what a caller's role must hold before a
handler runs. Four shapes:

- ``require(p)``        — one capability
- ``any_of(p1, p2)``    — at least one of several
- ``all_of(p1, p2)``    — every one of several
- ``role_in(r1, r2)``   — the role itself must be listed

Usage::

    RPC_REQUIREMENTS = {
        "DeleteCase": require(Permission.DELETE_CASES),
        "ListBilling": any_of(Permission.VIEW_BILLING_RATES, Permission.VIEW_INVOICES),
        "ManageFirm": role_in(Role.SUPER_ADMIN, Role.PARTNER),
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..exceptions import ConfigurationError
from .constants import Permission, Role
from .matrix import has_all_permissions, has_any_permission, has_permission


class RequirementMode(str, Enum):
    """How the listed items combine."""

    SINGLE = "single"
    ANY = "any"
    ALL = "all"
    ROLE = "role"


@dataclass(frozen=True)
class PermissionRequirement:
    """An immutable class-level check. Build with the module constructors."""

    mode: RequirementMode
    permissions: tuple[Permission, ...] = ()
    roles: tuple[Role, ...] = ()

    def is_satisfied_by(self, role: Role | str | None) -> bool:
        """True if ``role`` meets this requirement. Unknown roles never do."""
        if Role.parse(role) is None:
            return False
        if self.mode is RequirementMode.SINGLE:
            return has_permission(role, self.permissions[0])
        if self.mode is RequirementMode.ANY:
            return has_any_permission(role, self.permissions)
        if self.mode is RequirementMode.ALL:
            return has_all_permissions(role, self.permissions)
        return Role.parse(role) in self.roles

    def describe(self) -> str:
        """Human-readable form for server-side logs."""
        if self.mode is RequirementMode.ROLE:
            return "role in [" + ", ".join(r.value for r in self.roles) + "]"
        items = ", ".join(p.value for p in self.permissions)
        if self.mode is RequirementMode.SINGLE:
            return items
        return f"{self.mode.value} of [{items}]"

    def __str__(self) -> str:
        return self.describe()


def _permissions(values: tuple[Permission | str, ...]) -> tuple[Permission, ...]:
    if not values:
        raise ConfigurationError("A requirement needs at least one permission")
    parsed = []
    for value in values:
        permission = Permission.parse(value)
        if permission is None:
            raise ConfigurationError(f"Unknown permission in requirement: {value!r}", permission=value)
        parsed.append(permission)
    return tuple(parsed)


def require(permission: Permission | str) -> PermissionRequirement:
    """Require one capability."""
    return PermissionRequirement(RequirementMode.SINGLE, permissions=_permissions((permission,)))


def any_of(*permissions: Permission | str) -> PermissionRequirement:
    """Require at least one of ``permissions``."""
    return PermissionRequirement(RequirementMode.ANY, permissions=_permissions(permissions))


def all_of(*permissions: Permission | str) -> PermissionRequirement:
    """Require every one of ``permissions``."""
    return PermissionRequirement(RequirementMode.ALL, permissions=_permissions(permissions))


def role_in(*roles: Role | str) -> PermissionRequirement:
    """Require the caller's role to be one of ``roles``."""
    if not roles:
        raise ConfigurationError("A role requirement needs at least one role")
    parsed = []
    for value in roles:
        role = Role.parse(value)
        if role is None:
            raise ConfigurationError(f"Unknown role in requirement: {value!r}", role=value)
        parsed.append(role)
    return PermissionRequirement(RequirementMode.ROLE, roles=tuple(parsed))


__all__ = [
    "PermissionRequirement",
    "RequirementMode",
    "all_of",
    "any_of",
    "require",
    "role_in",
]
