"""Role-based access control for the firm's case management platform.

Defines:
- Role / Permission: closed catalogs, plus ``hierarchy_level()``
- ROLE_PERMISSIONS: the role → capability matrix
- has_permission() and friends: class-level checks
- can_access_case() / can_access_document(): instance-level checks
- CaseAccessChecker: lookup-backed checks (async)
- get_assignable_roles() / can_manage_user(): role assignment rules
- PermissionRequirement: declarative checks for guards
"""

from .access import (
    CASE_ASSIGNED_ROLES,
    CASE_BYPASS_ROLES,
    can_access_case,
    can_access_document,
)
from .assignment import (
    ASSIGNABLE_ROLES,
    AssignmentDiscrepancy,
    DiscrepancyKind,
    assignment_discrepancies,
    can_assign_role,
    can_manage_user,
    get_assignable_roles,
)
from .constants import UNKNOWN_LEVEL, Permission, Role, hierarchy_level
from .lookups import CaseAccessChecker, has_case_access, has_client_access
from .matrix import (
    ROLE_PERMISSIONS,
    build_role_permissions,
    can_access_resource,
    get_role_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from .models import CaseAccessRow, CaseAssignment, DocumentRecord, Principal
from .requirements import (
    PermissionRequirement,
    RequirementMode,
    all_of,
    any_of,
    require,
    role_in,
)

__all__ = [
    "ASSIGNABLE_ROLES",
    "CASE_ASSIGNED_ROLES",
    "CASE_BYPASS_ROLES",
    "ROLE_PERMISSIONS",
    "UNKNOWN_LEVEL",
    "AssignmentDiscrepancy",
    "CaseAccessChecker",
    "CaseAccessRow",
    "CaseAssignment",
    "DiscrepancyKind",
    "DocumentRecord",
    "Permission",
    "PermissionRequirement",
    "Principal",
    "RequirementMode",
    "Role",
    "all_of",
    "any_of",
    "assignment_discrepancies",
    "build_role_permissions",
    "can_access_case",
    "can_access_document",
    "can_access_resource",
    "can_assign_role",
    "can_manage_user",
    "get_assignable_roles",
    "get_role_permissions",
    "has_all_permissions",
    "has_any_permission",
    "has_case_access",
    "has_client_access",
    "has_permission",
    "hierarchy_level",
    "require",
    "role_in",
]
