from .config import AccessConfig, EnforcementMode, LogLevel, load_access_config_from_env
from .exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    ConfigurationError,
    LexAccessError,
    LookupTimeoutError,
    ResourceLookupError,
)
from .interfaces import CaseAccessStore
from .logging import (
    safe_preview,
    redact_secrets,
    safe_log_value,
    AccessLogFormatter,
    AccessLoggerAdapter,
    setup_logging,
    get_access_logger,
)
from .permissions import (
    CaseAccessChecker,
    CaseAccessRow,
    CaseAssignment,
    DocumentRecord,
    Permission,
    PermissionRequirement,
    Principal,
    Role,
    can_access_case,
    can_access_document,
    can_access_resource,
    can_assign_role,
    can_manage_user,
    get_assignable_roles,
    get_role_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
    hierarchy_level,
)

__all__ = [
    'AccessConfig',
    'EnforcementMode',
    'LogLevel',
    'load_access_config_from_env',
    'LexAccessError',
    'ConfigurationError',
    'ResourceLookupError',
    'LookupTimeoutError',
    'AuthenticationRequiredError',
    'AccessDeniedError',
    'CaseAccessStore',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'AccessLogFormatter',
    'AccessLoggerAdapter',
    'setup_logging',
    'get_access_logger',
    'Role',
    'Permission',
    'Principal',
    'CaseAssignment',
    'DocumentRecord',
    'CaseAccessRow',
    'PermissionRequirement',
    'CaseAccessChecker',
    'hierarchy_level',
    'has_permission',
    'has_any_permission',
    'has_all_permissions',
    'get_role_permissions',
    'can_access_resource',
    'can_access_case',
    'can_access_document',
    'get_assignable_roles',
    'can_assign_role',
    'can_manage_user',
]
