"""Enforcement surface for services that use lexaccess.

Provides a gRPC interceptor for class-level checks per RPC and an
in-handler guard for checks that need request data.

Usage (in any service)::

    from lexaccess.security import get_security_interceptors

    server = grpc.aio.server(
        interceptors=get_security_interceptors(RPC_REQUIREMENTS, service_name="Cases"),
    )

    # Or use the guard directly in a handler:
    from lexaccess.security import ensure_permission, extract_principal

    @grpc_error_handler
    async def DeleteCase(self, request, context):
        principal = extract_principal(context.invocation_metadata())
        ensure_permission(principal, require(Permission.DELETE_CASES))

Configuration (env vars)::

    ACCESS_ENFORCEMENT=enforce    # off | warn | enforce (default: enforce)
    ACCESS_LOG_ALLOWED=false      # log allowed calls at INFO
"""

from __future__ import annotations

import grpc

from ..config import AccessConfig, EnforcementMode
from ..permissions.requirements import PermissionRequirement
from .guard import (
    USER_EMAIL_KEY,
    USER_ID_KEY,
    USER_ROLE_KEY,
    ensure_permission,
    extract_principal,
    metadata_to_dict,
)
from .interceptors import ServicePermissionInterceptor


def get_security_interceptors(
    rpc_requirements: dict[str, PermissionRequirement],
    *,
    service_name: str = "Service",
    config: AccessConfig | None = None,
) -> list[grpc.aio.ServerInterceptor]:
    """Get gRPC server interceptors for access control.

    Returns a list to pass to ``grpc.aio.server()``. Enforcement mode comes
    from ``config`` (or the environment).
    """
    interceptor = ServicePermissionInterceptor(
        rpc_requirements,
        service_name=service_name,
        config=config,
    )
    return [interceptor]


__all__ = [
    # Config
    "EnforcementMode",
    # Guard
    "USER_EMAIL_KEY",
    "USER_ID_KEY",
    "USER_ROLE_KEY",
    "ensure_permission",
    "extract_principal",
    "metadata_to_dict",
    # Interceptors
    "ServicePermissionInterceptor",
    "get_security_interceptors",
]
