"""gRPC interceptor for class-level permission enforcement.

Provides:
- ``ServicePermissionInterceptor`` — maps each RPC to a ``PermissionRequirement``.
"""

from __future__ import annotations

import logging
from typing import Any

import grpc

from ..config import AccessConfig, EnforcementMode, load_access_config_from_env
from ..exceptions import AccessDeniedError, AuthenticationRequiredError, get_grpc_status_code
from ..permissions.requirements import PermissionRequirement
from .guard import USER_ID_KEY, USER_ROLE_KEY, extract_principal, metadata_to_dict

logger = logging.getLogger(__name__)


# Method prefixes that bypass permission checks
_SKIP_PREFIXES = (
    "grpc.health.v1",
    "grpc.reflection.v1",
)


# ── Helpers ──────────────────────────────────────────────────────


def _extract_rpc_name(full_method: str) -> str:
    """Extract RPC name from fully-qualified method string.

    ``/cases.CaseService/DeleteCase`` → ``DeleteCase``
    """
    return full_method.rsplit("/", 1)[-1] if "/" in full_method else full_method


def _should_skip(method: str) -> bool:
    """Check if this method should skip permission checks."""
    return any(prefix in method for prefix in _SKIP_PREFIXES)


# ── Interceptor ──────────────────────────────────────────────────


class ServicePermissionInterceptor(grpc.aio.ServerInterceptor):
    """gRPC server interceptor enforcing a requirement per RPC.

    Sits before all handlers and:
    1. Logs caller identity (always, even when enforcement is off)
    2. Reads the principal from metadata (``x-user-id`` / ``x-user-role``)
    3. Maps the RPC name to its ``PermissionRequirement``
    4. Aborts with ``UNAUTHENTICATED`` / ``PERMISSION_DENIED`` if unmet

    Unmapped RPCs are **denied**. The caller only sees a generic message;
    the reason is logged server side.

    Args:
        rpc_requirements: Mapping of RPC name → requirement.
        service_name: Human-readable service name for log messages.
        enforcement: off / warn / enforce. Defaults to ``config.enforcement``.
        config: Settings (loaded from the environment when omitted).

    Usage::

        interceptor = ServicePermissionInterceptor(
            {"DeleteCase": require(Permission.DELETE_CASES)},
            service_name="Cases",
            enforcement=EnforcementMode.WARN,   # safe rollout
        )
    """

    def __init__(
        self,
        rpc_requirements: dict[str, PermissionRequirement],
        *,
        service_name: str = "Service",
        enforcement: EnforcementMode | None = None,
        config: AccessConfig | None = None,
    ) -> None:
        if enforcement is None or config is None:
            config = config or load_access_config_from_env()
        self._requirements = dict(rpc_requirements)
        self._service_name = service_name
        self._mode = enforcement if enforcement is not None else config.enforcement
        self._log_allowed = config.log_allowed

        if self._mode != EnforcementMode.OFF:
            logger.info("%s interceptor mode: %s", self._service_name, self._mode.value)

    @property
    def mode(self) -> EnforcementMode:
        return self._mode

    async def intercept_service(
        self,
        continuation: Any,
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        """Intercept incoming gRPC calls for permission validation."""
        method = handler_call_details.method or ""

        if _should_skip(method):
            return await continuation(handler_call_details)

        rpc_name = _extract_rpc_name(method)
        metadata = metadata_to_dict(handler_call_details.invocation_metadata)
        principal = extract_principal(metadata)

        # ── LOGGING (always active) ───────────────────────────────
        caller = f"{principal.user_id} ({principal.role.value})" if principal else "anonymous"
        logger.info("%s RPC %s | caller=%s", self._service_name, rpc_name, caller)

        # ── ENFORCEMENT ───────────────────────────────────────────
        if self._mode == EnforcementMode.OFF:
            return await continuation(handler_call_details)

        requirement = self._requirements.get(rpc_name)
        deny_reason: str | None = None
        deny_error: type[AccessDeniedError] | type[AuthenticationRequiredError] = AccessDeniedError

        if requirement is None:
            deny_reason = "RPC not mapped to a requirement"
        elif principal is None and not metadata.get(USER_ID_KEY, "").strip():
            deny_reason = f"no principal (requires {requirement.describe()})"
            deny_error = AuthenticationRequiredError
        elif principal is None:
            deny_reason = f"unrecognized role {metadata.get(USER_ROLE_KEY, '')!r}"
        elif not requirement.is_satisfied_by(principal.role):
            deny_reason = f"role {principal.role.value} lacks {requirement.describe()}"

        if deny_reason:
            if self._mode == EnforcementMode.WARN:
                logger.warning(
                    "%s WARN_DENIED '%s' for %s: %s (would block in enforce mode)",
                    self._service_name,
                    rpc_name,
                    caller,
                    deny_reason,
                )
                return await continuation(handler_call_details)

            logger.warning(
                "%s DENIED '%s' for %s: %s",
                self._service_name,
                rpc_name,
                caller,
                deny_reason,
            )

            error = deny_error()
            _deny_status = get_grpc_status_code(error)
            _deny_msg = error.message

            async def _denied(request, context):
                await context.abort(_deny_status, _deny_msg)

            return grpc.unary_unary_rpc_method_handler(_denied)

        if self._log_allowed:
            logger.info("%s ALLOWED '%s' for %s", self._service_name, rpc_name, caller)
        else:
            logger.debug("%s ALLOWED '%s' for %s", self._service_name, rpc_name, caller)

        return await continuation(handler_call_details)


__all__ = [
    "ServicePermissionInterceptor",
]
