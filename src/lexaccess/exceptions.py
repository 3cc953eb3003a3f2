"""Exception hierarchy for lexaccess.

Evaluators never raise: every check resolves to a boolean. These types are
used at the edges:
- stores raise ``ResourceLookupError`` and the lookup checks swallow it
- guards raise ``AccessDeniedError`` / ``AuthenticationRequiredError``
- catalog construction raises ``ConfigurationError`` at import time

Usage in handlers:
    from lexaccess.exceptions import AccessDeniedError, grpc_error_handler

    @grpc_error_handler
    async def DeleteCase(self, request, context):
        ensure_permission(principal, require(Permission.DELETE_CASES))
        ...
"""

from __future__ import annotations

import functools
import logging
from typing import Any

__all__ = [
    "LexAccessError",
    "ConfigurationError",
    "ResourceLookupError",
    "LookupTimeoutError",
    "AuthenticationRequiredError",
    "AccessDeniedError",
    "get_grpc_status_code",
    "grpc_error_handler",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class LexAccessError(Exception):
    """Base exception for lexaccess.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "PERMISSION_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments. Never sent to callers.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(LexAccessError):
    """Catalog, matrix or settings are incomplete or invalid."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid authorization configuration"


class ResourceLookupError(LexAccessError):
    """The persistence collaborator failed to answer a lookup."""

    code: str = "LOOKUP_ERROR"
    message: str = "Resource lookup failed"


class LookupTimeoutError(ResourceLookupError):
    """The persistence collaborator did not answer within the timeout."""

    code: str = "LOOKUP_TIMEOUT"
    message: str = "Resource lookup timed out"


class AuthenticationRequiredError(LexAccessError):
    """No authenticated principal accompanies the request."""

    code: str = "UNAUTHENTICATED"
    message: str = "Authentication required"


class AccessDeniedError(LexAccessError):
    """The principal is not allowed to perform the action.

    The message is generic. The reason lives in ``details`` and is only
    logged server side.
    """

    code: str = "PERMISSION_DENIED"
    message: str = "Access denied"


# ---- gRPC Error Handling Utilities ------------------------------------------


def get_grpc_status_code(error: LexAccessError) -> Any:
    """Map a LexAccessError to a ``grpc.StatusCode``.

    Import grpc locally to avoid a hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "UNAUTHENTICATED": grpc.StatusCode.UNAUTHENTICATED,
        "PERMISSION_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
        "LOOKUP_ERROR": grpc.StatusCode.UNAVAILABLE,
        "LOOKUP_TIMEOUT": grpc.StatusCode.DEADLINE_EXCEEDED,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)


def grpc_error_handler(method):
    """Decorator for unary gRPC service methods.

    Catches LexAccessError, logs it with its details and aborts the RPC with
    the mapped status code. The client only sees the generic message.

    Usage:
        @grpc_error_handler
        async def MyMethod(self, request, context):
            ...
    """

    @functools.wraps(method)
    async def wrapper(self, request, context):
        try:
            return await method(self, request, context)
        except LexAccessError as e:
            status_code = get_grpc_status_code(e)

            logger.warning(
                "%s failed: [%s] %s",
                method.__name__,
                e.code,
                e.message,
                extra={
                    "error_code": e.code,
                    "error_details": e.details,
                },
            )

            context.set_trailing_metadata([("error-code", e.code)])
            await context.abort(status_code, e.message)
            return

        except Exception as e:
            import grpc

            logger.exception("%s unexpected error: %s", method.__name__, e)
            await context.abort(grpc.StatusCode.INTERNAL, "Internal error")
            return

    return wrapper
