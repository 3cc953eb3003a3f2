"""In-handler guard and principal extraction.

Provides:
- ``extract_principal`` — build a ``Principal`` from gRPC metadata.
- ``ensure_permission`` — raise unless the caller meets a requirement.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from ..exceptions import AccessDeniedError, AuthenticationRequiredError
from ..permissions.models import Principal
from ..permissions.requirements import PermissionRequirement

logger = logging.getLogger(__name__)

# Metadata keys set by the upstream authentication layer
USER_ID_KEY = "x-user-id"
USER_ROLE_KEY = "x-user-role"
USER_EMAIL_KEY = "x-user-email"


def metadata_to_dict(metadata: Iterable[tuple[str, Any]] | Mapping[str, Any] | None) -> dict[str, str]:
    """Flatten gRPC invocation metadata into a str → str dict.

    Binary (``-bin``) entries are dropped. Keys are lower-cased.
    """
    if not metadata:
        return {}
    items = metadata.items() if isinstance(metadata, Mapping) else metadata
    result: dict[str, str] = {}
    for key, value in items:
        if isinstance(value, bytes) or key.endswith("-bin"):
            continue
        result[key.lower()] = str(value)
    return result


def extract_principal(metadata: Iterable[tuple[str, Any]] | Mapping[str, Any] | None) -> Optional[Principal]:
    """Return the caller placed in metadata, or None if absent or invalid.

    Example::

        extract_principal([("x-user-id", "U1"), ("x-user-role", "partner")])
        # Principal(user_id='U1', role=<Role.PARTNER: 'partner'>, email=None)
    """
    values = metadata_to_dict(metadata)
    user_id = values.get(USER_ID_KEY, "").strip()
    if not user_id:
        return None
    try:
        return Principal(
            user_id=user_id,
            role=values.get(USER_ROLE_KEY, ""),
            email=values.get(USER_EMAIL_KEY) or None,
        )
    except ValidationError:
        logger.debug("Rejected principal metadata for user %s", user_id)
        return None


def ensure_permission(principal: Optional[Principal], requirement: PermissionRequirement) -> Principal:
    """Raise unless ``principal`` satisfies ``requirement``.

    Raises:
        AuthenticationRequiredError: No principal.
        AccessDeniedError: The principal's role does not meet the requirement.
            The requirement is recorded in ``details`` for server logs only.

    Returns:
        The principal, for chaining.
    """
    if principal is None:
        raise AuthenticationRequiredError(requirement=requirement.describe())
    if not requirement.is_satisfied_by(principal.role):
        raise AccessDeniedError(
            user_id=principal.user_id,
            role=principal.role.value,
            requirement=requirement.describe(),
        )
    return principal


__all__ = [
    "USER_EMAIL_KEY",
    "USER_ID_KEY",
    "USER_ROLE_KEY",
    "ensure_permission",
    "extract_principal",
    "metadata_to_dict",
]
