"""Lookup-backed access checks.

These checks need a read against the persistence collaborator
(``lexaccess.interfaces.CaseAccessStore``). Each read is bounded by a
timeout. A failed, slow or empty read is a denial: the failure is logged
once and never re-raised or retried. Callers may simply issue the check
again.

Checks hold no lock and share no state, so any number of them can run
concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, TypeVar

from ..config import AccessConfig, load_access_config_from_env
from ..exceptions import ConfigurationError, LookupTimeoutError
from .access import CASE_BYPASS_ROLES, can_access_case
from .constants import Role
from .models import CaseAccessRow, CaseAssignment, coerce_snapshot

if TYPE_CHECKING:
    from ..interfaces import CaseAccessStore

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Sentinel for a read that failed (distinct from a legitimate None "not found")
_FAILED: Any = object()


def _clean_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


class CaseAccessChecker:
    """Runs lookup-backed checks against one store.

    Args:
        store: The persistence collaborator.
        timeout_s: Upper bound for a single read. Defaults to
            ``AccessConfig.lookup_timeout_s``.
        config: Settings to take the default timeout from. Loaded from the
            environment when omitted.

    Raises:
        ConfigurationError: The environment holds unusable settings.
        ValueError: ``timeout_s`` is not greater than zero.

    Usage::

        checker = CaseAccessChecker(store, timeout_s=1.5)
        if not await checker.has_client_access(principal.role, principal.user_id, client_id):
            raise AccessDeniedError(...)
    """

    def __init__(
        self,
        store: CaseAccessStore,
        *,
        timeout_s: float | None = None,
        config: AccessConfig | None = None,
    ) -> None:
        if timeout_s is None:
            timeout_s = (config or load_access_config_from_env()).lookup_timeout_s
        if timeout_s <= 0:
            raise ValueError("timeout_s must be greater than zero")
        self._store = store
        self._timeout_s = timeout_s

    @property
    def timeout_s(self) -> float:
        return self._timeout_s

    async def _read(
        self,
        what: str,
        fn: Callable[..., Awaitable[_T]],
        *args: Any,
        **context: Any,
    ) -> _T:
        """Call a store method and await it under the timeout.

        Returns ``_FAILED`` instead of raising on any error.
        """
        try:
            return await asyncio.wait_for(fn(*args), timeout=self._timeout_s)
        except asyncio.TimeoutError:
            err = LookupTimeoutError(f"{what} exceeded {self._timeout_s}s", **context)
            logger.error("Access lookup failed: %s", err.message, extra={"error_code": err.code, **context})
            return _FAILED
        except Exception as e:
            logger.error(
                "Access lookup failed: %s: %s",
                what,
                e,
                extra={"error_code": getattr(e, "code", "LOOKUP_ERROR"), **context},
            )
            return _FAILED

    async def has_client_access(self, role: Role | str | None, user_id: Any, client_id: Any) -> bool:
        """Check if a user may access a client record.

        ``super_admin`` / ``partner`` pass without a lookup. Every other role
        needs at least one case linking the user to the client.
        """
        parsed = Role.parse(role)
        if parsed is None:
            return False
        if parsed in CASE_BYPASS_ROLES:
            return True

        uid = _clean_id(user_id)
        cid = _clean_id(client_id)
        if uid is None or cid is None:
            return False

        count = await self._read(
            "client linkage count",
            self._store.count_client_cases,
            cid,
            uid,
            client_id=cid,
            user_id=uid,
        )
        if count is _FAILED or count is None:
            return False
        try:
            return int(count) > 0
        except (TypeError, ValueError):
            logger.error("Access lookup returned a non-numeric count for client %s: %r", cid, count)
            return False

    async def has_case_access(self, role: Role | str | None, user_id: Any, case_id: Any) -> bool:
        """Check if a user is the assignee recorded on a case.

        ``super_admin`` / ``partner`` pass without a lookup. Every other role
        must match the case row's ``assigned_to``; a missing row is a denial.
        """
        parsed = Role.parse(role)
        if parsed is None:
            return False
        if parsed in CASE_BYPASS_ROLES:
            return True

        uid = _clean_id(user_id)
        cid = _clean_id(case_id)
        if uid is None or cid is None:
            return False

        raw = await self._read(
            "case access row",
            self._store.get_case_access_row,
            cid,
            case_id=cid,
            user_id=uid,
        )
        if raw is _FAILED:
            return False
        row = coerce_snapshot(CaseAccessRow, raw)
        if row is None:
            return False
        return row.assigned_to == uid

    async def can_access_case_by_id(self, role: Role | str | None, user_id: Any, case_id: Any) -> bool:
        """Fetch a case's assignment and apply ``can_access_case`` to it.

        ``super_admin`` / ``partner`` pass without a lookup. An unknown case
        is a denial.
        """
        parsed = Role.parse(role)
        if parsed is None:
            return False
        if parsed in CASE_BYPASS_ROLES:
            return True

        cid = _clean_id(case_id)
        if cid is None or _clean_id(user_id) is None:
            return False

        raw = await self._read(
            "case assignment",
            self._store.get_case_assignment,
            cid,
            case_id=cid,
        )
        if raw is _FAILED:
            return False
        assignment = coerce_snapshot(CaseAssignment, raw)
        if assignment is None:
            return False
        return can_access_case(parsed, user_id, assignment)


def _one_off_checker(store: CaseAccessStore, timeout_s: float | None) -> Optional[CaseAccessChecker]:
    """Build a checker for a single call, or None if the settings are unusable."""
    try:
        return CaseAccessChecker(store, timeout_s=timeout_s)
    except (ConfigurationError, TypeError, ValueError) as e:
        logger.error("Access lookup not attempted, invalid settings: %s", e)
        return None


async def has_client_access(
    store: CaseAccessStore,
    role: Role | str | None,
    user_id: Any,
    client_id: Any,
    *,
    timeout_s: float | None = None,
) -> bool:
    """One-off form of :meth:`CaseAccessChecker.has_client_access`.

    Unusable timeout settings are a denial.
    """
    checker = _one_off_checker(store, timeout_s)
    if checker is None:
        return False
    return await checker.has_client_access(role, user_id, client_id)


async def has_case_access(
    store: CaseAccessStore,
    role: Role | str | None,
    user_id: Any,
    case_id: Any,
    *,
    timeout_s: float | None = None,
) -> bool:
    """One-off form of :meth:`CaseAccessChecker.has_case_access`.

    Unusable timeout settings are a denial.
    """
    checker = _one_off_checker(store, timeout_s)
    if checker is None:
        return False
    return await checker.has_case_access(role, user_id, case_id)


__all__ = [
    "CaseAccessChecker",
    "has_case_access",
    "has_client_access",
]
