from abc import ABC, abstractmethod
from typing import Optional

from .permissions.models import CaseAccessRow, CaseAssignment


class CaseAccessStore(ABC):
    """Read side of the persistence collaborator used by lookup-backed checks.

    Implementations live with the case/client services. They may raise
    (``ResourceLookupError`` is the documented type); callers in
    ``lexaccess.permissions.lookups`` convert any failure into a denial.
    """

    @abstractmethod
    async def get_case_assignment(self, case_id: str) -> Optional[CaseAssignment]:
        """Assigned partner, associates and client of a case, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    async def count_client_cases(self, client_id: str, user_id: str) -> int:
        """Number of cases linking ``user_id`` to ``client_id``."""
        raise NotImplementedError

    @abstractmethod
    async def get_case_access_row(self, case_id: str) -> Optional[CaseAccessRow]:
        """The assignment row of a case, or None if not found."""
        raise NotImplementedError


__all__ = ["CaseAccessStore"]
