"""Snapshot models for access decisions.

These are Pydantic models for the read-only views of records owned by the
case, document and client services, plus the calling principal.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import Role

_M = TypeVar("_M", bound=BaseModel)


def _id_or_none(v: Any) -> Optional[str]:
    """Normalize identifiers to str; empty values become None."""
    if v is None:
        return None
    s = str(v).strip()
    return s or None


class CaseAssignment(BaseModel):
    """Who is assigned to a case."""

    model_config = {"frozen": True, "extra": "ignore"}

    case_id: Optional[str] = None
    assigned_partner: Optional[str] = None
    assigned_associates: tuple[str, ...] = ()
    client_id: Optional[str] = None

    @field_validator("case_id", "assigned_partner", "client_id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return _id_or_none(v)

    @field_validator("assigned_associates", mode="before")
    @classmethod
    def _normalize_associates(cls, v: Any) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, (str, bytes, Mapping)) or not isinstance(v, Iterable):
            raise ValueError("assigned_associates must be a sequence of ids")
        return tuple(i for i in (_id_or_none(x) for x in v) if i is not None)

    def involves(self, user_id: str) -> bool:
        """True if ``user_id`` is the assigned partner or an assigned associate."""
        return user_id == self.assigned_partner or user_id in self.assigned_associates


class DocumentRecord(BaseModel):
    """Ownership and confidentiality of a document."""

    model_config = {"frozen": True, "extra": "ignore"}

    document_id: Optional[str] = None
    case_id: Optional[str] = None
    uploaded_by: Optional[str] = None
    is_confidential: bool = False

    @field_validator("document_id", "case_id", "uploaded_by", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return _id_or_none(v)


class CaseAccessRow(BaseModel):
    """The single row compared against the requesting user in ``has_case_access``."""

    model_config = {"frozen": True, "extra": "ignore"}

    case_id: Optional[str] = None
    assigned_to: Optional[str] = None

    @field_validator("case_id", "assigned_to", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return _id_or_none(v)


class Principal(BaseModel):
    """The authenticated caller, as established by the authentication layer."""

    model_config = {"frozen": True}

    user_id: str = Field(min_length=1)
    role: Role
    email: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, v: Any) -> Role:
        role = Role.parse(v)
        if role is None:
            raise ValueError(f"Unknown role: {v!r}")
        return role


def coerce_snapshot(model: type[_M], data: Any) -> _M | None:
    """Return ``data`` as ``model``, or None when it is missing or invalid.

    Accepts an instance of ``model`` or a mapping of its fields. Never raises.
    """
    if data is None:
        return None
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except (ValidationError, TypeError, ValueError):
        return None


__all__ = [
    "CaseAccessRow",
    "CaseAssignment",
    "DocumentRecord",
    "Principal",
    "coerce_snapshot",
]
