"""Configuration for the lexaccess authorization engine.

Pydantic-validated settings shared by the evaluators, the lookup checks and
the gRPC enforcement layer. Settings come from ``load_access_config_from_env()``;
no other module reads ``os.environ``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnforcementMode(str, Enum):
    """Three-state enforcement toggle for route-level guards.

    - ``off``     — no checks, only caller-identity logging.
    - ``warn``    — evaluate requirements, log denials as WARNING, allow through.
    - ``enforce`` — evaluate requirements, deny on failure (production).
    """

    OFF = "off"
    WARN = "warn"
    ENFORCE = "enforce"


class AccessConfig(BaseModel):
    """Settings for lexaccess.

    Resource lookups are always fail-closed; ``lookup_timeout_s`` only bounds
    how long a slow store may hold a check before it resolves to deny.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as logger identification",
    )

    # Resource lookups
    lookup_timeout_s: float = Field(
        default=2.0,
        description="Upper bound in seconds for a single persistence lookup",
    )

    # Enforcement
    enforcement: EnforcementMode = Field(
        default=EnforcementMode.ENFORCE,
        description="Route-level enforcement mode: off | warn | enforce",
    )
    log_allowed: bool = Field(
        default=False,
        description="Log allowed requests at INFO instead of DEBUG",
    )

    @field_validator("lookup_timeout_s")
    @classmethod
    def validate_lookup_timeout(cls, v: float) -> float:
        """Reject non-positive timeouts."""
        if v <= 0:
            raise ValueError("lookup_timeout_s must be greater than zero")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("enforcement", mode="before")
    @classmethod
    def validate_enforcement(cls, v: str | EnforcementMode) -> EnforcementMode:
        """Convert string to EnforcementMode enum."""
        if isinstance(v, EnforcementMode):
            return v
        if isinstance(v, str):
            try:
                return EnforcementMode(v.strip().lower())
            except ValueError:
                raise ValueError(
                    f"Invalid enforcement mode: {v}. Must be one of {[e.value for e in EnforcementMode]}"
                )
        raise ValueError(f"Enforcement mode must be string or EnforcementMode enum, got {type(v)}")

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_access_config_from_env() -> AccessConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for logger identification
    - ACCESS_LOOKUP_TIMEOUT_S: Timeout for persistence lookups (default: 2.0)
    - ACCESS_ENFORCEMENT: off | warn | enforce (default: enforce)
    - ACCESS_LOG_ALLOWED: Log allowed requests (true/false, default: false)

    Returns:
        AccessConfig instance with values from environment or defaults.

    Raises:
        ConfigurationError: A variable is set to a value that cannot be parsed
            or fails validation.
    """
    import os

    try:
        return AccessConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
            service_name=os.getenv("SERVICE_NAME"),
            lookup_timeout_s=float(os.getenv("ACCESS_LOOKUP_TIMEOUT_S", "2.0")),
            enforcement=os.getenv("ACCESS_ENFORCEMENT", "enforce"),
            log_allowed=os.getenv("ACCESS_LOG_ALLOWED", "false").lower() in _TRUTHY,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid access configuration in environment: {e}") from e


__all__ = [
    "AccessConfig",
    "EnforcementMode",
    "LogLevel",
    "load_access_config_from_env",
]
