"""Logging utilities for services that use lexaccess.

This module provides:
- Logging configuration from AccessConfig
- Safe preview utilities for sensitive data
- Secret redaction
- A formatter and logger adapter that stamp caller identity onto records
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import AccessConfig, LogLevel
from .permissions.models import Principal


# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=._-]+)',
    r'(?i)(?:x-api-key|x-auth-token|authorization)\s*[:=]\s*["\']?([^"\'\s]+)',
    r'(?i)(?:-----BEGIN\s+(?:RSA\s+)?(?:PRIVATE\s+)?KEY-----).*?(?:-----END\s+(?:RSA\s+)?(?:PRIVATE\s+)?KEY-----)',
]

# LogRecord attributes that are not user-supplied extras
_RECORD_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "user_id", "role", "request_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a single-line, length-bounded preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"
    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Replace credentials and private keys found in ``text``."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)
    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview a value and optionally redact secrets from it."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class AccessLogFormatter(logging.Formatter):
    """Formatter that includes caller identity and optional JSON output.

    Identity fields (``user_id``, ``role``, ``request_id``) are read from the
    record when present, usually put there by :class:`AccessLoggerAdapter`.
    """

    def __init__(
        self,
        json_format: bool = False,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in ("user_id", "role", "request_id"):
            value = getattr(record, key, None)
            if value:
                log_data[key] = str(value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            log_data["level"],
            log_data["logger"],
        ]
        for key in ("user_id", "role", "request_id"):
            if key in log_data:
                parts.append(f"{key}={log_data[key]}")
        parts.append(f": {log_data['message']}")
        text = " ".join(parts)
        if "exception" in log_data:
            text = f"{text}\n{log_data['exception']}"
        return text


class AccessLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds the caller's identity to every record.

    Usage:
        logger = get_access_logger(__name__, principal=principal, request_id=rid)
        logger.info("Case opened", extra={"case_id": case_id})
    """

    def __init__(
        self,
        logger: logging.Logger,
        principal: Optional[Principal] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.principal = principal
        self.request_id = request_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        principal = kwargs.pop("principal", self.principal)
        request_id = kwargs.pop("request_id", self.request_id)

        extra = dict(kwargs.get("extra") or {})
        if principal is not None:
            extra.setdefault("user_id", principal.user_id)
            extra.setdefault("role", principal.role.value)
        if request_id:
            extra.setdefault("request_id", request_id)
        kwargs["extra"] = extra

        return msg, kwargs


_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
}


def setup_logging(config: Optional[AccessConfig] = None, redact_secrets: bool = True) -> None:
    """Configure the root logger for a service.

    Installs a single stream handler with :class:`AccessLogFormatter`.
    Existing root handlers are removed so repeated calls do not duplicate
    output.

    Args:
        config: AccessConfig instance (if None, loads from environment)
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_access_config_from_env

        config = load_access_config_from_env()

    log_level = _LEVELS.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        AccessLogFormatter(json_format=config.log_json, redact_secrets=redact_secrets)
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_access_logger(
    name: str,
    principal: Optional[Principal] = None,
    request_id: Optional[str] = None,
) -> AccessLoggerAdapter:
    """Get a logger adapter that stamps identity onto records.

    Args:
        name: Logger name (typically __name__)
        principal: Caller to include in all logs
        request_id: Request correlation id to include in all logs

    Example:
        logger = get_access_logger(__name__, principal=principal)
        logger.warning("Denied %s", requirement.describe())
    """
    return AccessLoggerAdapter(logging.getLogger(name), principal=principal, request_id=request_id)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "AccessLogFormatter",
    "AccessLoggerAdapter",
    "setup_logging",
    "get_access_logger",
]
