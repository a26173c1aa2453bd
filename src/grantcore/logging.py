"""Logging utilities for grantcore.

This module provides:
- Logging configuration from GrantConfig
- Safe preview utilities for match contexts (which may hold credentials)
- Secret redaction
- Structured logging with grant provenance (target / match)
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import GrantConfig, LogLevel


# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)',
    r'(?i)(?:sk-|pk-)[a-zA-Z0-9]{32,}',
    r'[a-f0-9]{32,}',  # Long hex strings (could be hashes or keys)
]

_RESERVED_RECORD_KEYS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "target", "match",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Converts any value to a single-line string, normalizes whitespace and
    truncates to ``limit`` characters. Dicts and lists are rendered as JSON.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated, single-line string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
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
    """Redact secret patterns (keys, tokens, passwords, bearer credentials) from text."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Combine safe_preview() and redact_secrets().

    Use this whenever a match context or object under check ends up in a log line.
    """
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class GrantLogFormatter(logging.Formatter):
    """Formatter that adds grant provenance and optionally emits JSON.

    ``target`` and ``match`` are picked up from the record when a
    GrantLoggerAdapter (or ``extra=``) supplied them. Extra fields are
    previewed and redacted.
    """

    def __init__(
        self,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        target = getattr(record, "target", None)
        match = getattr(record, "match", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if target is not None:
            log_data["target"] = str(target)
        if match is not None:
            log_data["match"] = safe_log_value(match, redact=self.redact_secrets)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if target is not None:
            parts.append(f"target={log_data['target']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class GrantLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps every record with a grant's target and match.

    Usage:
        logger = get_grant_logger(__name__, target="user", match={"id": 7})
        logger.debug("denied %s", key)
    """

    def __init__(
        self,
        logger: logging.Logger,
        target: Optional[str] = None,
        match: Any = None,
    ):
        super().__init__(logger, {})
        self.target = target
        self.match = match

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        target = kwargs.pop("target", self.target)
        match = kwargs.pop("match", self.match)

        extra = dict(kwargs.get("extra") or {})
        if target is not None:
            extra["target"] = target
        if match is not None:
            extra["match"] = match
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[GrantConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure the root logger from a GrantConfig.

    Args:
        config: GrantConfig instance (if None, loads from environment)
        json_format: Force JSON on/off; defaults to ``config.log_json``
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_grant_config_from_env
        config = load_grant_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)
    if json_format is None:
        json_format = config.log_json

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        GrantLogFormatter(json_format=json_format, redact_secrets=redact_secrets)
    )
    root_logger.addHandler(console_handler)


def get_grant_logger(
    name: str,
    target: Optional[str] = None,
    match: Any = None,
) -> GrantLoggerAdapter:
    """Get a logger adapter bound to a grant's provenance.

    Args:
        name: Logger name (typically __name__)
        target: Target type the grant was derived for
        match: Match context that produced the grant

    Returns:
        GrantLoggerAdapter instance
    """
    logger = logging.getLogger(name)
    return GrantLoggerAdapter(logger, target=target, match=match)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "GrantLogFormatter",
    "GrantLoggerAdapter",
    "setup_logging",
    "get_grant_logger",
]
