"""Configuration for grantcore.

Pydantic-validated settings shared by the grant ingestion path and the
logging setup. Environment variables are read in exactly one place,
``load_grant_config_from_env()``; everything else takes a GrantConfig.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class GrantConfig(BaseModel):
    """Settings for grant ingestion and logging.

    Environment variables:
        LOG_LEVEL: logging level
        LOG_JSON: JSON log lines instead of plain text
        GRANT_STRICT_MASKS: reject unexpected scalars in raw masks
        GRANT_NORMALIZE_NUMBERS: turn bare numeric leaves into range leaves
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

    # Mask ingestion
    strict_masks: bool = Field(
        default=False,
        description=(
            "Raise MaskFormatError for scalars other than booleans/None in raw masks. "
            "When off they are read as deny."
        ),
    )
    normalize_numbers: bool = Field(
        default=True,
        description="Convert bare numeric leaves to exact numeric-range grants when building grants",
    )

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

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_grant_config_from_env() -> GrantConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - GRANT_STRICT_MASKS: Reject unexpected mask scalars (true/false, default: false)
    - GRANT_NORMALIZE_NUMBERS: Normalize bare numbers (true/false, default: true)

    Returns:
        GrantConfig instance with values from environment or defaults.
    """
    import os

    truthy = ("true", "1", "yes", "on")

    return GrantConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in truthy,
        strict_masks=os.getenv("GRANT_STRICT_MASKS", "false").lower() in truthy,
        normalize_numbers=os.getenv("GRANT_NORMALIZE_NUMBERS", "true").lower() in truthy,
    )


__all__ = [
    "GrantConfig",
    "LogLevel",
    "load_grant_config_from_env",
]
