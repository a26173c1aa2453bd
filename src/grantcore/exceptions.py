"""Exception hierarchy for grantcore.

All errors inherit from GrantError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to exception types

Two families matter to callers:
- AccessDeniedError: a well-formed grant does not authorize the request.
- InvalidArgumentError: the checking API was misused (programming error).

Usage:
    from grantcore.exceptions import AccessDeniedError

    try:
        grant.check("update")
    except AccessDeniedError as e:
        log.info("denied %s on %s", e.grant_key, e.target)
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "GrantError",
    "AccessDeniedError",
    "InvalidArgumentError",
    "MaskFormatError",
    "ConfigurationError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class GrantError(Exception):
    """Base exception for grantcore.

    Attributes:
        code: Stable error code string (e.g. "PERMISSION_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class AccessDeniedError(GrantError):
    """A path, field or number check failed against a grant.

    ``details`` carries whatever the decision point knew: ``grant_key``,
    ``target``, ``match`` and, for numeric checks, ``value`` plus the
    violated ``minimum`` or ``maximum``.
    """

    code: str = "PERMISSION_DENIED"
    message: str = "Access denied"

    @property
    def grant_key(self) -> str | None:
        return self.details.get("grant_key")

    @property
    def target(self) -> Any:
        return self.details.get("target")

    @property
    def match(self) -> Any:
        return self.details.get("match")


class InvalidArgumentError(GrantError):
    """The checking API was called with an argument it cannot interpret."""

    code: str = "INVALID_ARGUMENT"
    message: str = "Invalid argument"


class MaskFormatError(InvalidArgumentError):
    """Raw mask data has a shape that cannot be turned into a mask."""

    code: str = "MASK_FORMAT_ERROR"
    message: str = "Invalid mask format"


class ConfigurationError(GrantError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


# ---- Error Registry ---------------------------------------------------------

_E = TypeVar("_E", bound=type[GrantError])


class ErrorRegistry:
    """Registry for mapping error codes to exception types."""

    def __init__(self) -> None:
        self._errors: dict[str, type[GrantError]] = {}

    def register(self, code: str, error_cls: type[GrantError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[GrantError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[GrantError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("QUOTA_DENIED")
        class QuotaDeniedError(AccessDeniedError):
            code = "QUOTA_DENIED"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", GrantError)
error_registry.register("PERMISSION_DENIED", AccessDeniedError)
error_registry.register("INVALID_ARGUMENT", InvalidArgumentError)
error_registry.register("MASK_FORMAT_ERROR", MaskFormatError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
