from abc import ABC, abstractmethod
from typing import Any, NoReturn, Sequence

from .exceptions import AccessDeniedError, InvalidArgumentError


class ErrorReporter(ABC):
    """Turns a failed decision into a raised error.

    Grants call this at every denial point with a message and whatever
    context they have (grant_key, target, match, value, minimum, maximum).
    Implementations must raise.
    """

    @abstractmethod
    def access_denied(self, message: str, **details: Any) -> NoReturn:
        raise NotImplementedError

    @abstractmethod
    def invalid_argument(self, message: str, **details: Any) -> NoReturn:
        raise NotImplementedError


class RaisingErrorReporter(ErrorReporter):
    """Default reporter: raises AccessDeniedError / InvalidArgumentError."""

    def access_denied(self, message: str, **details: Any) -> NoReturn:
        raise AccessDeniedError(message, **details)

    def invalid_argument(self, message: str, **details: Any) -> NoReturn:
        raise InvalidArgumentError(message, **details)


class GrantResolver(ABC):
    """Finds the raw grant data that applies to a target/match pair.

    Matching rules and storage live behind this interface.
    """

    @abstractmethod
    def resolve_grants(self, config: Any, target: str, match: Any) -> Sequence[Any]:
        raise NotImplementedError


__all__ = ["ErrorReporter", "GrantResolver", "RaisingErrorReporter"]
