"""Mask variants.

A mask describes, for every field path of some target object, whether access
is allowed. Every position in a mask is exactly one of:

- ``Allow``        everything at and below this path is allowed
- ``Deny``         nothing is allowed
- ``FieldMap``     per-field child masks plus an optional wildcard child
- ``NumericRange`` numbers within an inclusive ``[min, max]`` are allowed

Masks are immutable by convention. ``ALLOW`` and ``DENY`` are the only
instances of their classes that the rest of the package creates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

PATH_SEPARATOR = "."
WILDCARD_KEY = "_"


@dataclass(frozen=True)
class Allow:
    """Full access to a subtree."""

    def __repr__(self) -> str:
        return "ALLOW"


@dataclass(frozen=True)
class Deny:
    """No access."""

    def __repr__(self) -> str:
        return "DENY"


ALLOW = Allow()
DENY = Deny()


@dataclass(frozen=True)
class NumericRange:
    """Numeric leaf: allows numbers in ``[min, max]``.

    Unbounded ends are stored as ``-inf`` / ``+inf``.
    """

    min: float = -math.inf
    max: float = math.inf

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    @property
    def unbounded_min(self) -> bool:
        return self.min == -math.inf

    @property
    def unbounded_max(self) -> bool:
        return self.max == math.inf


@dataclass(frozen=True)
class FieldMap:
    """Per-field child masks.

    ``wildcard`` applies to every field name that has no explicit entry.
    ``None`` means there is no wildcard, which is not the same as a
    ``DENY`` wildcard when two maps are combined.
    """

    entries: Mapping[str, "Mask"] = field(default_factory=dict)
    wildcard: Optional["Mask"] = None

    def child(self, key: str) -> "Mask":
        """Mask for ``key``: explicit entry first, then the wildcard, then deny."""
        if key in self.entries:
            return self.entries[key]
        if self.wildcard is not None:
            return self.wildcard
        return DENY

    @property
    def is_empty(self) -> bool:
        return not self.entries and self.wildcard is None


Mask = Union[Allow, Deny, FieldMap, NumericRange]

MASK_TYPES = (Allow, Deny, FieldMap, NumericRange)


def is_mask(value: Any) -> bool:
    return isinstance(value, MASK_TYPES)


def split_path(path: str) -> list[str]:
    """Split a dotted path into segments. The empty path has no segments."""
    if not path:
        return []
    return path.split(PATH_SEPARATOR)


def join_path(prefix: str, key: str) -> str:
    if not prefix:
        return key
    return f"{prefix}{PATH_SEPARATOR}{key}"


__all__ = [
    "ALLOW",
    "DENY",
    "MASK_TYPES",
    "PATH_SEPARATOR",
    "WILDCARD_KEY",
    "Allow",
    "Deny",
    "FieldMap",
    "Mask",
    "NumericRange",
    "is_mask",
    "join_path",
    "split_path",
]
