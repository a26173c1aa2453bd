"""Path lookup over masks.

Provides:
- ``resolve_path()``: the mask that applies at a dotted path.
- ``check_path()``: full access to a scalar field at a path.
- ``path_reachable()``: some access exists at or below a path.
- ``masked_out_fields()``: fields of a nested value a mask does not cover.
"""

from __future__ import annotations

from collections.abc import Mapping
from numbers import Real
from typing import Any, Iterator

from .model import DENY, Allow, Deny, FieldMap, Mask, NumericRange, join_path, split_path


def child_mask(mask: Mask, key: str) -> Mask:
    """One resolution step.

    ``Allow`` covers every descendant. A numeric leaf has no fields.
    """
    if isinstance(mask, Allow):
        return mask
    if isinstance(mask, FieldMap):
        return mask.child(key)
    return DENY


def resolve_path(mask: Mask, path: str) -> Mask:
    """Resolve ``path`` within ``mask``. The empty path resolves to ``mask`` itself."""
    for segment in split_path(path):
        if isinstance(mask, (Allow, Deny)):
            break
        mask = child_mask(mask, segment)
    return mask


def check_path(mask: Mask, path: str) -> bool:
    """True when the mask at ``path`` grants full access.

    A structured mask at the path is not enough to read or write the field
    as a scalar.
    """
    return isinstance(resolve_path(mask, path), Allow)


def path_reachable(mask: Mask, path: str) -> bool:
    """True when anything at or below ``path`` is allowed."""
    resolved = resolve_path(mask, path)
    if isinstance(resolved, FieldMap):
        return not resolved.is_empty
    return not isinstance(resolved, Deny)


def _children(value: Any) -> Iterator[tuple[str, Any]] | None:
    if isinstance(value, Mapping):
        return ((str(key), child) for key, child in value.items())
    if isinstance(value, (list, tuple)):
        return ((str(index), child) for index, child in enumerate(value))
    return None


def _scalar_allowed(mask: Mask, value: Any) -> bool:
    if isinstance(mask, Allow):
        return True
    if isinstance(mask, NumericRange):
        return isinstance(value, Real) and not isinstance(value, bool) and mask.contains(value)
    return False


def _collect(mask: Mask, value: Any, path: str, out: list[str]) -> None:
    if isinstance(mask, Allow):
        return
    children = _children(value)
    if children is None:
        if not _scalar_allowed(mask, value):
            out.append(path)
        return
    if not isinstance(mask, FieldMap):
        # Denied or numeric position holding a container, empty or not
        out.append(path)
        return
    _collect_children(mask, children, path, out)


def _collect_children(mask: Mask, children: Iterator[tuple[str, Any]], path: str, out: list[str]) -> None:
    for key, child in children:
        _collect(child_mask(mask, key), child, join_path(path, key), out)


def masked_out_fields(mask: Mask, obj: Any) -> list[str]:
    """List the field paths in ``obj`` that ``mask`` does not cover.

    Dicts and lists are walked recursively; list indices resolve through the
    wildcard. A field the mask denies is reported at its own path even when
    it holds a container, empty or not. The top-level object itself is never
    reported, so an empty object always passes. Paths come back in iteration
    order, so the first entry is the first offending field.

    Example::

        mask = parse_mask({"name": True, "tags": [True]})
        masked_out_fields(mask, {"name": "x", "tags": ["a"], "email": "y"})  # ["email"]
        masked_out_fields(mask, {"email": {}})                                 # ["email"]
    """
    out: list[str] = []
    children = _children(obj)
    if children is None or isinstance(mask, Allow):
        _collect(mask, obj, "", out)
    else:
        _collect_children(mask, children, "", out)
    return out


__all__ = [
    "check_path",
    "child_mask",
    "masked_out_fields",
    "path_reachable",
    "resolve_path",
]
