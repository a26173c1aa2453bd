"""Union of masks.

Several grants on the same target must behave as "authorized if any one of
them authorizes it". ``union()`` merges two masks structurally:

- ``ALLOW`` absorbs everything, ``DENY`` contributes nothing.
- Two numeric leaves widen to the smallest range covering both.
- A numeric leaf against a field map cannot be merged and becomes ``DENY``.
- Field maps merge per key. A key listed on one side only is merged with the
  other side's wildcard, since that wildcard already granted it implicitly.
  The wildcards themselves are merged last.

Masks are never modified; every merged level is a new ``FieldMap``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .model import ALLOW, DENY, Allow, Deny, FieldMap, Mask, NumericRange
from .parse import parse_mask, to_raw

logger = logging.getLogger(__name__)


def _merge_optional(left: Optional[Mask], right: Optional[Mask]) -> Optional[Mask]:
    if left is None:
        return right
    if right is None:
        return left
    return union(left, right)


def _merge_field_maps(result: FieldMap, new: FieldMap) -> Mask:
    entries: dict[str, Mask] = {}

    for key, child in result.entries.items():
        if key in new.entries:
            entries[key] = union(child, new.entries[key])
        elif new.wildcard is not None:
            entries[key] = union(child, new.wildcard)
        else:
            entries[key] = child

    for key, child in new.entries.items():
        if key in result.entries:
            continue
        if result.wildcard is not None:
            entries[key] = union(child, result.wildcard)
        else:
            entries[key] = child

    merged = FieldMap(entries, _merge_optional(result.wildcard, new.wildcard))
    if merged.is_empty:
        return DENY
    return merged


def union(result: Mask, new: Mask) -> Mask:
    """Mask allowing everything either ``result`` or ``new`` allows."""
    if isinstance(result, Allow) or isinstance(new, Allow):
        return ALLOW
    if isinstance(new, Deny):
        return result
    if isinstance(result, Deny):
        if isinstance(new, FieldMap) and new.is_empty:
            return DENY
        return new

    if isinstance(result, NumericRange) and isinstance(new, NumericRange):
        return NumericRange(min(result.min, new.min), max(result.max, new.max))
    if isinstance(result, NumericRange) or isinstance(new, NumericRange):
        logger.debug("Cannot merge numeric grant with field mask; denying %r | %r", result, new)
        return DENY

    return _merge_field_maps(result, new)


def combine_masks(masks: Iterable[Mask]) -> Mask:
    """Fold ``union()`` over ``masks`` left to right, starting from ``DENY``."""
    result: Mask = DENY
    for mask in masks:
        result = union(result, mask)
        if isinstance(result, Allow):
            break
    return result


def combine(*raw_masks: Any, strict: bool = False) -> Any:
    """Combine raw grant data and return raw grant data.

    Returns ``True``, ``False`` or a freshly allocated dict; the inputs are
    left untouched.

    Example::

        combine({"foo": True}, {"_": {"bar": True}})
        # {"foo": True, "_": {"bar": True}}
    """
    return to_raw(combine_masks(parse_mask(raw, strict) for raw in raw_masks))


__all__ = [
    "combine",
    "combine_masks",
    "union",
]
