"""Conversion between raw grant data and mask variants.

Raw grant data is the JSON-like shape permission configuration is written in:
``True`` / ``False`` / ``None``, dicts keyed by field name with ``_`` as the
wildcard, single-element lists for uniform array access, and numeric-range
leaves ``{"grantNumber": True, "min": 0, "max": 10}`` where ``True`` as a
bound means unbounded.
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import MaskFormatError
from .model import ALLOW, DENY, WILDCARD_KEY, Allow, FieldMap, Mask, NumericRange, is_mask

logger = logging.getLogger(__name__)

GRANT_NUMBER_KEY = "grantNumber"


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_range_leaf(raw: Any) -> bool:
    return isinstance(raw, Mapping) and bool(raw.get(GRANT_NUMBER_KEY))


class RawNumericRange(BaseModel):
    """Validated form of a ``grantNumber`` leaf."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    grant_number: bool = Field(alias=GRANT_NUMBER_KEY)
    min: float
    max: float

    @field_validator("min", mode="before")
    @classmethod
    def validate_min(cls, v: Any) -> float:
        if v is True:
            return -math.inf
        if _is_number(v):
            return float(v)
        raise ValueError(f"range minimum must be a number or true, got {v!r}")

    @field_validator("max", mode="before")
    @classmethod
    def validate_max(cls, v: Any) -> float:
        if v is True:
            return math.inf
        if _is_number(v):
            return float(v)
        raise ValueError(f"range maximum must be a number or true, got {v!r}")


def parse_mask(raw: Any, strict: bool = False) -> Mask:
    """Turn raw grant data into a mask.

    Args:
        raw: Raw grant data, or an existing mask (returned as is).
        strict: Raise on scalars other than booleans/None instead of
            reading them as deny.

    Raises:
        MaskFormatError: malformed range leaf, non-string field name, or
            (strict only) an unexpected scalar.
    """
    if is_mask(raw):
        return raw
    if raw is True:
        return ALLOW
    if raw is None or raw is False:
        return DENY

    if isinstance(raw, Mapping):
        if _is_range_leaf(raw):
            return _parse_range(raw)
        entries: dict[str, Mask] = {}
        wildcard = None
        for key, value in raw.items():
            if not isinstance(key, str):
                raise MaskFormatError(f"Mask field names must be strings, got {key!r}", key=key)
            if key == WILDCARD_KEY:
                wildcard = parse_mask(value, strict)
            else:
                entries[key] = parse_mask(value, strict)
        return FieldMap(entries, wildcard)

    if isinstance(raw, (list, tuple)):
        # Array masks authorize every index the same way
        if not raw:
            return DENY
        return FieldMap({}, parse_mask(raw[0], strict))

    if strict:
        raise MaskFormatError(f"Unsupported mask value {raw!r}", value=raw)
    logger.debug("Reading unsupported mask value %r as deny", raw)
    return DENY


def _parse_range(raw: Mapping[str, Any]) -> NumericRange:
    try:
        spec = RawNumericRange.model_validate(dict(raw))
    except ValidationError as e:
        raise MaskFormatError(f"Invalid numeric grant: {e.errors()[0]['msg']}", value=dict(raw)) from e
    return NumericRange(spec.min, spec.max)


def to_raw(mask: Mask) -> Any:
    """Export a mask back to raw grant data.

    Always allocates fresh containers; callers may mutate the result.
    """
    if isinstance(mask, Allow):
        return True
    if isinstance(mask, NumericRange):
        return {
            GRANT_NUMBER_KEY: True,
            "min": True if mask.unbounded_min else mask.min,
            "max": True if mask.unbounded_max else mask.max,
        }
    if isinstance(mask, FieldMap):
        raw = {key: to_raw(child) for key, child in mask.entries.items()}
        if mask.wildcard is not None:
            raw[WILDCARD_KEY] = to_raw(mask.wildcard)
        return raw
    return False


def normalize_numbers(raw: Any) -> Any:
    """Convert bare numeric leaves into exact numeric-range leaves.

    ``{"limit": 5}`` becomes ``{"limit": {"grantNumber": True, "min": 5, "max": 5}}``.
    Existing range leaves and non-numeric values are kept. Every container in
    the result, range leaves included, is a fresh copy.
    """
    if isinstance(raw, Mapping):
        if _is_range_leaf(raw):
            return dict(raw)
        return {key: normalize_numbers(value) for key, value in raw.items()}
    if isinstance(raw, (list, tuple)):
        return [normalize_numbers(value) for value in raw]
    if _is_number(raw):
        return {GRANT_NUMBER_KEY: True, "min": raw, "max": raw}
    return raw


__all__ = [
    "GRANT_NUMBER_KEY",
    "RawNumericRange",
    "normalize_numbers",
    "parse_mask",
    "to_raw",
]
