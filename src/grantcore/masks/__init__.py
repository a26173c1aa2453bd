"""Mask representation and algebra.

Defines:
- Mask variants: Allow, Deny, FieldMap, NumericRange (ALLOW / DENY singletons)
- parse_mask() / to_raw(): raw grant data <-> masks
- normalize_numbers(): bare numbers -> exact numeric grants
- resolve_path(), check_path(), path_reachable(), masked_out_fields()
- union(), combine_masks(), combine(): union of authorizations
"""

from .combine import combine, combine_masks, union
from .model import (
    ALLOW,
    DENY,
    PATH_SEPARATOR,
    WILDCARD_KEY,
    Allow,
    Deny,
    FieldMap,
    Mask,
    NumericRange,
    is_mask,
)
from .parse import GRANT_NUMBER_KEY, normalize_numbers, parse_mask, to_raw
from .resolve import check_path, child_mask, masked_out_fields, path_reachable, resolve_path

__all__ = [
    "ALLOW",
    "DENY",
    "GRANT_NUMBER_KEY",
    "PATH_SEPARATOR",
    "WILDCARD_KEY",
    "Allow",
    "Deny",
    "FieldMap",
    "Mask",
    "NumericRange",
    "check_path",
    "child_mask",
    "combine",
    "combine_masks",
    "is_mask",
    "masked_out_fields",
    "normalize_numbers",
    "parse_mask",
    "path_reachable",
    "resolve_path",
    "to_raw",
    "union",
]
