"""Grant: a target/match-bound view over a mask.

A Grant decides whether a caller may access fields, objects or numbers of
one resolved target. ``target`` and ``match``
are provenance only: they end up in errors and logs, never in decisions.

Every check exists in two forms:

- ``evaluate_*`` returns a :class:`CheckResult`.
- ``check*`` raises through the grant's :class:`ErrorReporter` on denial.

Misuse (an object check against a scalar, a key that is neither a string,
a sequence nor a mapping) is reported as an invalid argument by both forms.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Iterable, Optional

from .interfaces import ErrorReporter, RaisingErrorReporter
from .logging import get_grant_logger
from .masks import (
    Allow,
    Mask,
    NumericRange,
    check_path,
    combine,
    combine_masks,
    masked_out_fields,
    normalize_numbers,
    parse_mask,
    path_reachable,
    resolve_path,
    to_raw,
)

_INVALID_KEY_MESSAGE = "Supplied invalid key to permission checking function"


@dataclass
class CheckResult:
    """Outcome of an authorization check."""

    allowed: bool = True
    reason: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def denied(self) -> bool:
        return not self.allowed

    @property
    def grant_key(self) -> Optional[str]:
        return self.details.get("grant_key")

    def raise_for_denial(self, reporter: ErrorReporter) -> bool:
        """Return True when allowed, otherwise hand the denial to ``reporter``."""
        if self.allowed:
            return True
        reporter.access_denied(self.reason, **self.details)
        return False


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and not math.isnan(value)


def _is_path_sequence(keys: Any) -> bool:
    return isinstance(keys, Sequence) and not isinstance(keys, (str, bytes))


def _valid_keys(keys: Any) -> bool:
    if isinstance(keys, str):
        return True
    if isinstance(keys, Mapping):
        return all(isinstance(key, str) for key in keys)
    if _is_path_sequence(keys):
        return all(_valid_keys(item) for item in keys)
    return False


class Grant:
    """Permissions on one target, as produced for a specific match.

    Args:
        mask: Raw grant data or a Mask.
        target: Target type this grant was derived for.
        match: Match context that produced it.
        reporter: Raises on denial; defaults to RaisingErrorReporter.
        strict: Reject unexpected scalars when parsing raw masks.

    Example::

        grant = Grant({"read": True, "update": {"name": True}}, target="User")
        grant.has("read")                                    # True
        grant.check_mask("update", {"name": "Ada"})          # True
        grant.check_mask("update", {"email": "a@b.c"})       # raises AccessDeniedError
    """

    __slots__ = ("_mask", "_target", "_match", "_reporter", "_strict", "_log")

    def __init__(
        self,
        mask: Any = False,
        target: Optional[str] = None,
        match: Any = None,
        *,
        reporter: Optional[ErrorReporter] = None,
        strict: bool = False,
    ) -> None:
        self._mask: Mask = parse_mask(mask, strict)
        self._target = target
        self._match = match
        self._reporter = reporter or RaisingErrorReporter()
        self._strict = strict
        self._log = get_grant_logger(__name__, target=target, match=match)

    # ── Provenance and data ──────────────────────────────

    @property
    def target(self) -> Optional[str]:
        return self._target

    @property
    def match(self) -> Any:
        return self._match

    @property
    def mask(self) -> Mask:
        return self._mask

    def get_target(self) -> Optional[str]:
        return self._target

    def get_match(self) -> Any:
        return self._match

    def as_object(self) -> Any:
        """Raw grant data for the whole grant."""
        return to_raw(self._mask)

    def get_mask(self, path: str) -> Mask:
        """Mask at a dotted path (the whole mask for ``""``)."""
        return resolve_path(self._mask, path)

    def get(self, path: str) -> Any:
        """Raw grant data at a path: ``True``, ``False`` or a fresh dict."""
        return to_raw(self.get_mask(path))

    # ── Field checks ─────────────────────────────────────

    def _path_denied(self, key: str) -> CheckResult:
        self._log.debug("Access denied for grant key %s", key)
        if self._target:
            return CheckResult(
                allowed=False,
                reason=f"Access denied trying to {key} a target of type {self._target}",
                details={"grant_key": key, "target": self._target, "match": self._match},
            )
        return CheckResult(
            allowed=False,
            reason=f"Access denied trying to {key}",
            details={"grant_key": key},
        )

    def evaluate_path(self, path: str, prefix: str = "") -> CheckResult:
        key = prefix + path
        if check_path(self._mask, key):
            return CheckResult()
        return self._path_denied(key)

    def evaluate_paths(self, paths: Iterable[Any], prefix: str = "") -> CheckResult:
        """Check each item in order; stops at the first denial.

        Items may themselves be paths, sequences or flag mappings.
        """
        for item in paths:
            result = self.evaluate(item, prefix)
            if result.denied:
                return result
        return CheckResult()

    def evaluate_flags(self, flags: Mapping[str, Any], prefix: str = "") -> CheckResult:
        """Check the paths whose flag is truthy; falsy flags are skipped."""
        return self.evaluate_paths((path for path, wanted in flags.items() if wanted), prefix)

    def evaluate(self, keys: Any, prefix: str = "") -> CheckResult:
        """Dispatch on a single path, a sequence of paths or a path -> flag mapping."""
        if isinstance(keys, str):
            return self.evaluate_path(keys, prefix)
        if isinstance(keys, Mapping):
            return self.evaluate_flags(keys, prefix)
        if _is_path_sequence(keys):
            return self.evaluate_paths(keys, prefix)
        self._reporter.invalid_argument(_INVALID_KEY_MESSAGE, key=keys)
        return CheckResult(allowed=False, reason=_INVALID_KEY_MESSAGE, details={"key": keys})

    def has(self, keys: Any, prefix: str = "") -> bool:
        """Like check(), but returns False instead of raising."""
        if not _valid_keys(keys):
            return False
        return self.evaluate(keys, prefix).allowed

    def has_any(self, path: str) -> bool:
        """True when some access exists at or below ``path`` (coarse check)."""
        return path_reachable(self._mask, path)

    def check(self, keys: Any, prefix: str = "") -> bool:
        """Raise unless every requested path is fully granted.

        Args:
            keys: A path, a sequence of paths, or a mapping of path -> flag.
            prefix: Prepended verbatim to every path (e.g. ``"update."``).

        Returns:
            True on success.
        """
        return self.evaluate(keys, prefix).raise_for_denial(self._reporter)

    def check_path(self, path: str, prefix: str = "") -> bool:
        return self.evaluate_path(path, prefix).raise_for_denial(self._reporter)

    def check_paths(self, paths: Iterable[str], prefix: str = "") -> bool:
        return self.evaluate_paths(paths, prefix).raise_for_denial(self._reporter)

    def check_flags(self, flags: Mapping[str, Any], prefix: str = "") -> bool:
        return self.evaluate_flags(flags, prefix).raise_for_denial(self._reporter)

    # ── Object checks ────────────────────────────────────

    def evaluate_object(self, mask: Any, obj: Any) -> CheckResult:
        """Check every field of ``obj`` against a mask.

        ``mask`` is either a path within this grant (e.g. ``"updateMask"``)
        or mask data.
        """
        if isinstance(mask, str):
            mask_path: Optional[str] = mask
            resolved = self.get_mask(mask)
        else:
            mask_path = None
            resolved = parse_mask(mask, self._strict)

        if not isinstance(obj, (Mapping, list, tuple)):
            self._reporter.invalid_argument(
                "Tried to do permissions match against non-object",
                value=obj,
            )
            return CheckResult(allowed=False, reason="Tried to do permissions match against non-object")

        fields = masked_out_fields(resolved, obj)
        if not fields:
            return CheckResult()

        self._log.debug("Field %s masked out by %s", fields[0], mask_path or "mask")
        return CheckResult(
            allowed=False,
            reason=(
                f"Access denied in {mask_path or 'mask'} for objects of type {self._target} "
                f"to access field {fields[0]}"
            ),
            details={
                "grant_key": mask_path,
                "field": fields[0],
                "target": self._target,
                "match": self._match,
            },
        )

    def check_mask(self, mask: Any, obj: Any) -> bool:
        return self.evaluate_object(mask, obj).raise_for_denial(self._reporter)

    # ── Numeric grants ───────────────────────────────────

    def min(self, path: str) -> Optional[float]:
        """Lower bound of a numeric grant; ``-inf`` for full access, None if not numeric."""
        resolved = self.get_mask(path)
        if isinstance(resolved, Allow):
            return -math.inf
        if isinstance(resolved, NumericRange):
            return resolved.min
        return None

    def max(self, path: str) -> Optional[float]:
        """Upper bound of a numeric grant; ``inf`` for full access, None if not numeric."""
        resolved = self.get_mask(path)
        if isinstance(resolved, Allow):
            return math.inf
        if isinstance(resolved, NumericRange):
            return resolved.max
        return None

    def evaluate_number(self, path: str, value: Any) -> CheckResult:
        minimum = self.min(path)
        maximum = self.max(path)
        if minimum is None or maximum is None:
            return CheckResult(
                allowed=False,
                reason="Attempted numeric permission check against non-numeric or missing grant",
                details={"grant_key": path},
            )
        if not _is_number(value):
            return CheckResult(
                allowed=False,
                reason="Attempted numeric permission check with non-numeric input",
                details={"grant_key": path, "value": value},
            )
        if value < minimum:
            return CheckResult(
                allowed=False,
                reason="Attempted operation numeric value is smaller than grant minimum",
                details={
                    "grant_key": path,
                    "value": value,
                    "minimum": minimum,
                    "target": self._target,
                    "match": self._match,
                },
            )
        if value > maximum:
            return CheckResult(
                allowed=False,
                reason="Attempted operation numeric value is greater than grant maximum",
                details={
                    "grant_key": path,
                    "value": value,
                    "maximum": maximum,
                    "target": self._target,
                    "match": self._match,
                },
            )
        return CheckResult()

    def check_number(self, path: str, value: Any) -> bool:
        return self.evaluate_number(path, value).raise_for_denial(self._reporter)

    # ── Sub-grants ───────────────────────────────────────

    def _derive(self, mask: Mask) -> "Grant":
        return Grant(
            mask,
            self._target,
            self._match,
            reporter=self._reporter,
            strict=self._strict,
        )

    def _mask_for(self, path_or_mask: Any) -> Mask:
        if isinstance(path_or_mask, str):
            return self.get_mask(path_or_mask)
        return parse_mask(path_or_mask, self._strict)

    def create_subgrant_from_path(self, path_or_mask: Any) -> "Grant":
        """New grant over the mask at a path (or over the given mask data)."""
        return self._derive(self._mask_for(path_or_mask))

    def create_subgrant_from_paths(self, paths_or_masks: Iterable[Any]) -> "Grant":
        """Like create_subgrant_from_path(), combining all the masks into one."""
        return self._derive(combine_masks(self._mask_for(item) for item in paths_or_masks))

    # ── Raw data helpers ─────────────────────────────────

    @staticmethod
    def combine_grants(*raw_masks: Any) -> Any:
        """Union of raw grant data, returned as raw grant data."""
        return combine(*raw_masks)

    @staticmethod
    def grant_numbers_to_objects(raw: Any) -> Any:
        return normalize_numbers(raw)

    def __repr__(self) -> str:
        return f"Grant(target={self._target!r}, mask={self._mask!r})"


__all__ = ["CheckResult", "Grant"]
