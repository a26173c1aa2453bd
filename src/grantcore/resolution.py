"""Building a single Grant from whatever a GrantResolver returns.

A principal may hold several grants on the same target; they are combined so
that the result authorizes anything any one of them authorizes.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .config import GrantConfig
from .grant import Grant
from .interfaces import ErrorReporter, GrantResolver
from .masks import combine_masks, normalize_numbers, parse_mask

logger = logging.getLogger(__name__)


def build_grant(
    resolver: GrantResolver,
    config: Any,
    target: str,
    match: Any = None,
    *,
    reporter: Optional[ErrorReporter] = None,
    settings: Optional[GrantConfig] = None,
) -> Grant:
    """Resolve, normalize and combine grants for ``target`` into one Grant.

    Args:
        resolver: Source of raw grant data.
        config: Principal permission configuration, passed through to ``resolver``.
        target: Target type being accessed.
        match: Match context, passed through and kept as provenance.
        reporter: Error reporter for the resulting grant.
        settings: Ingestion settings (numeric normalization, strictness).

    Returns:
        A Grant; it denies everything when no grants apply.

    Raises:
        MaskFormatError: a resolved grant is malformed.
    """
    settings = settings or GrantConfig()
    raw_grants = list(resolver.resolve_grants(config, target, match))
    logger.debug("Resolved %d grant(s) for target %s", len(raw_grants), target)

    if settings.normalize_numbers:
        raw_grants = [normalize_numbers(raw) for raw in raw_grants]

    mask = combine_masks(parse_mask(raw, settings.strict_masks) for raw in raw_grants)
    return Grant(
        mask,
        target,
        match,
        reporter=reporter,
        strict=settings.strict_masks,
    )


__all__ = ["build_grant"]
