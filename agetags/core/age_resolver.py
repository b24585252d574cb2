from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from agetags.core.age_tables import map_to_age
from agetags.core.certification import (
    ContentKind,
    normalize_region,
    parse_content_kind,
)

logger = logging.getLogger(__name__)

TvRatings = Mapping[str, Optional[str]]
MovieRatings = Mapping[str, Sequence[Tuple[int, Optional[str]]]]


def _lookup_region(ratings: Mapping[str, Any], region: str) -> Any:
    if region in ratings:
        return ratings[region]
    # Providers are not consistent about the case of region keys.
    for key, value in ratings.items():
        if normalize_region(key) == region:
            return value
    return None


def _release_certifications(entries: Any) -> Iterable[Any]:
    if entries is None or isinstance(entries, (str, bytes)):
        return ()
    try:
        entries = list(entries)
    except TypeError:
        return ()
    certs = []
    for entry in entries:
        if isinstance(entry, (tuple, list)) and len(entry) == 2:
            certs.append(entry[1])
    return certs


def resolve_region_age(
    kind: ContentKind, region: str, ratings: Mapping[str, Any]
) -> Optional[int]:
    value = _lookup_region(ratings, region)
    if value is None:
        return None
    if kind is ContentKind.TV:
        return map_to_age(region, value, kind)
    for cert in _release_certifications(value):
        age = map_to_age(region, cert, kind)
        if age is not None:
            return age
    return None


def resolve_age(
    kind: ContentKind,
    priority: Sequence[str],
    ratings: Optional[Mapping[str, Any]],
) -> Optional[int]:
    """Pick one minimum age for a title from its per-region certifications.

    Regions are tried in ``priority`` order and the first region that yields
    an age wins, even if a later region is stricter. For movies a region may
    carry several ``(release_type, certification)`` pairs; the first one that
    maps, in the order the provider listed them, is that region's age.

    Returns ``None`` when no region in the list produces an age.
    """
    if not ratings or not isinstance(ratings, Mapping):
        return None
    kind = parse_content_kind(kind)
    if kind is None:
        return None
    for raw_region in priority or ():
        region = normalize_region(raw_region)
        if not region:
            continue
        age = resolve_region_age(kind, region, ratings)
        if age is not None:
            logger.debug("Resolved %s age %d from region %s", kind.value, age, region)
            return age
    return None
