from __future__ import annotations

import re
from enum import Enum
from typing import Optional


class ContentKind(str, Enum):
    MOVIE = "movie"
    TV = "tv"


# Regions whose code providers sometimes repeat in front of the rating ("FR-16").
PREFIX_REGIONS = (
    "FR",
    "US",
    "GB",
    "DE",
    "ES",
    "IT",
    "NL",
    "SE",
    "DK",
    "NO",
    "FI",
    "PT",
    "BR",
    "MX",
    "CA",
    "AU",
    "JP",
    "KR",
    "IN",
)

# The separator is mandatory so that "NONE" or "NOT RATED" keep their "NO".
_REGION_PREFIX = re.compile(r"^(?:%s)(?:\s*[-:]\s*|\s+)" % "|".join(PREFIX_REGIONS))

UNKNOWN_CERTIFICATIONS = frozenset({"NR", "UNRATED", "NOT RATED", "N/A", "NONE"})


def normalize_certification(raw: Optional[str]) -> str:
    """Canonicalise a provider certification.

    ``"fr-16"`` -> ``"16"``, ``"us_pg-13"`` -> ``"PG-13"``, ``"tv_14"`` ->
    ``"TV-14"``. Blank or missing input yields ``""``.
    """
    if not isinstance(raw, str):
        return ""
    cleaned = raw.strip()
    if not cleaned:
        return ""
    token = cleaned.upper().replace("_", "-")
    token = _REGION_PREFIX.sub("", token, count=1)
    return token.strip()


def normalize_region(raw: Optional[str]) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip().upper()


def is_unknown_certification(cert: str) -> bool:
    return cert in UNKNOWN_CERTIFICATIONS


def parse_content_kind(raw) -> Optional[ContentKind]:
    try:
        return ContentKind(raw)
    except (TypeError, ValueError):
        return None
