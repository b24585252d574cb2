from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

from agetags.core.certification import (
    ContentKind,
    is_unknown_certification,
    normalize_certification,
    normalize_region,
    parse_content_kind,
)

MIN_AGE = 0
MAX_AGE = 21

# US TV tokens that show up without the "TV-" prefix, whatever the region.
_TV_ALIASES = {
    "Y": 0,
    "Y7": 7,
    "MA": 17,
}

_AU = {"G": 0, "PG": 10, "M": 15, "MA15+": 15, "R18+": 18}
_BR = {"L": 0, "10": 10, "12": 12, "14": 14, "16": 16, "18": 18}
_CA = {"G": 0, "PG": 10, "14A": 14, "18A": 18, "R": 18}
_DE = {
    "0": 0,
    "6": 6,
    "12": 12,
    "16": 16,
    "18": 18,
    "FSK 0": 0,
    "FSK 6": 6,
    "FSK 12": 12,
    "FSK 16": 16,
    "FSK 18": 18,
}
_DK = {"A": 0, "7": 7, "11": 11, "15": 15, "17": 17, "18": 18}
_ES = {
    "A": 0,
    "APTA": 0,
    "TP": 0,
    "7": 7,
    "7I": 7,
    "12": 12,
    "16": 16,
    "18": 18,
}
_FI = {"S": 0, "7": 7, "12": 12, "16": 16, "18": 18}
# 14 is a historic CNC rating.
_FR = {
    "U": 0,
    "TP": 0,
    "6": 6,
    "7": 7,
    "10": 10,
    "12": 12,
    "13": 13,
    "14": 14,
    "15": 15,
    "16": 16,
    "18": 18,
}
_GB = {"U": 0, "PG": 10, "12": 12, "12A": 12, "15": 15, "18": 18, "R18": 18}
_IN = {"U": 0, "UA": 12, "A": 18}
_IT = {"T": 0, "VM12": 12, "VM14": 14, "VM18": 18}
_JP = {"G": 0, "PG12": 12, "R15+": 15, "R18+": 18}
_KR = {"ALL": 0, "7": 7, "12": 12, "15": 15, "19": 18}
_MX = {"A": 0, "AA": 0, "B": 12, "B15": 15, "C": 18, "D": 18}
_NL = {"AL": 0, "6": 6, "9": 9, "12": 12, "16": 16}
_NO = {"A": 0, "6": 6, "9": 9, "12": 12, "15": 15, "18": 18}
_PT = {"T": 0, "M/6": 6, "M/12": 12, "M/14": 14, "M/16": 16, "M/18": 18}
_RU = {"0+": 0, "6+": 6, "12+": 12, "16+": 16, "18+": 18}
_SE = {"BTL": 0, "7": 7, "11": 11, "15": 15, "18": 18}
_US_MOVIE = {"G": 0, "PG": 10, "PG-13": 13, "13": 13, "R": 17, "NC-17": 18}
_US_TV = {
    "TV-Y": 0,
    "TV-Y7": 7,
    "TV-G": 0,
    "TV-PG": 10,
    "TV-14": 14,
    "TV-MA": 17,
}

_SHARED = {
    "FR": _FR,
    "GB": _GB,
    "DE": _DE,
    "CA": _CA,
    "AU": _AU,
    "ES": _ES,
    "IT": _IT,
    "NL": _NL,
    "PT": _PT,
    "BR": _BR,
    "KR": _KR,
    "SE": _SE,
    "RU": _RU,
    "DK": _DK,
    "NO": _NO,
    "FI": _FI,
    "IN": _IN,
    "JP": _JP,
    "MX": _MX,
}


def _freeze(
    regions: Mapping[str, Mapping[str, int]]
) -> Mapping[str, Mapping[str, int]]:
    return MappingProxyType(
        {region: MappingProxyType(dict(table)) for region, table in regions.items()}
    )


TV_ALIASES: Mapping[str, int] = MappingProxyType(dict(_TV_ALIASES))

AGE_TABLES: Mapping[ContentKind, Mapping[str, Mapping[str, int]]] = MappingProxyType(
    {
        ContentKind.MOVIE: _freeze({**_SHARED, "US": _US_MOVIE}),
        ContentKind.TV: _freeze({**_SHARED, "US": _US_TV}),
    }
)

_NON_DIGITS = re.compile(r"\D")


def numeric_age(cert: str) -> Optional[int]:
    """Last-resort reading of a certification as a bare age ("12+", "0+", "19")."""
    digits = _NON_DIGITS.sub("", cert or "")
    if not digits:
        return None
    digits = digits.lstrip("0") or "0"
    if len(digits) > 2:
        return None
    value = int(digits)
    if MIN_AGE <= value <= MAX_AGE:
        return value
    return None


def map_to_age(
    region: Optional[str], cert: Optional[str], kind: ContentKind
) -> Optional[int]:
    """Map one certification issued in ``region`` to a minimum age.

    Returns ``None`` when the rating is blank, explicitly unrated, issued in a
    region without a table, or cannot be read as an age.
    """
    code = normalize_region(region)
    normalized = normalize_certification(cert)
    if not code or not normalized:
        return None
    if is_unknown_certification(normalized):
        return None

    kind = parse_content_kind(kind)
    if kind is None:
        return None
    if kind is ContentKind.TV:
        alias = TV_ALIASES.get(normalized)
        if alias is not None:
            return alias

    table = AGE_TABLES[kind].get(code)
    if table is None:
        return None
    age = table.get(normalized)
    if age is not None:
        return age
    return numeric_age(normalized)
