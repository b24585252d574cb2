from __future__ import annotations

from typing import List, Optional, Tuple

from agetags.core.certification import normalize_region


def parse_priority(
    csv: Optional[str], home_region: Optional[str] = None
) -> Tuple[str, ...]:
    """Turn ``"us, fr,US"`` into ``("US", "FR")`` with the home region first.

    Tokens that are not 2-3 characters long are dropped silently.
    """
    regions: List[str] = []
    for token in (csv or "").split(","):
        code = token.strip().upper()
        if not 2 <= len(code) <= 3:
            continue
        if code not in regions:
            regions.append(code)

    home = normalize_region(home_region)
    if home:
        if home in regions:
            regions.remove(home)
        regions.insert(0, home)
    return tuple(regions)
