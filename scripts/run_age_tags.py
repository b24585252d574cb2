from __future__ import annotations

import argparse

from agetags.core.certification import ContentKind
from etl.age_tags import TitleRef, run


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Compute age tags for TMDB titles (dry-run)."
    )
    parser.add_argument(
        "--movie",
        type=int,
        action="append",
        default=[],
        help="TMDB movie id; may be repeated.",
    )
    parser.add_argument(
        "--tv",
        type=int,
        action="append",
        default=[],
        help="TMDB TV id; may be repeated.",
    )
    parser.add_argument(
        "--priority",
        help="Comma-separated region codes, defaults to AGE_TAGS_COUNTRY_PRIORITY.",
    )
    parser.add_argument(
        "--home",
        help="Home region, defaults to AGE_TAGS_HOME_REGION.",
    )
    args = parser.parse_args()

    titles = [TitleRef(tmdb_id, ContentKind.MOVIE) for tmdb_id in args.movie]
    titles += [TitleRef(tmdb_id, ContentKind.TV) for tmdb_id in args.tv]
    if not titles:
        parser.error("at least one --movie or --tv id is required")

    for plan in run(titles, csv=args.priority, home_region=args.home):
        print(f"{plan.kind.value}\t{plan.tmdb_id}\t{plan.tag or 'unknown'}")


if __name__ == "__main__":
    main()
