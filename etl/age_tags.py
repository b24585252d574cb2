from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from agetags.config import (
    COUNTRY_PRIORITY,
    ENABLE_WRITE,
    HOME_REGION,
    TMDB_API_KEY,
    TMDB_BASE_URL,
    TMDB_RATE_PER_SEC,
)
from agetags.core.age_resolver import resolve_age
from agetags.core.certification import ContentKind
from agetags.core.region_priority import parse_priority
from etl.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)
if logger.level == logging.NOTSET:
    logger.setLevel(logging.INFO)
if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    logger.addHandler(_handler)
    logger.propagate = False

BATCH = 20


@dataclass(frozen=True)
class TitleRef:
    tmdb_id: int
    kind: ContentKind
    name: Optional[str] = None


@dataclass(frozen=True)
class AgeTagPlan:
    tmdb_id: int
    kind: ContentKind
    age: Optional[int]
    tag: Optional[str]
    name: Optional[str] = None


def age_tag(age: Optional[int]) -> Optional[str]:
    if age is None:
        return None
    return f"{age}+"


def _plan(title: TitleRef, age: Optional[int]) -> AgeTagPlan:
    return AgeTagPlan(
        tmdb_id=title.tmdb_id,
        kind=title.kind,
        age=age,
        tag=age_tag(age),
        name=title.name,
    )


async def plan_title(
    client: TMDBClient, title: TitleRef, priority: Sequence[str]
) -> AgeTagPlan:
    ratings = await client.ratings(title.kind, title.tmdb_id)
    return _plan(title, resolve_age(title.kind, priority, ratings))


async def plan_age_tags(
    client: TMDBClient,
    titles: Iterable[TitleRef],
    priority: Sequence[str],
    batch_size: int = BATCH,
) -> List[AgeTagPlan]:
    """Resolve an age tag for every title, keeping the input order.

    A title whose certifications cannot be fetched is reported without an age;
    the rest of the batch carries on.
    """
    titles = list(titles)
    plans: List[AgeTagPlan] = []
    step = max(batch_size, 1)
    for i in range(0, len(titles), step):
        batch = titles[i : i + step]
        results = await asyncio.gather(
            *[plan_title(client, t, priority) for t in batch],
            return_exceptions=True,
        )
        for title, result in zip(batch, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Could not fetch certifications for %s %d: %s",
                    title.kind.value,
                    title.tmdb_id,
                    result,
                )
                plans.append(_plan(title, None))
                continue
            plans.append(result)
    return plans


async def _run(
    titles: Sequence[TitleRef], priority: Sequence[str], enable_write: bool
) -> List[AgeTagPlan]:
    client = TMDBClient(
        TMDB_API_KEY, base_url=TMDB_BASE_URL, rate_per_sec=TMDB_RATE_PER_SEC
    )
    try:
        client.ensure_api_key()
        mode = "write" if enable_write else "dry-run"
        logger.info(
            "Age tags %s started for %d titles (priority %s).",
            mode,
            len(titles),
            ",".join(priority),
        )
        plans = await plan_age_tags(client, titles, priority)
        for plan in plans:
            logger.info(
                "%s %d%s -> %s",
                plan.kind.value,
                plan.tmdb_id,
                f" ({plan.name})" if plan.name else "",
                plan.tag or "unknown",
            )
        if enable_write:
            logger.warning("Write enabled but no catalog writer is configured.")
        logger.info("Age tags %s finished.", mode)
        return plans
    finally:
        await client.aclose()


def run(
    titles: Sequence[TitleRef],
    csv: Optional[str] = None,
    home_region: Optional[str] = None,
    enable_write: Optional[bool] = None,
) -> List[AgeTagPlan]:
    priority = parse_priority(
        COUNTRY_PRIORITY if csv is None else csv,
        HOME_REGION if home_region is None else home_region,
    )
    write = ENABLE_WRITE if enable_write is None else enable_write
    return asyncio.run(_run(list(titles), priority, write))
