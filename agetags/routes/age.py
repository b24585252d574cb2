from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from agetags.config import COUNTRY_PRIORITY, HOME_REGION
from agetags.core.age_resolver import resolve_age
from agetags.core.certification import ContentKind
from agetags.core.region_priority import parse_priority
from etl.age_tags import age_tag
from etl.tmdb_client import MissingApiKeyError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/age", tags=["age"])


class AgeResponse(BaseModel):
    tmdb_id: Optional[int] = None
    media_type: ContentKind
    age: Optional[int] = None
    tag: Optional[str] = None
    priority: List[str]


class ResolveRequest(BaseModel):
    media_type: ContentKind
    # TV: {"US": "TV-14"}; movie: {"US": [[3, "PG-13"], [4, "R"]]}
    ratings: Dict[str, Union[Optional[str], List[Tuple[int, Optional[str]]]]] = (
        Field(default_factory=dict)
    )
    priority: Optional[str] = None
    home: Optional[str] = None


def _priority(csv: Optional[str], home: Optional[str]) -> Tuple[str, ...]:
    return parse_priority(
        COUNTRY_PRIORITY if csv is None else csv,
        HOME_REGION if home is None else home,
    )


@router.post("/resolve", response_model=AgeResponse)
def resolve_ratings(body: ResolveRequest):
    """Resolve an age from certifications the caller already has."""
    priority = _priority(body.priority, body.home)
    age = resolve_age(body.media_type, priority, body.ratings)
    return AgeResponse(
        media_type=body.media_type,
        age=age,
        tag=age_tag(age),
        priority=list(priority),
    )


@router.get("/{media_type}/{tmdb_id}", response_model=AgeResponse)
async def get_title_age(
    media_type: ContentKind,
    tmdb_id: int,
    request: Request,
    priority: Optional[str] = Query(
        None, description="Comma-separated region codes, e.g. 'FR,US'"
    ),
    home: Optional[str] = Query(None, description="Home region, always tried first"),
):
    """Fetch a title's certifications from TMDB and resolve its minimum age."""
    client = getattr(request.app.state, "tmdb_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="TMDB API key is not configured")

    regions = _priority(priority, home)
    try:
        ratings: Dict[str, Any] = await client.ratings(media_type, tmdb_id)
    except MissingApiKeyError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == 404:
            raise HTTPException(status_code=404, detail="Title not found") from exc
        logger.warning(
            "TMDB request failed for %s %d: %s", media_type.value, tmdb_id, exc
        )
        raise HTTPException(status_code=502, detail="TMDB request failed") from exc
    except httpx.HTTPError as exc:
        logger.warning(
            "TMDB request failed for %s %d: %s", media_type.value, tmdb_id, exc
        )
        raise HTTPException(status_code=502, detail="TMDB request failed") from exc

    age = resolve_age(media_type, regions, ratings)
    return AgeResponse(
        tmdb_id=tmdb_id,
        media_type=media_type,
        age=age,
        tag=age_tag(age),
        priority=list(regions),
    )
