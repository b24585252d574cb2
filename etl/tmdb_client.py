from __future__ import annotations
import asyncio
import time
from typing import Any, Dict, List, Tuple
import httpx

from agetags.core.certification import (
    ContentKind,
    normalize_certification,
    normalize_region,
)

TMDB_BASE = "https://api.themoviedb.org/3"


class MissingApiKeyError(RuntimeError):
    pass


class TMDBClient:
    def __init__(
        self,
        api_key: str,
        base_url: str | None = TMDB_BASE,
        timeout: float = 15.0,
        rate_per_sec: float = 3.0,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = (base_url or "").strip().rstrip("/") or TMDB_BASE
        self.timeout = timeout
        self.rate = rate_per_sec
        self._last = 0.0
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(timeout=self.timeout)

    def ensure_api_key(self) -> None:
        if not self.api_key:
            raise MissingApiKeyError(
                "TMDB API key is missing. Set TMDB_API_KEY in the environment."
            )

    async def _throttle(self):
        async with self._lock:
            dt = time.time() - self._last
            min_gap = 1.0 / max(self.rate, 1e-6)
            if dt < min_gap:
                await asyncio.sleep(min_gap - dt)
            self._last = time.time()

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self.ensure_api_key()
        await self._throttle()
        q = dict(params)
        q["api_key"] = self.api_key
        r = await self._client.get(f"{self.base_url}{path}", params=q)
        r.raise_for_status()
        return r.json()

    async def tv_certifications(self, tv_id: int) -> Dict[str, str]:
        """Region -> normalized rating from ``/tv/{id}/content_ratings``."""
        data = await self._get(f"/tv/{tv_id}/content_ratings", {})
        certs: Dict[str, str] = {}
        for entry in data.get("results") or []:
            if not isinstance(entry, dict):
                continue
            region = normalize_region(entry.get("iso_3166_1"))
            rating = normalize_certification(entry.get("rating"))
            if region and rating:
                certs[region] = rating
        return certs

    async def movie_release_certifications(
        self, movie_id: int
    ) -> Dict[str, List[Tuple[int, str]]]:
        """
        Region -> [(release_type, normalized certification)] from
        ``/movie/{id}/release_dates``, in the order TMDB lists the releases.
        """
        data = await self._get(f"/movie/{movie_id}/release_dates", {})
        certs: Dict[str, List[Tuple[int, str]]] = {}
        for entry in data.get("results") or []:
            if not isinstance(entry, dict):
                continue
            region = normalize_region(entry.get("iso_3166_1"))
            releases = entry.get("release_dates")
            if not region or not isinstance(releases, list):
                continue
            bucket = certs.setdefault(region, [])
            for rel in releases:
                if not isinstance(rel, dict):
                    continue
                cert = normalize_certification(rel.get("certification"))
                if not cert:
                    continue
                try:
                    release_type = int(rel.get("type") or 0)
                except (TypeError, ValueError):
                    release_type = 0
                bucket.append((release_type, cert))
        return certs

    async def ratings(self, kind: ContentKind, tmdb_id: int) -> Dict[str, Any]:
        if ContentKind(kind) is ContentKind.TV:
            return await self.tv_certifications(tmdb_id)
        return await self.movie_release_certifications(tmdb_id)

    async def aclose(self):
        await self._client.aclose()
