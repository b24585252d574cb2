from __future__ import annotations

import asyncio

import httpx
import pytest

from agetags.core.certification import ContentKind
from etl import age_tags
from etl.age_tags import AgeTagPlan, TitleRef, age_tag, plan_age_tags, plan_title
from etl.tmdb_client import MissingApiKeyError


class _FakeClient:
    def __init__(self, ratings, failures=()):
        self._ratings = ratings
        self._failures = set(failures)
        self.calls = []
        self.closed = False

    def ensure_api_key(self):
        pass

    async def ratings(self, kind, tmdb_id):
        self.calls.append((kind, tmdb_id))
        if tmdb_id in self._failures:
            request = httpx.Request("GET", "http://tmdb.local")
            response = httpx.Response(500, request=request)
            raise httpx.HTTPStatusError("boom", request=request, response=response)
        return self._ratings.get((kind, tmdb_id), {})

    async def aclose(self):
        self.closed = True


def test_age_tag_format():
    assert age_tag(0) == "0+"
    assert age_tag(16) == "16+"
    assert age_tag(None) is None


def test_plan_title_resolves_age():
    client = _FakeClient({(ContentKind.TV, 7): {"US": "TV-14"}})
    title = TitleRef(7, ContentKind.TV, name="Show")

    plan = asyncio.run(plan_title(client, title, ("FR", "US")))

    assert plan == AgeTagPlan(7, ContentKind.TV, 14, "14+", "Show")


def test_plan_age_tags_keeps_order_and_survives_failures():
    client = _FakeClient(
        {
            (ContentKind.MOVIE, 1): {"FR": [(3, "12")]},
            (ContentKind.MOVIE, 3): {"US": [(3, "NR")]},
            (ContentKind.TV, 4): {"GB": "15"},
        },
        failures={2},
    )
    titles = [
        TitleRef(1, ContentKind.MOVIE),
        TitleRef(2, ContentKind.MOVIE),
        TitleRef(3, ContentKind.MOVIE),
        TitleRef(4, ContentKind.TV),
    ]

    plans = asyncio.run(
        plan_age_tags(client, titles, ("FR", "US", "GB"), batch_size=3)
    )

    assert [(p.tmdb_id, p.age, p.tag) for p in plans] == [
        (1, 12, "12+"),
        (2, None, None),
        (3, None, None),
        (4, 15, "15+"),
    ]
    assert len(client.calls) == 4


def test_run_builds_priority_from_config(monkeypatch):
    fake = _FakeClient({(ContentKind.TV, 5): {"FR": "16", "US": "TV-MA"}})
    monkeypatch.setattr(age_tags, "TMDBClient", lambda *args, **kwargs: fake)
    monkeypatch.setattr(age_tags, "COUNTRY_PRIORITY", "FR,US")
    monkeypatch.setattr(age_tags, "HOME_REGION", "US")

    plans = age_tags.run([TitleRef(5, ContentKind.TV)])

    assert plans[0].age == 17
    assert fake.closed is True


def test_run_explicit_priority_overrides_config(monkeypatch):
    fake = _FakeClient({(ContentKind.TV, 5): {"FR": "16", "US": "TV-MA"}})
    monkeypatch.setattr(age_tags, "TMDBClient", lambda *args, **kwargs: fake)
    monkeypatch.setattr(age_tags, "HOME_REGION", "US")

    plans = age_tags.run([TitleRef(5, ContentKind.TV)], csv="FR", home_region="")

    assert plans[0].age == 16


def test_run_requires_api_key(monkeypatch):
    class _NoKeyClient(_FakeClient):
        def ensure_api_key(self):
            raise MissingApiKeyError("missing")

    fake = _NoKeyClient({})
    monkeypatch.setattr(age_tags, "TMDBClient", lambda *args, **kwargs: fake)

    with pytest.raises(MissingApiKeyError):
        age_tags.run([TitleRef(1, ContentKind.MOVIE)])
    assert fake.calls == []
    assert fake.closed is True
