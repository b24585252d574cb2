from __future__ import annotations

import sys

import pytest

from agetags.core.certification import ContentKind
from etl.age_tags import AgeTagPlan
from scripts import run_age_tags


def test_main_collects_titles_and_prints_plans(monkeypatch, capsys):
    captured = {}

    def fake_run(titles, csv=None, home_region=None):
        captured.update(titles=titles, csv=csv, home_region=home_region)
        return [
            AgeTagPlan(603, ContentKind.MOVIE, 17, "17+"),
            AgeTagPlan(1399, ContentKind.TV, None, None),
        ]

    monkeypatch.setattr(run_age_tags, "run", fake_run)
    monkeypatch.setattr(
        sys,
        "argv",
        ["run_age_tags", "--movie", "603", "--tv", "1399", "--priority", "US,FR"],
    )

    run_age_tags.main()

    assert [(t.tmdb_id, t.kind) for t in captured["titles"]] == [
        (603, ContentKind.MOVIE),
        (1399, ContentKind.TV),
    ]
    assert captured["csv"] == "US,FR"
    assert captured["home_region"] is None
    assert capsys.readouterr().out.splitlines() == [
        "movie\t603\t17+",
        "tv\t1399\tunknown",
    ]


def test_main_requires_a_title(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["run_age_tags"])
    with pytest.raises(SystemExit):
        run_age_tags.main()
