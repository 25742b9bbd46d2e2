"""
Deterministic sample data, served when every remote source comes back empty
(or ``FORCE_SAMPLE`` is set).

Output depends only on the arguments and today's date, so repeated syncs
on the same day map onto the same rows.
"""
from __future__ import annotations

import re
from datetime import date, timedelta

from app.models.match import MatchSource, MatchStatus
from app.services.sources.records import (
    DataKind,
    FixtureRecord,
    PlayerHint,
    RankingEntry,
)
from app.utils.surfaces import SURFACE_ROTATION

# (name, country, rank, points)
CURATED_RANKINGS: tuple[tuple[str, str, int, int], ...] = (
    ("Novak Djokovic", "Serbia", 1, 10875),
    ("Carlos Alcaraz", "Spain", 2, 9760),
    ("Daniil Medvedev", "Russia", 3, 7775),
    ("Jannik Sinner", "Italy", 4, 7400),
    ("Alexander Zverev", "Germany", 5, 6125),
    ("Andrey Rublev", "Russia", 6, 5000),
    ("Stefanos Tsitsipas", "Greece", 7, 4810),
    ("Rafael Nadal", "Spain", 8, 4655),
    ("Casper Ruud", "Norway", 9, 4455),
    ("Taylor Fritz", "USA", 10, 3900),
    ("Holger Rune", "Denmark", 11, 3725),
    ("Felix Auger-Aliassime", "Canada", 12, 3445),
    ("Alex de Minaur", "Australia", 13, 3155),
    ("Tommy Paul", "USA", 14, 2995),
    ("Lorenzo Musetti", "Italy", 15, 2790),
    ("Ben Shelton", "USA", 16, 2555),
    ("Frances Tiafoe", "USA", 17, 2380),
    ("Grigor Dimitrov", "Bulgaria", 18, 2245),
    ("Sebastian Korda", "USA", 19, 2100),
    ("Hubert Hurkacz", "Poland", 20, 1985),
)

SAMPLE_TOURNAMENTS = (
    "US Open",
    "Cincinnati Masters",
    "Canadian Open",
    "Wimbledon",
    "French Open",
    "Italian Open",
    "Madrid Open",
    "Indian Wells",
    "Miami Open",
    "Australian Open",
    "ATP Finals",
)

SAMPLE_SCORES = (
    "6-4, 6-2",
    "7-6, 6-3",
    "6-3, 4-6, 6-2",
    "7-5, 6-4",
    "6-2, 6-3",
    "6-4, 3-6, 6-4",
    "7-6, 7-6",
    "6-1, 6-2",
)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _slug(value: str) -> str:
    return _SLUG_RE.sub("-", value.lower()).strip("-")


def sample_external_id(kind: DataKind, player1: str, player2: str, day: date) -> str:
    return f"sample-{kind.value}-{_slug(player1)}-{_slug(player2)}-{day.strftime('%Y%m%d')}"


def curated_pair(index: int) -> tuple[str, str]:
    """Consecutive players of the curated list; the first is the better ranked."""
    size = len(CURATED_RANKINGS)
    first = (2 * index) % size
    return CURATED_RANKINGS[first][0], CURATED_RANKINGS[first + 1][0]


class SampleDataGenerator:
    """Builds sample rankings and fixtures tagged with the ``sample`` source."""

    name = MatchSource.sample.value

    def rankings(self, limit: int = 50) -> list[RankingEntry]:
        return [
            RankingEntry(name=name, rank=rank, points=points, country=country)
            for name, country, rank, points in CURATED_RANKINGS[:limit]
        ]

    def fixtures(
        self,
        kind: DataKind,
        limit: int,
        hint: PlayerHint | None = None,
        today: date | None = None,
    ) -> list[FixtureRecord]:
        today = today or date.today()
        if kind == DataKind.recent:
            return self._recent_results(limit, today)
        return self._upcoming_fixtures(limit, hint, today)

    def _upcoming_fixtures(self, limit: int, hint: PlayerHint | None, today: date) -> list[FixtureRecord]:
        fixtures = []
        for i in range(limit):
            if hint is not None:
                p1, p2 = hint.player1_name, hint.player2_name
            else:
                p1, p2 = curated_pair(i)
            day = today + timedelta(days=7 * (i + 1))
            fixtures.append(
                FixtureRecord(
                    player1_name=p1,
                    player2_name=p2,
                    tournament=f"Fixture: {p1} vs {p2} #{i + 1}",
                    date=day,
                    surface=SURFACE_ROTATION[i % len(SURFACE_ROTATION)],
                    status=MatchStatus.upcoming.value,
                    source=self.name,
                    external_id=sample_external_id(DataKind.upcoming, p1, p2, day),
                )
            )
        return fixtures

    def _recent_results(self, limit: int, today: date) -> list[FixtureRecord]:
        fixtures = []
        for i in range(limit):
            p1, p2 = curated_pair(i)
            day = today - timedelta(days=i + 1)
            fixtures.append(
                FixtureRecord(
                    player1_name=p1,
                    player2_name=p2,
                    tournament=SAMPLE_TOURNAMENTS[i % len(SAMPLE_TOURNAMENTS)],
                    date=day,
                    surface=SURFACE_ROTATION[i % len(SURFACE_ROTATION)],
                    status=MatchStatus.finished.value,
                    source=self.name,
                    external_id=sample_external_id(DataKind.recent, p1, p2, day),
                    winner_name=p1,
                    score=SAMPLE_SCORES[i % len(SAMPLE_SCORES)],
                )
            )
        return fixtures
