from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from app.services.sources.base import BaseSource
from app.services.sources.chain import SourceChain, build_default_chain
from app.services.sources.records import (
    DataKind,
    PlayerHint,
    build_fixture,
    build_ranking_entry,
    parse_int,
)
from app.services.sources.sample import (
    CURATED_RANKINGS,
    SampleDataGenerator,
    sample_external_id,
)


class StaticSource(BaseSource):
    """Returns canned records without touching the network."""

    kinds = frozenset({DataKind.rankings, DataKind.recent, DataKind.upcoming})

    def __init__(self, name: str, records: list):
        super().__init__()
        self.name = name
        self.records = records
        self.calls = 0

    async def _fetch(self, kind, limit, hint):
        self.calls += 1
        return self.records


class BrokenSource(StaticSource):
    async def fetch(self, kind, limit, hint=None):
        raise RuntimeError("unexpected")


def _fixture(p1="Jannik Sinner", p2="Carlos Alcaraz"):
    return build_fixture(p1, p2, tournament="ATP Finals", date="2025-11-15", source="test")


# ==================== Records ====================

def test_parse_int_variants():
    assert parse_int("10,875 pts") == 10875
    assert parse_int(7.0) == 7
    assert parse_int("n/a") is None
    assert parse_int(None) is None
    assert parse_int(True) is None


def test_build_fixture_normalizes_and_rejects_missing_player():
    fixture = build_fixture(
        "  Gaël   Monfils ",
        "Stan Wawrinka",
        tournament="  Paris  Masters ",
        date="20251030",
        surface="Unknown",
        external_id=42,
    )

    assert fixture.player1_name == "Gael Monfils"
    assert fixture.tournament == "Paris Masters"
    assert fixture.date == date(2025, 10, 30)
    assert fixture.surface is None
    assert fixture.external_id == "42"

    assert build_fixture("Stan Wawrinka", "   ") is None


def test_build_ranking_entry():
    entry = build_ranking_entry("Jannik Sinner", rank="1", points="11,830", country=" Italy ")

    assert (entry.name, entry.rank, entry.points, entry.country) == ("Jannik Sinner", 1, 11830, "Italy")
    assert build_ranking_entry("") is None


# ==================== Sample data ====================

def test_sample_rankings_are_curated():
    rankings = SampleDataGenerator().rankings(5)

    assert len(rankings) == 5
    assert rankings[0].name == CURATED_RANKINGS[0][0]
    assert rankings[0].rank == 1


def test_sample_upcoming_fixtures_are_deterministic():
    today = date(2025, 10, 1)
    generator = SampleDataGenerator()

    first = generator.fixtures(DataKind.upcoming, 3, today=today)
    second = generator.fixtures(DataKind.upcoming, 3, today=today)

    assert [f.external_id for f in first] == [f.external_id for f in second]
    assert first[0].date == today + timedelta(days=7)
    assert first[2].date == today + timedelta(days=21)
    assert first[0].status == "upcoming"
    assert first[0].source == "sample"
    assert first[0].tournament.startswith("Fixture: ")
    assert [f.surface for f in first] == ["Hard", "Clay", "Grass"]


def test_sample_upcoming_fixtures_follow_hint():
    hint = PlayerHint(player1_name="Casper Ruud", player2_name="Holger Rune")
    fixtures = SampleDataGenerator().fixtures(DataKind.upcoming, 2, hint, today=date(2025, 10, 1))

    assert {(f.player1_name, f.player2_name) for f in fixtures} == {("Casper Ruud", "Holger Rune")}
    assert fixtures[0].external_id == sample_external_id(
        DataKind.upcoming, "Casper Ruud", "Holger Rune", date(2025, 10, 8)
    )
    assert fixtures[0].external_id == "sample-upcoming-casper-ruud-holger-rune-20251008"


def test_sample_recent_results_are_past_and_decided():
    today = date(2025, 10, 1)
    fixtures = SampleDataGenerator().fixtures(DataKind.recent, 4, today=today)

    assert all(f.date < today for f in fixtures)
    assert all(f.status == "finished" for f in fixtures)
    assert all(f.winner_name == f.player1_name for f in fixtures)
    assert all(f.score for f in fixtures)


# ==================== Chain ====================

@pytest.mark.asyncio
async def test_chain_returns_first_non_empty_source():
    empty = StaticSource("empty", [])
    first = StaticSource("first", [_fixture()])
    second = StaticSource("second", [_fixture("Taylor Fritz", "Ben Shelton")])
    chain = SourceChain({DataKind.upcoming: [empty, first, second]})

    result = await chain.fetch_fixtures(DataKind.upcoming, 10)

    assert result.source == "first"
    assert len(result) == 1
    assert empty.calls == 1
    assert second.calls == 0


@pytest.mark.asyncio
async def test_chain_moves_past_raising_source():
    ok = StaticSource("ok", [_fixture()])
    chain = SourceChain({DataKind.recent: [BrokenSource("broken", []), ok]})

    result = await chain.fetch_fixtures(DataKind.recent, 10)

    assert result.source == "ok"


@pytest.mark.asyncio
async def test_chain_falls_back_to_sample_data():
    chain = SourceChain({DataKind.rankings: [StaticSource("empty", [])]})

    rankings = await chain.fetch_rankings(3)
    fixtures = await chain.fetch_fixtures(DataKind.upcoming, 3)

    assert rankings.source == "sample"
    assert len(rankings) == 3
    assert fixtures.source == "sample"
    assert len(fixtures) == 3


@pytest.mark.asyncio
async def test_chain_force_sample_skips_remote_sources():
    source = StaticSource("remote", [_fixture()])
    chain = SourceChain({DataKind.upcoming: [source]}, force_sample=True)

    result = await chain.fetch_fixtures(DataKind.upcoming, 2)

    assert result.source == "sample"
    assert source.calls == 0


@pytest.mark.asyncio
async def test_chain_skips_sources_needing_a_hint():
    pair_only = StaticSource("pair", [_fixture()])
    pair_only.requires_hint = True
    chain = SourceChain({DataKind.upcoming: [pair_only]})

    without_hint = await chain.fetch_fixtures(DataKind.upcoming, 2)
    with_hint = await chain.fetch_fixtures(
        DataKind.upcoming, 2, PlayerHint("Jannik Sinner", "Carlos Alcaraz")
    )

    assert without_hint.source == "sample"
    assert with_hint.source == "pair"


@pytest.mark.asyncio
async def test_chain_rejects_rankings_as_fixtures():
    with pytest.raises(ValueError):
        await SourceChain({}).fetch_fixtures(DataKind.rankings, 5)


def test_default_chain_order():
    chain = build_default_chain(force_sample=False)

    assert [s.name for s in chain.strategies[DataKind.rankings]] == [
        "espn", "365scores", "tennisprediction",
    ]
    assert [type(s).__name__ for s in chain.strategies[DataKind.recent]][:2] == [
        "ApiTennisSource", "EspnScoreboardSource",
    ]
    assert [type(s).__name__ for s in chain.strategies[DataKind.upcoming]][:4] == [
        "ApiTennisSource", "Scores365Source", "TennisPredictionSource", "EspnCalendarPairSource",
    ]
    assert chain.force_sample is False


@pytest.mark.asyncio
async def test_default_chain_serves_upcoming_from_api_when_keyed():
    chain = build_default_chain(force_sample=False)
    api = chain.strategies[DataKind.upcoming][0]
    api.api_key = "secret"
    api.get_json = AsyncMock(
        return_value={
            "success": 1,
            "result": [
                {
                    "event_key": 2001,
                    "event_date": (date.today() + timedelta(days=2)).isoformat(),
                    "event_first_player": "Jannik Sinner",
                    "event_second_player": "Carlos Alcaraz",
                    "event_status": "",
                    "tournament_name": "ATP Finals",
                }
            ],
        }
    )

    result = await chain.fetch_fixtures(DataKind.upcoming, 5)

    assert result.source == "api"
    assert [r.external_id for r in result.records] == ["2001"]
