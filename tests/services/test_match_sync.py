from datetime import date, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import DataError

from app.models import Match, Player, RecordValidationError
from app.services.sources.records import FixtureRecord, build_fixture
from app.services.sync.match_sync import MatchSyncService, placeholder_tournament
from app.utils.surfaces import guess_surface_from_tournament


async def _count(session, model) -> int:
    return (await session.execute(select(func.count(model.id)))).scalar()


async def _all_matches(session) -> list[Match]:
    result = await session.execute(select(Match).order_by(Match.id))
    return list(result.scalars().all())


def test_placeholder_tournament():
    assert placeholder_tournament("espn") == "ESPN Tournament"
    assert placeholder_tournament("365scores") == "365Scores Event"
    assert placeholder_tournament("tennisprediction") == "TennisPrediction Event"
    assert placeholder_tournament("api") == "Tournament"
    assert placeholder_tournament(None) == "Tournament"


@pytest.mark.asyncio
async def test_reconcile_creates_match_and_players(test_session):
    record = build_fixture(
        "Jannik Sinner",
        "Carlos Alcaraz",
        tournament="Roland Garros",
        date="2025-06-08",
        status="finished",
        source="espn",
        external_id="900",
        winner="Carlos Alcaraz",
        score="4-6 6-7 6-4 7-6 7-6",
    )

    count = await MatchSyncService(test_session).reconcile([record])

    assert count == 1
    matches = await _all_matches(test_session)
    assert len(matches) == 1
    match = matches[0]
    alcaraz = (await test_session.execute(select(Player).where(Player.name == "Carlos Alcaraz"))).scalar_one()
    assert match.winner_id == alcaraz.id
    assert match.surface == "Clay"
    assert match.status == "finished"
    assert match.date == date(2025, 6, 8)
    assert (match.source, match.external_id) == ("espn", "900")


@pytest.mark.asyncio
async def test_reconcile_is_idempotent_by_external_id(test_session):
    record = build_fixture(
        "Jannik Sinner", "Carlos Alcaraz",
        tournament="ATP Finals", date="2025-11-16", status="upcoming",
        source="espn", external_id="901",
    )
    service = MatchSyncService(test_session)
    await service.reconcile([record])

    played = build_fixture(
        "Jannik Sinner", "Carlos Alcaraz",
        date="2025-11-16", status="finished",
        source="espn", external_id="901",
        winner="Jannik Sinner", score="7-6 7-5",
    )
    await service.reconcile([played])

    matches = await _all_matches(test_session)
    assert len(matches) == 1
    assert matches[0].tournament == "ATP Finals"
    assert matches[0].status == "finished"
    assert matches[0].score == "7-6 7-5"
    assert matches[0].winner_id == matches[0].player1_id


@pytest.mark.asyncio
async def test_reconcile_matches_reversed_pair_on_same_date(test_session, sample_matches):
    upcoming = sample_matches[2]
    record = build_fixture(
        "Carlos Alcaraz", "Jannik Sinner",
        date=upcoming.date, status="upcoming", source="365scores",
    )

    count = await MatchSyncService(test_session).reconcile([record])

    assert count == 1
    assert await _count(test_session, Match) == len(sample_matches)
    assert upcoming.tournament == "ATP Finals"
    assert upcoming.surface == "Hard"


@pytest.mark.asyncio
async def test_reconcile_ignores_winner_outside_the_pair(test_session):
    record = build_fixture(
        "Taylor Fritz", "Ben Shelton",
        tournament="US Open", date="2025-09-01", status="finished",
        winner="Frances Tiafoe",
    )

    await MatchSyncService(test_session).reconcile([record])

    matches = await _all_matches(test_session)
    assert matches[0].winner_id is None
    assert await _count(test_session, Player) == 2


@pytest.mark.asyncio
async def test_reconcile_fills_placeholders(test_session):
    record = FixtureRecord(player1_name="Casper Ruud", player2_name="Holger Rune", source="espn")

    await MatchSyncService(test_session).reconcile([record])

    match = (await _all_matches(test_session))[0]
    assert match.tournament == "ESPN Tournament"
    assert match.surface == guess_surface_from_tournament("ESPN Tournament")
    assert match.date == date.today()
    assert match.status == "upcoming"


@pytest.mark.asyncio
async def test_reconcile_keeps_existing_surface(test_session, sample_matches):
    finished = sample_matches[1]
    record = build_fixture(
        "Carlos Alcaraz", "Jannik Sinner",
        date=finished.date, surface=None, source="espn", external_id="402",
    )

    await MatchSyncService(test_session).reconcile([record])

    assert finished.surface == "Grass"
    assert finished.tournament == "Wimbledon"
    assert finished.status == "finished"


@pytest.mark.asyncio
async def test_reconcile_skips_identical_players(test_session):
    record = build_fixture("Jannik Sinner", "Jannik  Sinner", tournament="Exhibition", date="2025-12-01")

    count = await MatchSyncService(test_session).reconcile([record])

    assert count == 0
    assert await _count(test_session, Match) == 0


@pytest.mark.asyncio
async def test_reconcile_skips_invalid_record_and_continues(test_session):
    records = [
        build_fixture("Casper Ruud", "Holger Rune", tournament="Oslo", date="2025-10-01"),
        build_fixture("Taylor Fritz", "Ben Shelton", tournament="US Open", date="2025-10-02"),
    ]
    failures = [RecordValidationError("Match", ["tournament can't be blank"]), None]

    with patch.object(Match, "validate", side_effect=failures):
        count = await MatchSyncService(test_session).reconcile(records)

    assert count == 1
    matches = await _all_matches(test_session)
    assert len(matches) == 1
    assert matches[0].tournament == "US Open"
    # Players of the rolled-back record are gone too
    assert await _count(test_session, Player) == 2


@pytest.mark.asyncio
async def test_reconcile_rejects_overlong_tournament(test_session):
    records = [
        build_fixture("Casper Ruud", "Holger Rune", tournament="Nordic Open " * 30, date="2025-10-01"),
        build_fixture("Taylor Fritz", "Ben Shelton", tournament="Tokyo", date="2025-10-02"),
    ]

    count = await MatchSyncService(test_session).reconcile(records)

    assert count == 1
    matches = await _all_matches(test_session)
    assert [m.tournament for m in matches] == ["Tokyo"]


@pytest.mark.asyncio
async def test_reconcile_survives_database_error(test_session):
    records = [
        build_fixture("Casper Ruud", "Holger Rune", tournament="Oslo", date="2025-10-01"),
        build_fixture("Taylor Fritz", "Ben Shelton", tournament="US Open", date="2025-10-02"),
    ]
    failures = [DataError("INSERT INTO matches", {}, Exception("value too long")), None]

    with patch.object(Match, "validate", side_effect=failures):
        count = await MatchSyncService(test_session).reconcile(records)

    assert count == 1
    matches = await _all_matches(test_session)
    assert [m.tournament for m in matches] == ["US Open"]

@pytest.mark.asyncio
async def test_concurrent_insert_is_merged(test_session, sample_matches):
    existing = sample_matches[0]
    new_date = existing.date + timedelta(days=1)
    record = build_fixture(
        "Jannik Sinner", "Carlos Alcaraz",
        date=new_date, source="espn", external_id="401", score="6-1 6-1",
    )
    service = MatchSyncService(test_session)
    real_find = service._find_by_external_id
    lookups = []

    async def racing_find(source, external_id):
        # First lookup misses, as if another writer inserted in between
        lookups.append(external_id)
        if len(lookups) == 1:
            return None
        return await real_find(source, external_id)

    service._find_by_external_id = racing_find
    count = await service.reconcile([record])

    assert count == 1
    assert len(lookups) == 2
    assert await _count(test_session, Match) == len(sample_matches)
    assert existing.score == "6-1 6-1"
    assert existing.date == new_date
