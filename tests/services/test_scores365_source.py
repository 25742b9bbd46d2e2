from datetime import date
from unittest.mock import AsyncMock

import pytest

from app.services.sources.records import DataKind
from app.services.sources.scores365 import (
    SCORES365_EVENT,
    TENNIS_URL,
    Scores365Source,
    iter_match_cards,
    parse_365scores_matches,
    parse_365scores_rankings,
)


CARD = """
<div class="match" data-event-id="9001">
  <a href="/es/tennis/match/sinner-alcaraz-9001">Detalle</a>
  <div class="competition">ATP Finals</div>
  <span class="date">2025-11-15</span>
  <div class="participant--home"><span class="participant__name">Jannik Sinner</span></div>
  <div class="participant--away"><span class="participant__name">Carlos Alcaraz</span></div>
</div>
"""

HALF_CARD = """
<div class="match" data-event-id="77">
  <a href="/es/tennis/match/77">ver</a>
  <span class="participant__name">Daniil Medvedev</span>
</div>
"""

DETAIL_PAGE = """
<div class="player-left"><span class="name">Daniil Medvedev</span></div>
<div class="player-right"><span class="name">Andrey Rublev</span></div>
"""


def test_parse_rankings_rows():
    html = """
    <div class="player"><span class="rank">1</span><span class="name">Jannik Sinner</span><span class="points">11,830</span></div>
    <div class="player"><span class="rank">2</span><span class="name">Carlos Alcaraz</span><span class="points">8,850</span></div>
    """
    entries = parse_365scores_rankings(html)

    assert [(e.rank, e.name, e.points) for e in entries] == [
        (1, "Jannik Sinner", 11830),
        (2, "Carlos Alcaraz", 8850),
    ]
    assert entries[0].country == "Unknown"


def test_iter_match_cards_reads_names_and_link():
    cards = iter_match_cards(CARD)

    assert len(cards) == 1
    assert cards[0].home == "Jannik Sinner"
    assert cards[0].away == "Carlos Alcaraz"
    assert cards[0].link == "https://www.365scores.com/es/tennis/match/sinner-alcaraz-9001"


def test_parse_matches_from_cards():
    fixtures = parse_365scores_matches(CARD, limit=10, today=date(2025, 11, 1))

    assert len(fixtures) == 1
    fixture = fixtures[0]
    assert fixture.player1_name == "Jannik Sinner"
    assert fixture.player2_name == "Carlos Alcaraz"
    assert fixture.tournament == "ATP Finals"
    assert fixture.date == date(2025, 11, 15)
    assert fixture.external_id == "9001"
    assert fixture.source == "365scores"
    assert fixture.status == "upcoming"


def test_parse_matches_dedupes_repeated_cards():
    fixtures = parse_365scores_matches(CARD + CARD, limit=10)

    assert len(fixtures) == 1


def test_parse_matches_falls_back_to_vs_text():
    html = "<ul><li>Final: Jannik Sinner vs Carlos Alcaraz</li></ul>"
    today = date(2025, 11, 1)

    fixtures = parse_365scores_matches(html, limit=10, today=today)

    assert len(fixtures) == 1
    assert fixtures[0].player1_name == "Jannik Sinner"
    assert fixtures[0].player2_name == "Carlos Alcaraz"
    assert fixtures[0].tournament == SCORES365_EVENT
    assert fixtures[0].date == today


def test_parse_matches_falls_back_to_name_lines():
    html = '<div class="row"><span>Taylor Fritz</span><span>Ben Shelton</span></div>'

    fixtures = parse_365scores_matches(html, limit=10)

    assert [(f.player1_name, f.player2_name) for f in fixtures] == [("Taylor Fritz", "Ben Shelton")]


@pytest.mark.asyncio
async def test_source_completes_cards_from_detail_pages():
    pages = {
        TENNIS_URL: HALF_CARD,
        "https://www.365scores.com/es/tennis/match/77": DETAIL_PAGE,
    }
    source = Scores365Source(follow_links=True)
    source.get_text = AsyncMock(side_effect=lambda url, **kwargs: pages[url])

    fixtures = await source.fetch(DataKind.upcoming, 10)

    assert len(fixtures) == 1
    assert fixtures[0].player1_name == "Daniil Medvedev"
    assert fixtures[0].player2_name == "Andrey Rublev"
    assert fixtures[0].external_id == "77"


@pytest.mark.asyncio
async def test_source_without_follow_links_skips_incomplete_cards():
    source = Scores365Source(follow_links=False)
    source.get_text = AsyncMock(return_value=HALF_CARD)

    fixtures = await source.fetch(DataKind.upcoming, 10)

    assert fixtures == []
    source.get_text.assert_awaited_once_with(TENNIS_URL)
