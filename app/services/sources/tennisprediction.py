"""TennisPrediction.com scraper (rankings table and upcoming fixtures)."""
from __future__ import annotations

import logging
import re
from datetime import date

from app.models.match import MatchSource, MatchStatus
from app.services.sources.base import BaseSource, make_soup
from app.services.sources.html_helpers import block_lines, node_text, vs_pair
from app.services.sources.records import (
    DataKind,
    FixtureRecord,
    RankingEntry,
    build_fixture,
    build_ranking_entry,
    parse_int,
)

logger = logging.getLogger(__name__)

PAGE_URL = "https://www.tennisprediction.com/?lng=6"

TENNISPREDICTION_EVENT = "TennisPrediction Event"

RANKING_ROWS = "table tr, .player-row, .ranking-row"
MATCH_BLOCKS = ".upcoming, .match, .fixture"
FALLBACK_BLOCKS = "tr, li, div"

# "Player A (ESP) 38.74% ..." rows carry a win percentage per player
_PERCENT_ROW_RE = re.compile(r"[A-Za-z\s.\-']{3,40}\s+\(.*?\)\s+\d{1,2}\.\d{1,2}%")
_PLAIN_NAME_RE = re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+")
_NAME_TAIL_RE = re.compile(r"\s{2,}|\s*\(|\s+\d")


def parse_tennisprediction_rankings(html: str, limit: int = 50) -> list[RankingEntry]:
    """Rows laid out as rank, name, ..., points."""
    soup = make_soup(html)
    entries: list[RankingEntry] = []
    for row in soup.select(RANKING_ROWS):
        if len(entries) >= limit:
            break
        cols = row.select("td")
        if len(cols) < 2:
            continue
        rank = parse_int(node_text(cols[0]))
        if rank is None:
            continue
        entry = build_ranking_entry(
            node_text(cols[1]),
            rank=rank,
            points=node_text(cols[-1]),
            country="Unknown",
        )
        if entry is not None:
            entries.append(entry)
    return entries


def _percent_row_pair(block) -> tuple[str, str] | None:
    candidates = [line for line in block_lines(block) if _PLAIN_NAME_RE.search(line)]
    if len(candidates) < 2:
        return None
    p1, p2 = (_NAME_TAIL_RE.split(c, maxsplit=1)[0].strip() for c in candidates[:2])
    return p1, p2


def parse_tennisprediction_matches(html: str, limit: int, today: date | None = None) -> list[FixtureRecord]:
    soup = make_soup(html)
    today = today or date.today()

    def make(p1: str, p2: str) -> FixtureRecord | None:
        return build_fixture(
            p1,
            p2,
            tournament=TENNISPREDICTION_EVENT,
            date=today,
            status=MatchStatus.upcoming.value,
            source=MatchSource.tennisprediction.value,
        )

    fixtures: list[FixtureRecord] = []
    for block in soup.select(MATCH_BLOCKS):
        if len(fixtures) >= limit:
            break
        players = [node_text(n) for n in block.select(".player, .name")]
        if len(players) >= 2:
            fixture = make(players[0], players[1])
            if fixture is not None:
                fixtures.append(fixture)

    if fixtures:
        return fixtures

    # Nested blocks repeat the same text
    seen: set[tuple[str, str, str]] = set()
    for block in soup.select(FALLBACK_BLOCKS):
        if len(fixtures) >= limit:
            break
        text = node_text(block)
        pair = vs_pair(text)
        if pair is None and _PERCENT_ROW_RE.search(text):
            pair = _percent_row_pair(block)
        if pair is None:
            continue
        fixture = make(*pair)
        if fixture is not None and fixture.pair_key() not in seen:
            seen.add(fixture.pair_key())
            fixtures.append(fixture)

    return fixtures


class TennisPredictionSource(BaseSource):
    name = MatchSource.tennisprediction.value
    kinds = frozenset({DataKind.rankings, DataKind.recent, DataKind.upcoming})

    async def _fetch(self, kind, limit, hint):
        html = await self.get_text(PAGE_URL)
        if kind == DataKind.rankings:
            return parse_tennisprediction_rankings(html, limit)
        return parse_tennisprediction_matches(html, limit)
