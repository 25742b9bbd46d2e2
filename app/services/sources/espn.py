"""
ESPN sources.

ESPN is reached three ways, each degrading on its own:

- ``EspnScoreboardSource``: the public site API (JSON), most reliable;
- ``EspnEmbeddedSource``: JSON state embedded in the calendar page;
- ``EspnCalendarSource`` / ``EspnCalendarPairSource``: calendar HTML.

Rankings come from the rankings table (``EspnRankingsSource``).
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

import httpx
from bs4 import BeautifulSoup

from app.config import get_settings
from app.models.match import MatchSource, MatchStatus
from app.services.sources.base import BaseSource, make_soup
from app.services.sources.embedded_json import competitor_name, parse_embedded_fixtures
from app.services.sources.html_helpers import (
    block_lines,
    extract_date_from_block,
    first_text,
    nearest_heading,
    node_text,
)
from app.services.sources.records import (
    DataKind,
    FixtureRecord,
    PlayerHint,
    RankingEntry,
    build_fixture,
    build_ranking_entry,
    parse_int,
)
from app.utils.date_helpers import compact_date, parse_date
from app.utils.player_names import name_keys
from app.utils.surfaces import surface_from_keywords

settings = get_settings()
logger = logging.getLogger(__name__)

RANKINGS_URL = "https://www.espn.com.ar/tenis/rankings"
CALENDAR_URL = "https://www.espn.com.ar/tenis/calendario"
SCOREBOARD_ENDPOINTS = (
    "https://site.api.espn.com/apis/site/v2/sports/tennis/scoreboard",
    "https://site.api.espn.com/apis/site/v2/sports/tennis/atp/scoreboard",
    "https://site.api.espn.com/apis/site/v2/sports/tennis/wta/scoreboard",
)

ESPN_TOURNAMENT = "ESPN Tournament"

EVENT_SELECTORS = (
    ".calendar__event, .schedule__item, .event, .card, .match-block, .schedule-item"
)
PAIR_BLOCK_SELECTORS = "article, .card, .calendar__event, .schedule__item, .match-row, .event"
PLAYER_SELECTORS = ".participant__name, .name, .player-name, .athlete, .athleteName, .participant"
TOURNAMENT_SELECTORS = ".tournament-name, .competition, .tournament"


# ==================== Parsers ====================

def parse_espn_rankings(html: str, limit: int = 50) -> list[RankingEntry]:
    """Parse the ESPN rankings table into ranking entries."""
    soup = make_soup(html)
    entries: list[RankingEntry] = []

    for row in soup.select("tr.Table__TR, tr"):
        if len(entries) >= limit:
            break

        rank_node = row.select_one(".rank_column") or row.select_one("td:first-child")
        rank = parse_int(node_text(rank_node))
        if rank is None:
            continue

        name = node_text(row.select_one("a.AnchorLink") or row.select_one("td a"))
        if not name:
            continue

        country = None
        img = row.select_one("img")
        if img is not None and img.get("title"):
            country = img["title"].strip()
        else:
            country = " ".join(
                node_text(n) for n in row.select(".rankings__teamLogo, .country, .team")
            ).strip() or None

        # Points are the largest number in the row
        numbers = [parse_int(node_text(td)) for td in row.select("td")]
        numbers = [n for n in numbers if n is not None]
        points = max(numbers) if numbers else 0

        entry = build_ranking_entry(name, rank=rank, points=points, country=country or "Unknown")
        if entry is not None and entry.name not in {e.name for e in entries}:
            entries.append(entry)

    return entries


def _event_status(event: dict) -> str:
    status_type = (event.get("status") or {}).get("type") or {}
    if status_type.get("completed") or status_type.get("state") == "post":
        return MatchStatus.finished.value
    return MatchStatus.upcoming.value


def parse_scoreboard_events(payload: Any, limit: int, today: date | None = None) -> list[FixtureRecord]:
    """Parse one scoreboard API response (``{"events": [...]}``)."""
    if not isinstance(payload, dict) or not isinstance(payload.get("events"), list):
        return []
    today = today or date.today()
    fixtures: list[FixtureRecord] = []

    for event in payload["events"]:
        if len(fixtures) >= limit:
            break
        if not isinstance(event, dict):
            continue
        competitions = event.get("competitions") or []
        competition = competitions[0] if competitions and isinstance(competitions[0], dict) else None
        competitors = (competition or {}).get("competitors") or []
        if len(competitors) < 2:
            continue

        status = _event_status(event)
        winner = None
        if status == MatchStatus.finished.value:
            winner = next(
                (competitor_name(c) for c in competitors[:2] if isinstance(c, dict) and c.get("winner")),
                None,
            )

        tournament = event.get("tournament") or event.get("shortName") or event.get("name")
        if isinstance(tournament, dict):
            tournament = tournament.get("name")
        start = event.get("date") or event.get("startDate") or event.get("scheduled")

        fixture = build_fixture(
            competitor_name(competitors[0]),
            competitor_name(competitors[1]),
            tournament=tournament,
            date=parse_date(start) or today,
            surface=event.get("surface"),
            status=status,
            source=MatchSource.espn.value,
            external_id=event.get("id") or event.get("uid") or event.get("guid"),
            winner=winner,
        )
        if fixture is not None:
            fixtures.append(fixture)

    return fixtures


def _event_blocks(soup: BeautifulSoup):
    found = soup.select(EVENT_SELECTORS)
    if not found:
        # Broad fallback for unknown layouts
        found = soup.select("article, li, div")
    return found


def _player_names(block) -> list[str]:
    nodes = block.select(PLAYER_SELECTORS)
    if not nodes:
        nodes = [
            a for a in block.select("a")
            if "/player/" in (a.get("href") or "") or 0 < len(node_text(a).split()) <= 3
        ]
    names = []
    for node in nodes:
        text = node_text(node)
        if text:
            names.append(text)
    return names


def _block_tournament(block) -> str:
    return first_text(block, TOURNAMENT_SELECTORS) or nearest_heading(block)


def parse_espn_calendar(html: str, limit: int, today: date | None = None) -> list[FixtureRecord]:
    """Parse calendar event blocks into upcoming fixtures."""
    soup = make_soup(html)
    today = today or date.today()
    fixtures: list[FixtureRecord] = []

    for block in _event_blocks(soup):
        if len(fixtures) >= limit:
            break
        names = _player_names(block)
        if len(names) < 2:
            continue
        tournament = _block_tournament(block)
        fixture = build_fixture(
            names[0],
            names[1],
            tournament=tournament or ESPN_TOURNAMENT,
            date=extract_date_from_block(block) or today,
            surface=surface_from_keywords(tournament),
            status=MatchStatus.upcoming.value,
            source=MatchSource.espn.value,
        )
        if fixture is not None:
            fixtures.append(fixture)

    return fixtures


def parse_espn_calendar_for_pair(
    html: str,
    hint: PlayerHint,
    limit: int,
    today: date | None = None,
) -> list[FixtureRecord]:
    """Calendar blocks that mention both players of ``hint`` (full name or surname)."""
    soup = make_soup(html)
    today = today or date.today()
    p1_keys = name_keys(hint.player1_name)
    p2_keys = name_keys(hint.player2_name)
    fixtures: list[FixtureRecord] = []

    for block in soup.select(PAIR_BLOCK_SELECTORS):
        if len(fixtures) >= limit:
            break
        text = node_text(block).lower()
        if not (any(k in text for k in p1_keys) and any(k in text for k in p2_keys)):
            continue

        names = [node_text(n) for n in block.select(".participant__name, .name, .player-name, .athlete")]
        names = [n for n in names if n]
        if len(names) < 2:
            candidates = [line for line in block_lines(block) if len(line.split()) >= 2]
            if len(candidates) >= 2:
                names = candidates
        if len(names) < 2:
            continue

        tournament = _block_tournament(block)
        fixture = build_fixture(
            names[0],
            names[1],
            tournament=tournament or ESPN_TOURNAMENT,
            date=extract_date_from_block(block) or today,
            surface=surface_from_keywords(tournament),
            status=MatchStatus.upcoming.value,
            source=MatchSource.espn.value,
        )
        if fixture is not None:
            fixtures.append(fixture)

    return fixtures


def script_bodies(html: str) -> list[str]:
    soup = make_soup(html)
    return [script.get_text() for script in soup.find_all("script")]


# ==================== Sources ====================

class EspnRankingsSource(BaseSource):
    name = MatchSource.espn.value
    kinds = frozenset({DataKind.rankings})

    async def _fetch(self, kind, limit, hint):
        html = await self.get_text(RANKINGS_URL)
        return parse_espn_rankings(html, limit)


class EspnScoreboardSource(BaseSource):
    """Direct JSON calls to the ESPN site API across a short date window."""

    name = MatchSource.espn.value
    kinds = frozenset({DataKind.recent, DataKind.upcoming})

    def __init__(self, timeout: float | None = None, window_days: int | None = None):
        super().__init__(timeout or settings.scraper_api_timeout_seconds)
        self.window_days = window_days if window_days is not None else settings.fixture_window_days

    def _dates(self, kind: DataKind) -> list[date]:
        today = date.today()
        if kind == DataKind.recent:
            return [today - timedelta(days=d) for d in range(self.window_days + 1)]
        return [today + timedelta(days=d) for d in range(self.window_days + 1)]

    async def _fetch(self, kind, limit, hint):
        fixtures: list[FixtureRecord] = []
        for endpoint in SCOREBOARD_ENDPOINTS:
            for day in self._dates(kind):
                if len(fixtures) >= limit:
                    return fixtures
                try:
                    payload = await self.get_json(endpoint, params={"dates": compact_date(day)})
                except httpx.TransportError as e:
                    # Every endpoint lives on the same host
                    logger.warning("espn scoreboard unreachable, stopping after %d fixtures: %s", len(fixtures), e)
                    return fixtures
                except (httpx.HTTPStatusError, ValueError) as e:
                    logger.debug("espn scoreboard %s?dates=%s failed: %s", endpoint, compact_date(day), e)
                    continue
                fixtures.extend(parse_scoreboard_events(payload, limit - len(fixtures)))
        return fixtures


class EspnEmbeddedSource(BaseSource):
    """Fixtures mined from the JSON state embedded in the calendar page."""

    name = MatchSource.espn.value
    kinds = frozenset({DataKind.recent, DataKind.upcoming})

    async def _fetch(self, kind, limit, hint):
        html = await self.get_text(CALENDAR_URL)
        fixtures = parse_embedded_fixtures(script_bodies(html), self.name, limit)
        today = date.today()
        for fixture in fixtures:
            if fixture.date is None:
                fixture.date = today
        return fixtures


class EspnCalendarSource(BaseSource):
    name = MatchSource.espn.value
    kinds = frozenset({DataKind.recent, DataKind.upcoming})

    async def _fetch(self, kind, limit, hint):
        html = await self.get_text(CALENDAR_URL)
        return parse_espn_calendar(html, limit)


class EspnCalendarPairSource(BaseSource):
    """Calendar scan for fixtures between two specific players."""

    name = MatchSource.espn.value
    kinds = frozenset({DataKind.upcoming})
    requires_hint = True

    async def _fetch(self, kind, limit, hint):
        html = await self.get_text(CALENDAR_URL)
        return parse_espn_calendar_for_pair(html, hint, limit)
