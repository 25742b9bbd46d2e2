"""
365Scores tennis page scraper.

The page is heavily client-rendered, so structured fixture cards are tried
first and a text scan over generic blocks is the fallback.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from urllib.parse import urljoin

import httpx
from bs4 import Tag

from app.config import get_settings
from app.models.match import MatchSource, MatchStatus
from app.services.sources.base import BaseSource, make_soup
from app.services.sources.html_helpers import (
    extract_date_from_block,
    first_text,
    name_line_pair,
    node_text,
    vs_pair,
)
from app.services.sources.records import (
    DataKind,
    FixtureRecord,
    RankingEntry,
    build_fixture,
    build_ranking_entry,
)
from app.utils.surfaces import surface_from_keywords

settings = get_settings()
logger = logging.getLogger(__name__)

BASE_URL = "https://www.365scores.com"
TENNIS_URL = f"{BASE_URL}/es/tennis"

SCORES365_EVENT = "365Scores Event"

CARD_SELECTORS = (
    ".match, .match-row, .fixture, .event, .game-row, .fixture-row, "
    ".scheduled-match, .matchCard, .matchBox"
)
HOME_SELECTORS = (
    ".participant--home .participant__name, .participant__name, .home .name, "
    ".player-home, .p1, .team-home, .player-left"
)
AWAY_SELECTORS = (
    ".participant--away .participant__name, .away .name, .player-away, .p2, "
    ".team-away, .player-right"
)
DETAIL_HOME_SELECTORS = ".player-left .name, .player1 .name, .participant--home .participant__name"
DETAIL_AWAY_SELECTORS = ".player-right .name, .player2 .name, .participant--away .participant__name"
COMPETITION_SELECTORS = ".competition, .tournament, .league, .competition-name"
FALLBACK_BLOCKS = "tr, li, div, article, section"
RANKING_ROWS = ".player, .rankings__row, .table-row"
DATE_SELECTORS = ".date, .event__date, .schedule__date, .match-date, .time"


@dataclass(slots=True)
class MatchCard:
    """A structured fixture card, names possibly missing."""
    node: Tag
    home: str
    away: str
    link: str | None = None


def parse_365scores_rankings(html: str, limit: int = 50) -> list[RankingEntry]:
    soup = make_soup(html)
    entries: list[RankingEntry] = []
    for row in soup.select(RANKING_ROWS):
        if len(entries) >= limit:
            break
        entry = build_ranking_entry(
            first_text(row, ".name, .player-name"),
            rank=first_text(row, ".rank, .position"),
            points=first_text(row, ".points"),
            country="Unknown",
        )
        if entry is not None:
            entries.append(entry)
    return entries


def iter_match_cards(html: str) -> list[MatchCard]:
    soup = make_soup(html)
    cards = []
    for node in soup.select(CARD_SELECTORS):
        link = node.select_one("a[href]")
        cards.append(
            MatchCard(
                node=node,
                home=first_text(node, HOME_SELECTORS),
                away=first_text(node, AWAY_SELECTORS),
                link=urljoin(BASE_URL, link["href"]) if link is not None else None,
            )
        )
    return cards


def card_to_fixture(card: MatchCard, today: date) -> FixtureRecord | None:
    competition = first_text(card.node, COMPETITION_SELECTORS)
    return build_fixture(
        card.home,
        card.away,
        tournament=competition or SCORES365_EVENT,
        date=extract_date_from_block(card.node, DATE_SELECTORS) or today,
        surface=surface_from_keywords(competition or node_text(card.node)),
        status=MatchStatus.upcoming.value,
        source=MatchSource.scores365.value,
        external_id=card.node.get("data-event-id") or card.node.get("data-id"),
    )


def scan_text_blocks(html: str, limit: int, today: date) -> list[FixtureRecord]:
    """Fallback: ``A vs B`` phrases, then two name-like lines per block."""
    soup = make_soup(html)
    fixtures: list[FixtureRecord] = []
    for block in soup.select(FALLBACK_BLOCKS):
        if len(fixtures) >= limit:
            break
        pair = vs_pair(node_text(block)) or name_line_pair(block)
        if pair is None:
            continue
        fixture = build_fixture(
            pair[0],
            pair[1],
            tournament=SCORES365_EVENT,
            date=today,
            status=MatchStatus.upcoming.value,
            source=MatchSource.scores365.value,
        )
        if fixture is not None:
            fixtures.append(fixture)
    return fixtures


def dedupe_fixtures(fixtures: list[FixtureRecord], limit: int) -> list[FixtureRecord]:
    """Keep the first fixture per (player names, date)."""
    unique: dict[tuple[str, str, str], FixtureRecord] = {}
    for fixture in fixtures:
        unique.setdefault(fixture.pair_key(), fixture)
    return list(unique.values())[:limit]


def parse_365scores_matches(
    html: str,
    limit: int,
    today: date | None = None,
    cards: list[MatchCard] | None = None,
) -> list[FixtureRecord]:
    """Fixtures from structured cards, else from the text fallback, deduped."""
    today = today or date.today()
    if cards is None:
        cards = iter_match_cards(html)

    fixtures: list[FixtureRecord] = []
    for card in cards:
        if len(fixtures) >= limit:
            break
        fixture = card_to_fixture(card, today)
        if fixture is not None:
            fixtures.append(fixture)

    if not fixtures:
        fixtures = scan_text_blocks(html, limit, today)
    return dedupe_fixtures(fixtures, limit)


class Scores365Source(BaseSource):
    name = MatchSource.scores365.value
    kinds = frozenset({DataKind.rankings, DataKind.recent, DataKind.upcoming})

    def __init__(self, timeout: float | None = None, follow_links: bool | None = None):
        super().__init__(timeout)
        self.follow_links = settings.scraper_follow_links if follow_links is None else follow_links

    async def _fetch(self, kind, limit, hint):
        html = await self.get_text(TENNIS_URL)
        if kind == DataKind.rankings:
            return parse_365scores_rankings(html, limit)

        cards = iter_match_cards(html)
        if self.follow_links:
            for card in cards[:limit]:
                await self._complete_card(card)
        return parse_365scores_matches(html, limit, cards=cards)

    async def _complete_card(self, card: MatchCard) -> None:
        """Fill missing names from the card's detail page."""
        if (card.home and card.away) or not card.link:
            return
        try:
            detail = await self.get_soup(card.link)
        except httpx.HTTPError as e:
            logger.debug("365scores detail %s failed: %s", card.link, e)
            return
        card.home = card.home or first_text(detail, DETAIL_HOME_SELECTORS)
        card.away = card.away or first_text(detail, DETAIL_AWAY_SELECTORS)
