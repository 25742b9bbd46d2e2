"""
api-tennis.com fixtures client.

Only active when ``API_TENNIS_KEY`` is configured. Finished events come
back with a winner and a set-by-set score, so this is the one source that
can fill in results for recent matches.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from app.config import get_settings
from app.models.match import MatchSource, MatchStatus
from app.services.sources.base import BaseSource
from app.services.sources.records import DataKind, FixtureRecord, build_fixture

settings = get_settings()
logger = logging.getLogger(__name__)

FINISHED_STATUSES = {"finished", "retired", "walk over", "walkover"}


def format_set_scores(scores: Any) -> str | None:
    """``[{"score_first": "6", "score_second": "4"}, ...]`` -> ``"6-4 7-5"``."""
    if not isinstance(scores, list):
        return None
    sets = []
    for item in scores:
        if not isinstance(item, dict):
            continue
        first, second = item.get("score_first"), item.get("score_second")
        if first in (None, "") or second in (None, ""):
            continue
        # Tie-break points come as "7.5"; keep games only
        sets.append(f"{str(first).split('.')[0]}-{str(second).split('.')[0]}")
    return " ".join(sets) or None


def parse_api_tennis_fixtures(payload: Any, limit: int) -> list[FixtureRecord]:
    """Parse a ``get_fixtures`` response (``{"success": 1, "result": [...]}``)."""
    if not isinstance(payload, dict) or not isinstance(payload.get("result"), list):
        return []

    fixtures: list[FixtureRecord] = []
    for event in payload["result"]:
        if len(fixtures) >= limit:
            break
        if not isinstance(event, dict):
            continue

        p1 = event.get("event_first_player")
        p2 = event.get("event_second_player")
        finished = str(event.get("event_status") or "").strip().lower() in FINISHED_STATUSES

        winner = None
        score = None
        if finished:
            side = str(event.get("event_winner") or "").lower()
            if side.startswith("first"):
                winner = p1
            elif side.startswith("second"):
                winner = p2
            score = format_set_scores(event.get("scores")) or event.get("event_final_result")

        fixture = build_fixture(
            p1,
            p2,
            tournament=event.get("tournament_name"),
            date=event.get("event_date"),
            status=MatchStatus.finished.value if finished else MatchStatus.upcoming.value,
            source=MatchSource.api.value,
            external_id=event.get("event_key"),
            winner=winner,
            score=score,
        )
        if fixture is not None and fixture.date is not None:
            fixtures.append(fixture)

    return fixtures


class ApiTennisSource(BaseSource):
    name = MatchSource.api.value
    kinds = frozenset({DataKind.recent, DataKind.upcoming})

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        window_days: int | None = None,
    ):
        super().__init__(timeout or settings.scraper_api_timeout_seconds)
        self.api_key = settings.api_tennis_key if api_key is None else api_key
        self.base_url = base_url or settings.api_tennis_base_url
        self.window_days = window_days if window_days is not None else settings.fixture_window_days

    def supports(self, kind, hint=None) -> bool:
        return bool(self.api_key) and super().supports(kind, hint)

    def _window(self, kind: DataKind) -> tuple[date, date]:
        today = date.today()
        if kind == DataKind.recent:
            return today - timedelta(days=self.window_days), today
        return today, today + timedelta(days=self.window_days)

    async def _fetch(self, kind, limit, hint):
        start, stop = self._window(kind)
        payload = await self.get_json(
            self.base_url,
            params={
                "method": "get_fixtures",
                "APIkey": self.api_key,
                "date_start": start.isoformat(),
                "date_stop": stop.isoformat(),
            },
        )
        fixtures = parse_api_tennis_fixtures(payload, limit * 2)
        if kind == DataKind.recent:
            fixtures = [f for f in fixtures if f.status == MatchStatus.finished.value]
            fixtures.sort(key=lambda f: f.date, reverse=True)
        else:
            fixtures = [f for f in fixtures if f.status == MatchStatus.upcoming.value]
            fixtures.sort(key=lambda f: f.date)
        return fixtures[:limit]
