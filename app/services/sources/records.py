"""
Typed records produced by source extractors.

Extractors build records through ``build_ranking_entry`` and
``build_fixture``, which normalize fields once and reject incomplete rows,
so reconciliation never has to re-check their shape.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from app.utils.date_helpers import parse_date
from app.utils.player_names import normalize_player_name
from app.utils.surfaces import UNKNOWN_SURFACE

_DIGITS_RE = re.compile(r"\D")


class DataKind(str, enum.Enum):
    """What a source is asked for."""
    rankings = "rankings"
    recent = "recent"
    upcoming = "upcoming"


def parse_int(value: Any) -> int | None:
    """Integer from a number or a text like ``"10,875 pts"``; None if no digits."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    digits = _DIGITS_RE.sub("", str(value))
    return int(digits) if digits else None


@dataclass(slots=True)
class RankingEntry:
    name: str
    rank: int | None = None
    points: int | None = None
    country: str | None = None


@dataclass(slots=True)
class FixtureRecord:
    player1_name: str
    player2_name: str
    tournament: str | None = None
    date: date | None = None
    surface: str | None = None
    status: str | None = None
    source: str | None = None
    external_id: str | None = None
    winner_name: str | None = None
    score: str | None = None

    def pair_key(self) -> tuple[str, str, str]:
        """Order-sensitive dedupe key used inside a single scrape."""
        return (
            self.player1_name.lower(),
            self.player2_name.lower(),
            self.date.isoformat() if self.date else "",
        )


@dataclass(slots=True)
class PlayerHint:
    """The two players an upcoming-fixture lookup is about."""
    player1_name: str
    player2_name: str


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


def build_ranking_entry(
    name: Any,
    rank: Any = None,
    points: Any = None,
    country: Any = None,
) -> RankingEntry | None:
    normalized = normalize_player_name(_clean_text(name))
    if not normalized:
        return None
    return RankingEntry(
        name=normalized,
        rank=parse_int(rank),
        points=parse_int(points),
        country=_clean_text(country),
    )


def build_fixture(
    player1: Any,
    player2: Any,
    *,
    tournament: Any = None,
    date: Any = None,
    surface: Any = None,
    status: Any = None,
    source: str | None = None,
    external_id: Any = None,
    winner: Any = None,
    score: Any = None,
) -> FixtureRecord | None:
    """Build a fixture record, or None unless both player names are present."""
    p1 = normalize_player_name(_clean_text(player1))
    p2 = normalize_player_name(_clean_text(player2))
    if not p1 or not p2:
        return None
    surface_text = _clean_text(surface)
    if surface_text == UNKNOWN_SURFACE:
        surface_text = None
    ext = _clean_text(external_id)
    return FixtureRecord(
        player1_name=p1,
        player2_name=p2,
        tournament=_clean_text(tournament),
        date=parse_date(date),
        surface=surface_text,
        status=_clean_text(status),
        source=source,
        external_id=ext,
        winner_name=normalize_player_name(_clean_text(winner)) or None,
        score=_clean_text(score),
    )
