import datetime as dt
from pydantic import BaseModel

from app.schemas.player import PlayerInMatch


class MatchResponse(BaseModel):
    id: int
    player1: PlayerInMatch
    player2: PlayerInMatch
    winner: PlayerInMatch | None = None
    tournament: str
    date: dt.date
    surface: str
    score: str | None = None
    status: str
    source: str | None = None

    class Config:
        from_attributes = True


class MatchListResponse(BaseModel):
    items: list[MatchResponse]
    total: int
    upcoming: bool


class PairMatchItem(BaseModel):
    """Stored match between two players, surface label localized."""
    id: int
    player1: str
    player2: str
    winner: str | None = None
    tournament: str
    date: dt.date
    surface: str
    score: str | None = None
    status: str


class PairMatchesResponse(BaseModel):
    source: str
    matches: list[PairMatchItem]
    message: str | None = None
