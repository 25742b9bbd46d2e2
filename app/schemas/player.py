from datetime import datetime
from pydantic import BaseModel


class PlayerBase(BaseModel):
    id: int
    name: str
    country: str
    rank: int | None = None
    points: int | None = None
    favorite: bool = False


class PlayerResponse(PlayerBase):
    class Config:
        from_attributes = True


class PlayerListResponse(BaseModel):
    items: list[PlayerResponse]
    total: int


class PlayerDetailResponse(PlayerResponse):
    matches_played: int = 0
    matches_won: int = 0
    win_percentage: float | None = None
    updated_at: datetime | None = None


class PlayerInMatch(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
