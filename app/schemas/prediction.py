import datetime as dt
from pydantic import BaseModel, Field


class PredictionRequest(BaseModel):
    player1_id: int = Field(gt=0)
    player2_id: int = Field(gt=0)


class PredictionPreviewResponse(BaseModel):
    """Probabilities and confidence in percent (one decimal)."""
    player1: str
    player2: str
    player1_probability: float
    player2_probability: float
    predicted_winner: str
    confidence: float


class PredictionResponse(PredictionPreviewResponse):
    persisted: bool
    prediction_id: int | None = None
    message: str | None = None


class PredictionDetailResponse(PredictionPreviewResponse):
    id: int
    prediction_date: dt.datetime


class RecentPredictionItem(BaseModel):
    id: int
    player1: str
    player2: str
    predicted_winner: str
    confidence: float
    prediction_date: dt.datetime


class FutureMatchItem(BaseModel):
    tournament: str | None = None
    date: dt.date | None = None
    surface: str | None = None
    player1: str
    player2: str
    predicted_winner: str
    confidence: float
    player1_probability: float
    player2_probability: float


class FutureMatchesResponse(BaseModel):
    source: str
    upcoming: list[FutureMatchItem]


class GeneratePredictionsResponse(BaseModel):
    created: int
    fixtures: int
    source: str
