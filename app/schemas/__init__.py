from app.schemas.player import (
    PlayerResponse,
    PlayerListResponse,
    PlayerDetailResponse,
    PlayerInMatch,
)
from app.schemas.match import (
    MatchResponse,
    MatchListResponse,
    PairMatchItem,
    PairMatchesResponse,
)
from app.schemas.prediction import (
    PredictionRequest,
    PredictionPreviewResponse,
    PredictionResponse,
    PredictionDetailResponse,
    RecentPredictionItem,
    FutureMatchItem,
    FutureMatchesResponse,
    GeneratePredictionsResponse,
)
from app.schemas.sync import SyncDetails, SyncResponse, SyncStatus

__all__ = [
    "PlayerResponse",
    "PlayerListResponse",
    "PlayerDetailResponse",
    "PlayerInMatch",
    "MatchResponse",
    "MatchListResponse",
    "PairMatchItem",
    "PairMatchesResponse",
    "PredictionRequest",
    "PredictionPreviewResponse",
    "PredictionResponse",
    "PredictionDetailResponse",
    "RecentPredictionItem",
    "FutureMatchItem",
    "FutureMatchesResponse",
    "GeneratePredictionsResponse",
    "SyncDetails",
    "SyncResponse",
    "SyncStatus",
]
