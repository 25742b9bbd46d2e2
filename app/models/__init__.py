from app.models.player import Player, UNKNOWN_COUNTRY
from app.models.match import Match, MatchStatus, MatchSource
from app.models.prediction import Prediction
from app.models.validation import RecordValidationError

__all__ = [
    "Player",
    "UNKNOWN_COUNTRY",
    "Match",
    "MatchStatus",
    "MatchSource",
    "Prediction",
    "RecordValidationError",
]
