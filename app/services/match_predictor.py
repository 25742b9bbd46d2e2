"""
Match outcome predictor.

A fixed, hand-weighted combination of four heuristics; nothing is learned
from data. Every factor yields a ``(player1, player2)`` share and the
weighted shares are normalized into win probabilities.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Match, Player, Prediction, RecordValidationError
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

WEIGHTS = {
    "ranking": 0.3,
    "head_to_head": 0.2,
    "recent_form": 0.3,
    "points": 0.2,
}

MISSING_RANK = 1000
RECENT_FORM_MATCHES = 10
EVEN = (0.5, 0.5)


@dataclass
class ProbabilityResult:
    player1_probability: float
    player2_probability: float
    predicted_winner: Player
    confidence: float


@dataclass
class PredictionResult(ProbabilityResult):
    # None when the prediction was computed but not recorded
    prediction: Prediction | None = None


class MatchPredictor:
    """Computes win probabilities for a pair of players."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== Factors ====================

    @staticmethod
    def ranking_score(player1: Player, player2: Player) -> tuple[float, float]:
        """Inverse rank share; a missing rank counts as 1000."""
        score1 = 1.0 / ((player1.rank if player1.rank is not None else MISSING_RANK) + 1)
        score2 = 1.0 / ((player2.rank if player2.rank is not None else MISSING_RANK) + 1)
        total = score1 + score2
        if total <= 0:
            return EVEN
        return score1 / total, score2 / total

    async def head_to_head_score(self, player1: Player, player2: Player) -> tuple[float, float]:
        """Win share in decided meetings, squeezed into [0.1, 0.9]."""
        result = await self.db.execute(
            select(Match.winner_id, func.count())
            .where(
                or_(
                    and_(Match.player1_id == player1.id, Match.player2_id == player2.id),
                    and_(Match.player1_id == player2.id, Match.player2_id == player1.id),
                ),
                Match.winner_id.is_not(None),
            )
            .group_by(Match.winner_id)
        )
        wins = {winner_id: count for winner_id, count in result.all()}
        total = sum(wins.values())
        if total == 0:
            return EVEN

        share1 = wins.get(player1.id, 0) / total
        share2 = wins.get(player2.id, 0) / total
        return share1 * 0.8 + 0.1, share2 * 0.8 + 0.1

    async def win_rate(self, player: Player, limit: int = RECENT_FORM_MATCHES) -> float:
        """Win rate over the player's last ``limit`` decided matches; 0.5 if none."""
        result = await self.db.execute(
            select(Match.winner_id)
            .where(
                or_(Match.player1_id == player.id, Match.player2_id == player.id),
                Match.winner_id.is_not(None),
            )
            .order_by(Match.date.desc(), Match.id.desc())
            .limit(limit)
        )
        winners = result.scalars().all()
        if not winners:
            return 0.5
        return sum(1 for w in winners if w == player.id) / len(winners)

    async def recent_form_score(self, player1: Player, player2: Player) -> tuple[float, float]:
        form1 = await self.win_rate(player1)
        form2 = await self.win_rate(player2)
        total = form1 + form2
        if total == 0:
            return EVEN
        return form1 / total, form2 / total

    @staticmethod
    def points_score(player1: Player, player2: Player) -> tuple[float, float]:
        points1 = player1.points or 0
        points2 = player2.points or 0
        total = points1 + points2
        if total == 0:
            return EVEN
        return points1 / total, points2 / total

    # ==================== Prediction ====================

    async def predict_match_probabilities(self, player1: Player, player2: Player) -> ProbabilityResult:
        """Probabilities for a hypothetical match; nothing is persisted."""
        factors = {
            "ranking": self.ranking_score(player1, player2),
            "head_to_head": await self.head_to_head_score(player1, player2),
            "recent_form": await self.recent_form_score(player1, player2),
            "points": self.points_score(player1, player2),
        }
        score1 = sum(WEIGHTS[name] * shares[0] for name, shares in factors.items())
        score2 = sum(WEIGHTS[name] * shares[1] for name, shares in factors.items())

        total = score1 + score2
        if total <= 0:
            p1, p2 = EVEN
        else:
            p1, p2 = score1 / total, score2 / total

        # Ties favour player1
        winner = player1 if p1 >= p2 else player2
        return ProbabilityResult(
            player1_probability=p1,
            player2_probability=p2,
            predicted_winner=winner,
            confidence=max(p1, p2),
        )

    async def predict_match_winner(self, player1: Player, player2: Player) -> PredictionResult:
        """
        Predict and record the outcome.

        When the prediction fails validation it is logged and returned
        with ``prediction=None``.
        """
        probs = await self.predict_match_probabilities(player1, player2)
        result = PredictionResult(
            player1_probability=probs.player1_probability,
            player2_probability=probs.player2_probability,
            predicted_winner=probs.predicted_winner,
            confidence=probs.confidence,
        )

        prediction = Prediction(
            player1_id=player1.id,
            player2_id=player2.id,
            predicted_winner_id=probs.predicted_winner.id,
            confidence=probs.confidence,
            prediction_date=utcnow(),
        )
        try:
            prediction.validate()
        except RecordValidationError as e:
            logger.warning(
                "Prediction not saved for %s vs %s: %s", player1.name, player2.name, e
            )
            return result

        self.db.add(prediction)
        await self.db.commit()
        await self.db.refresh(prediction)
        result.prediction = prediction
        return result
