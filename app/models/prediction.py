from datetime import datetime
from sqlalchemy import Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.sql_types import PLAYER_ID_SQL_TYPE, PREDICTION_ID_SQL_TYPE
from app.models.validation import RecordValidationError
from app.utils.timestamps import utcnow


class Prediction(Base):
    """Append-only record of a computed match prediction."""

    __tablename__ = "predictions"

    id: Mapped[int] = mapped_column(PREDICTION_ID_SQL_TYPE, primary_key=True, autoincrement=True)
    player1_id: Mapped[int] = mapped_column(
        PLAYER_ID_SQL_TYPE, ForeignKey("players.id"), nullable=False, index=True
    )
    player2_id: Mapped[int] = mapped_column(
        PLAYER_ID_SQL_TYPE, ForeignKey("players.id"), nullable=False, index=True
    )
    predicted_winner_id: Mapped[int] = mapped_column(
        PLAYER_ID_SQL_TYPE, ForeignKey("players.id"), nullable=False, index=True
    )
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
    prediction_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    player1: Mapped["Player"] = relationship("Player", foreign_keys=[player1_id])
    player2: Mapped["Player"] = relationship("Player", foreign_keys=[player2_id])
    predicted_winner: Mapped["Player"] = relationship("Player", foreign_keys=[predicted_winner_id])

    def validate(self) -> None:
        errors = []
        if self.confidence is None or not 0.0 <= self.confidence <= 1.0:
            errors.append("confidence must be within 0..1")
        if self.prediction_date is None:
            errors.append("prediction_date can't be blank")
        if self.predicted_winner_id not in (self.player1_id, self.player2_id):
            errors.append("predicted_winner must be either player1 or player2")
        if errors:
            raise RecordValidationError("Prediction", errors)
