import enum
import datetime as dt
from sqlalchemy import Integer, String, Date, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.sql_types import MATCH_ID_SQL_TYPE, PLAYER_ID_SQL_TYPE
from app.models.validation import RecordValidationError
from app.utils.timestamps import utcnow


class MatchStatus(str, enum.Enum):
    """Match lifecycle."""
    upcoming = "upcoming"
    finished = "finished"


class MatchSource(str, enum.Enum):
    """Origin tag of a match row."""
    api = "api"
    espn = "espn"
    scores365 = "365scores"
    tennisprediction = "tennisprediction"
    sample = "sample"


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("source", "external_id", name="uq_matches_source_external_id"),
        Index("ix_matches_p1_p2_date", "player1_id", "player2_id", "date"),
        Index("ix_matches_p2_p1_date", "player2_id", "player1_id", "date"),
    )

    id: Mapped[int] = mapped_column(MATCH_ID_SQL_TYPE, primary_key=True, autoincrement=True)
    player1_id: Mapped[int] = mapped_column(
        PLAYER_ID_SQL_TYPE, ForeignKey("players.id"), nullable=False, index=True
    )
    player2_id: Mapped[int] = mapped_column(
        PLAYER_ID_SQL_TYPE, ForeignKey("players.id"), nullable=False, index=True
    )
    # NULL for upcoming fixtures
    winner_id: Mapped[int | None] = mapped_column(
        PLAYER_ID_SQL_TYPE, ForeignKey("players.id"), index=True
    )
    tournament: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    score: Mapped[str | None] = mapped_column(String(100))
    surface: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MatchStatus.upcoming.value, server_default="upcoming"
    )
    source: Mapped[str | None] = mapped_column(String(32))
    external_id: Mapped[str | None] = mapped_column(String(128), index=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    player1: Mapped["Player"] = relationship(
        "Player", back_populates="player1_matches", foreign_keys=[player1_id]
    )
    player2: Mapped["Player"] = relationship(
        "Player", back_populates="player2_matches", foreign_keys=[player2_id]
    )
    winner: Mapped["Player | None"] = relationship(
        "Player", back_populates="won_matches", foreign_keys=[winner_id]
    )

    def validate(self) -> None:
        """Raise RecordValidationError if required fields or the winner rule fail."""
        errors = []
        if not self.tournament:
            errors.append("tournament can't be blank")
        if self.date is None:
            errors.append("date can't be blank")
        if not self.surface:
            errors.append("surface can't be blank")
        if self.winner_id is not None and self.winner_id not in (self.player1_id, self.player2_id):
            errors.append("winner must be either player1 or player2")
        for column in ("tournament", "surface", "score", "source", "external_id"):
            value = getattr(self, column)
            max_length = self.__table__.c[column].type.length
            if value and len(value) > max_length:
                errors.append(f"{column} is too long (maximum is {max_length} characters)")
        if errors:
            raise RecordValidationError("Match", errors)
