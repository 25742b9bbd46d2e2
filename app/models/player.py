from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.sql_types import PLAYER_ID_SQL_TYPE
from app.utils.timestamps import utcnow

UNKNOWN_COUNTRY = "Unknown"


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(PLAYER_ID_SQL_TYPE, primary_key=True, autoincrement=True)
    # Normalized name (see app.utils.player_names) is the identity key
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    country: Mapped[str] = mapped_column(
        String(100), nullable=False, default=UNKNOWN_COUNTRY, server_default=UNKNOWN_COUNTRY
    )
    rank: Mapped[int | None] = mapped_column(Integer)  # lower is better
    points: Mapped[int | None] = mapped_column(Integer)
    favorite: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default="false"
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    player1_matches: Mapped[list["Match"]] = relationship(
        "Match", back_populates="player1", foreign_keys="Match.player1_id"
    )
    player2_matches: Mapped[list["Match"]] = relationship(
        "Match", back_populates="player2", foreign_keys="Match.player2_id"
    )
    won_matches: Mapped[list["Match"]] = relationship(
        "Match", back_populates="winner", foreign_keys="Match.winner_id"
    )

    def __repr__(self) -> str:
        return f"<Player id={self.id} name={self.name!r} rank={self.rank}>"
