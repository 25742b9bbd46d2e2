"""
Match sync service.

Reconciles fixture records from any source into Match rows. A record
maps onto an existing match by ``(source, external_id)`` when it has
both, else by the unordered player pair plus date; otherwise a new match
is created. Fields are merged so that repeated fetches of the same event
update it in place.
"""
import logging
from datetime import date
from typing import Any

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.models import Match, MatchSource, MatchStatus, RecordValidationError
from app.services.sources.records import FixtureRecord
from app.services.sync.base import BaseSyncService
from app.services.sync.player_sync import PlayerSyncService
from app.utils.surfaces import guess_surface_from_tournament, is_blank_surface
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

# Tournament used when neither the record nor the stored match has one
SOURCE_TOURNAMENT_PLACEHOLDERS = {
    MatchSource.espn.value: "ESPN Tournament",
    MatchSource.scores365.value: "365Scores Event",
    MatchSource.tennisprediction.value: "TennisPrediction Event",
}
DEFAULT_TOURNAMENT = "Tournament"


def placeholder_tournament(source: str | None) -> str:
    return SOURCE_TOURNAMENT_PLACEHOLDERS.get((source or "").lower(), DEFAULT_TOURNAMENT)


class MatchSyncService(BaseSyncService):
    """
    Service for reconciling fixtures and results into matches.
    """

    def __init__(self, db, players: PlayerSyncService | None = None):
        super().__init__(db)
        self.players = players or PlayerSyncService(db)

    # ==================== Lookups ====================

    async def _find_by_external_id(self, source: str, external_id: str) -> Match | None:
        result = await self.db.execute(
            select(Match).where(Match.source == source, Match.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def _find_by_pair_and_date(self, p1_id: int, p2_id: int, day: date) -> Match | None:
        result = await self.db.execute(
            select(Match)
            .where(
                or_(
                    and_(Match.player1_id == p1_id, Match.player2_id == p2_id),
                    and_(Match.player1_id == p2_id, Match.player2_id == p1_id),
                ),
                Match.date == day,
            )
            .order_by(Match.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    # ==================== Merge ====================

    async def _merged_values(
        self,
        record: FixtureRecord,
        existing: Match | None,
        player_ids: tuple[int, int],
    ) -> dict[str, Any]:
        """Column values after merging ``record`` onto ``existing`` (or a new match)."""
        values: dict[str, Any] = {}

        if record.winner_name:
            winner = await self.players.find(record.winner_name)
            if winner is not None and winner.id in player_ids:
                values["winner_id"] = winner.id
            else:
                logger.debug(
                    "Ignoring winner %r: not one of the match players", record.winner_name
                )

        if record.tournament:
            values["tournament"] = record.tournament
        elif existing is None or not existing.tournament:
            values["tournament"] = placeholder_tournament(record.source)

        if record.date is not None:
            values["date"] = record.date
        elif existing is None:
            values["date"] = date.today()

        if record.score:
            values["score"] = record.score

        tournament = values.get("tournament") or (existing.tournament if existing else None)
        if not is_blank_surface(record.surface):
            values["surface"] = record.surface
        elif existing is None or is_blank_surface(existing.surface):
            values["surface"] = guess_surface_from_tournament(tournament)

        if record.status:
            values["status"] = record.status
        elif existing is None or not existing.status:
            values["status"] = MatchStatus.upcoming.value

        if record.source:
            values["source"] = record.source
        if record.external_id:
            values["external_id"] = record.external_id

        return values

    # ==================== Reconcile ====================

    async def reconcile(self, records: list[FixtureRecord]) -> int:
        """
        Persist fixture records as matches.

        Each record is committed on its own; one that fails validation or
        raises a database error is rolled back, logged and skipped.

        Args:
            records: Fixture records from a source

        Returns:
            Number of records persisted
        """
        count = 0
        for record in records:
            try:
                if await self._reconcile_one(record):
                    count += 1
            except RecordValidationError as e:
                await self._discard()
                logger.warning(
                    "Skipping %s vs %s (%s): %s",
                    record.player1_name, record.player2_name, record.source, e,
                )
            except IntegrityError as e:
                await self._discard()
                logger.warning(
                    "Integrity conflict for %s vs %s (%s): %s",
                    record.player1_name, record.player2_name, record.source, e.orig,
                )
            except SQLAlchemyError as e:
                await self._discard()
                logger.warning(
                    "Database error for %s vs %s (%s): %s",
                    record.player1_name, record.player2_name, record.source, e,
                )

        logger.info(f"Reconciled {count}/{len(records)} fixture records")
        return count

    async def _discard(self) -> None:
        await self.db.rollback()
        # Rolled-back instances are expired
        self.players.clear_cache()

    async def _reconcile_one(self, record: FixtureRecord) -> bool:
        p1 = await self.players.resolve(record.player1_name)
        p2 = await self.players.resolve(record.player2_name)
        if p1 is None or p2 is None:
            return False
        if p1.id == p2.id:
            logger.debug("Skipping fixture with identical players: %s", p1.name)
            return False
        player_ids = (p1.id, p2.id)

        keyed = bool(record.source and record.external_id)
        match = None
        if keyed:
            match = await self._find_by_external_id(record.source, record.external_id)
        if match is None:
            match = await self._find_by_pair_and_date(
                p1.id, p2.id, record.date or date.today()
            )

        if match is not None:
            await self._apply(match, record, player_ids)
        elif keyed:
            await self._insert_keyed(record, player_ids)
        else:
            values = await self._merged_values(record, None, player_ids)
            match = Match(player1_id=p1.id, player2_id=p2.id, **values)
            match.validate()
            self.db.add(match)

        await self.db.commit()
        return True

    async def _apply(self, match: Match, record: FixtureRecord, player_ids: tuple[int, int]) -> None:
        values = await self._merged_values(record, match, player_ids)
        for key, value in values.items():
            setattr(match, key, value)
        match.validate()
        await self.db.flush()

    async def _insert_keyed(self, record: FixtureRecord, player_ids: tuple[int, int]) -> None:
        """
        Create a match keyed by ``(source, external_id)``.

        A concurrent writer may insert the same key first; the insert is then
        a no-op and the record is merged onto their row instead.
        """
        values = await self._merged_values(record, None, player_ids)
        Match(player1_id=player_ids[0], player2_id=player_ids[1], **values).validate()

        now = utcnow()
        stmt = self.insert(Match).values(
            player1_id=player_ids[0],
            player2_id=player_ids[1],
            created_at=now,
            updated_at=now,
            **values,
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["source", "external_id"])
        result = await self.db.execute(stmt)

        if result.rowcount == 0:
            existing = await self._find_by_external_id(record.source, record.external_id)
            if existing is not None:
                logger.debug(
                    "Match %s/%s created concurrently, merging", record.source, record.external_id
                )
                await self._apply(existing, record, player_ids)
