"""
Player sync service.

Resolves scraped player names to Player rows and applies ranking updates.
"""
import logging

from sqlalchemy import select

from app.models import Player, UNKNOWN_COUNTRY
from app.services.sources.records import RankingEntry
from app.services.sync.base import BaseSyncService
from app.utils.player_names import normalize_player_name
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


class PlayerSyncService(BaseSyncService):
    """
    Service for resolving and updating players.

    Handles:
    - Find-or-create by normalized name (safe against concurrent creators)
    - Rank/points/country updates from ranking entries
    """

    def __init__(self, db):
        super().__init__(db)
        self._cache: dict[str, Player] = {}

    def clear_cache(self) -> None:
        """Forget resolved players (call after a rollback expires them)."""
        self._cache.clear()

    async def _find_by_name(self, name: str) -> Player | None:
        result = await self.db.execute(select(Player).where(Player.name == name))
        return result.scalar_one_or_none()

    async def find(self, raw_name: str | None) -> Player | None:
        """Existing player for a scraped name; never creates one."""
        name = normalize_player_name(raw_name)
        if not name:
            return None
        if name in self._cache:
            return self._cache[name]
        player = await self._find_by_name(name)
        if player is not None:
            self._cache[name] = player
        return player

    async def resolve(self, raw_name: str | None) -> Player | None:
        """
        Find or create the player for a scraped name.

        Args:
            raw_name: Name as scraped; normalized before lookup

        Returns:
            The Player, or None for an empty name
        """
        name = normalize_player_name(raw_name)
        if not name:
            return None
        if name in self._cache:
            return self._cache[name]

        player = await self._find_by_name(name)
        if player is None:
            now = utcnow()
            stmt = self.insert(Player).values(
                name=name,
                country=UNKNOWN_COUNTRY,
                favorite=False,
                created_at=now,
                updated_at=now,
            )
            # Another writer may create the same name first; then reuse theirs
            stmt = stmt.on_conflict_do_nothing(index_elements=["name"])
            await self.db.execute(stmt)
            player = await self._find_by_name(name)
            logger.debug("Resolved new player %r -> id=%s", name, player.id if player else None)

        if player is not None:
            self._cache[name] = player
        return player

    async def update_from_rankings(self, entries: list[RankingEntry]) -> int:
        """
        Upsert country, rank and points for each ranking entry.

        Args:
            entries: Ranking entries, later entries win on duplicate names

        Returns:
            Number of players updated
        """
        count = 0
        for entry in entries:
            player = await self.resolve(entry.name)
            if player is None:
                continue
            if entry.country and entry.country != UNKNOWN_COUNTRY:
                player.country = entry.country
            player.rank = entry.rank
            player.points = entry.points
            count += 1

        await self.db.commit()
        logger.info(f"Updated {count} players from rankings")
        return count
