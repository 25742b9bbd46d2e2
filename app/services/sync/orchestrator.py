"""
Sync orchestrator service.

Coordinates the source chain with the sync services: fetch from the first
source that answers, then persist through the player and match services.
"""
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Player
from app.services.sources.chain import SourceChain, SourceResult, build_default_chain
from app.services.sources.records import DataKind, PlayerHint
from app.services.sync.match_sync import MatchSyncService
from app.services.sync.player_sync import PlayerSyncService

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Orchestrates fetch-and-persist operations.

    Rankings are applied before fixtures reference players, but both
    resolve players on their own so either can run first.
    """

    def __init__(self, db: AsyncSession, chain: SourceChain | None = None):
        """
        Initialize the orchestrator with all sync services.

        Args:
            db: SQLAlchemy async session
            chain: Optional source chain (default order if not provided)
        """
        self.db = db
        self.chain = chain or build_default_chain()

        self.player = PlayerSyncService(db)
        self.match = MatchSyncService(db, self.player)

    async def fetch_and_persist_rankings(self, limit: int = 50) -> dict[str, Any]:
        """
        Fetch rankings and upsert players.

        Returns:
            Dict with the number of players updated and the source tag
        """
        logger.info("Starting rankings sync (limit=%s)", limit)
        result = await self.chain.fetch_rankings(limit)
        count = await self.player.update_from_rankings(result.records)
        logger.info(f"Rankings sync complete: {count} players from {result.source}")
        return {"count": count, "source": result.source}

    async def fetch_and_persist_fixtures(self, kind: DataKind, limit: int = 50) -> dict[str, Any]:
        """
        Fetch recent results or upcoming fixtures and reconcile them.

        Returns:
            Dict with the number of matches persisted and the source tag
        """
        kind = DataKind(kind)
        logger.info("Starting %s fixtures sync (limit=%s)", kind.value, limit)
        result = await self.chain.fetch_fixtures(kind, limit)
        count = await self.match.reconcile(result.records)
        logger.info(f"{kind.value} fixtures sync complete: {count} matches from {result.source}")
        return {"count": count, "source": result.source}

    async def fetch_upcoming_for_pair(
        self,
        player1: Player,
        player2: Player,
        limit: int = 10,
    ) -> SourceResult:
        """
        Upcoming fixtures for display; nothing is persisted.

        The players are passed to the chain as a hint, which enables the
        pair-specific calendar scan and pair-specific sample fixtures.
        """
        hint = PlayerHint(player1_name=player1.name, player2_name=player2.name)
        return await self.chain.fetch_fixtures(DataKind.upcoming, limit, hint)
