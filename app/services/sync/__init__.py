"""
Sync services module.

This module contains the services that persist data fetched through the
source chain into the local database.

Services:
- PlayerSyncService: Player resolution and ranking updates
- MatchSyncService: Fixture and result reconciliation
- SyncOrchestrator: Coordinates fetch-and-persist operations
"""
from app.services.sync.base import BaseSyncService
from app.services.sync.player_sync import PlayerSyncService
from app.services.sync.match_sync import MatchSyncService
from app.services.sync.orchestrator import SyncOrchestrator

__all__ = [
    # Base
    "BaseSyncService",
    # Services
    "PlayerSyncService",
    "MatchSyncService",
    "SyncOrchestrator",
]
