import pytest
from httpx import AsyncClient
from unittest.mock import AsyncMock, patch, MagicMock

from app.services.sources.chain import SourceChain
from app.services.sources.records import DataKind


@pytest.mark.asyncio
class TestSyncAPI:
    """Tests for /api/v1/sync endpoints."""

    async def test_sync_rankings(self, client: AsyncClient):
        """Test rankings synchronization endpoint."""
        with patch('app.api.sync.SyncOrchestrator') as MockOrchestrator:
            mock_instance = MagicMock()
            mock_instance.fetch_and_persist_rankings = AsyncMock(return_value={"count": 20, "source": "espn"})
            MockOrchestrator.return_value = mock_instance

            response = await client.post("/api/v1/sync/rankings?limit=20")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "success"
            assert "20 players updated" in data["message"]
            assert data["details"]["source"] == "espn"
            mock_instance.fetch_and_persist_rankings.assert_awaited_once_with(20)

    async def test_sync_matches(self, client: AsyncClient):
        """Test matches synchronization endpoint."""
        with patch('app.api.sync.SyncOrchestrator') as MockOrchestrator:
            mock_instance = MagicMock()
            mock_instance.fetch_and_persist_fixtures = AsyncMock(return_value={"count": 12, "source": "365scores"})
            MockOrchestrator.return_value = mock_instance

            response = await client.post("/api/v1/sync/matches?kind=upcoming")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "success"
            assert "12 upcoming matches synced" in data["message"]
            assert data["details"] == {"count": 12, "source": "365scores", "kind": "upcoming"}
            mock_instance.fetch_and_persist_fixtures.assert_awaited_once_with(DataKind.upcoming, 50)

    async def test_sync_matches_unknown_kind(self, client: AsyncClient):
        """Unknown kinds fail without touching the sources."""
        with patch('app.api.sync.SyncOrchestrator') as MockOrchestrator:
            response = await client.post("/api/v1/sync/matches?kind=rankings&lang=en")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "failed"
            assert data["message"] == "Unknown data kind"
            MockOrchestrator.assert_not_called()

    async def test_sync_failure(self, client: AsyncClient):
        """Test sync failure handling."""
        with patch('app.api.sync.SyncOrchestrator') as MockOrchestrator:
            mock_instance = MagicMock()
            mock_instance.fetch_and_persist_rankings = AsyncMock(side_effect=Exception("Connection error"))
            MockOrchestrator.return_value = mock_instance

            response = await client.post("/api/v1/sync/rankings")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "failed"
            assert "Connection error" in data["message"]

    async def test_sync_rankings_limit_validation(self, client: AsyncClient):
        response = await client.post("/api/v1/sync/rankings?limit=0")
        assert response.status_code == 422

    async def test_sync_with_sample_data(self, client: AsyncClient):
        """End to end through the orchestrator with sample data only."""
        chain = SourceChain({}, force_sample=True)
        with patch("app.services.sync.orchestrator.build_default_chain", return_value=chain):
            response = await client.post("/api/v1/sync/rankings?limit=5")
            assert response.json()["details"] == {"count": 5, "source": "sample", "kind": None}

            response = await client.post("/api/v1/sync/matches?kind=recent&limit=3")
            assert response.json()["details"] == {"count": 3, "source": "sample", "kind": "recent"}

        response = await client.get("/api/v1/matches")
        data = response.json()
        assert data["upcoming"] is False
        assert data["total"] == 3
