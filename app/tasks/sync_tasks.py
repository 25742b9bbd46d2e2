import logging

from app.tasks import celery_app
from app.database import AsyncSessionLocal
from app.services.sources.records import DataKind
from app.services.sync import SyncOrchestrator
from app.utils.async_celery import run_async

logger = logging.getLogger(__name__)


async def _fetch_rankings(limit: int):
    """Fetch rankings and upsert players."""
    async with AsyncSessionLocal() as db:
        orchestrator = SyncOrchestrator(db)
        return await orchestrator.fetch_and_persist_rankings(limit)


async def _fetch_fixtures(kind: DataKind, limit: int):
    """Fetch fixtures of one kind and reconcile them into matches."""
    async with AsyncSessionLocal() as db:
        orchestrator = SyncOrchestrator(db)
        return await orchestrator.fetch_and_persist_fixtures(kind, limit)


@celery_app.task(name="app.tasks.sync_tasks.fetch_rankings")
def fetch_rankings(limit: int = 50):
    """Celery task: Refresh player rankings."""
    return run_async(_fetch_rankings(limit))


@celery_app.task(name="app.tasks.sync_tasks.fetch_recent_matches")
def fetch_recent_matches(limit: int = 50):
    """Celery task: Fetch recent results.

    Also enqueued by the API when a pair has no stored matches yet.
    """
    result = run_async(_fetch_fixtures(DataKind.recent, limit))
    logger.info(f"fetch_recent_matches: {result}")
    return result


@celery_app.task(name="app.tasks.sync_tasks.fetch_upcoming_matches")
def fetch_upcoming_matches(limit: int = 50):
    """Celery task: Fetch upcoming fixtures."""
    return run_async(_fetch_fixtures(DataKind.upcoming, limit))
