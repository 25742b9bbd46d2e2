import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.services.sources.records import DataKind
from app.services.sync import SyncOrchestrator
from app.schemas.sync import SyncResponse, SyncStatus
from app.utils.error_messages import get_error_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])

FIXTURE_KINDS = {DataKind.recent.value, DataKind.upcoming.value}


@router.post("/rankings", response_model=SyncResponse)
async def sync_rankings(
    limit: int = Query(default=50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """Fetch rankings from the first source that answers and update players."""
    try:
        orchestrator = SyncOrchestrator(db)
        details = await orchestrator.fetch_and_persist_rankings(limit)

        return SyncResponse(
            status=SyncStatus.SUCCESS,
            message=f"Rankings synchronization completed: {details['count']} players updated",
            details=details,
        )
    except Exception as e:
        logger.exception("Rankings sync failed")
        return SyncResponse(
            status=SyncStatus.FAILED,
            message=f"Rankings synchronization failed: {str(e)}",
            details=None,
        )


@router.post("/matches", response_model=SyncResponse)
async def sync_matches(
    kind: str = Query(default=DataKind.recent.value),
    limit: int = Query(default=50, ge=1, le=500),
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Fetch recent results or upcoming fixtures and reconcile them into matches."""
    if kind not in FIXTURE_KINDS:
        return SyncResponse(
            status=SyncStatus.FAILED,
            message=get_error_message("unknown_kind", lang),
            details={"kind": kind},
        )

    try:
        orchestrator = SyncOrchestrator(db)
        details = await orchestrator.fetch_and_persist_fixtures(DataKind(kind), limit)

        return SyncResponse(
            status=SyncStatus.SUCCESS,
            message=f"Matches synchronization completed: {details['count']} {kind} matches synced",
            details={**details, "kind": kind},
        )
    except Exception as e:
        logger.exception("Matches sync failed")
        return SyncResponse(
            status=SyncStatus.FAILED,
            message=f"Matches synchronization failed: {str(e)}",
            details=None,
        )
