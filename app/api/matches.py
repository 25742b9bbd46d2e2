from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_db
from app.models import Match
from app.schemas.match import MatchResponse, MatchListResponse

router = APIRouter(prefix="/matches", tags=["matches"])

UPCOMING_LIMIT = 200
RECENT_LIMIT = 100


def _with_players(query):
    return query.options(
        selectinload(Match.player1),
        selectinload(Match.player2),
        selectinload(Match.winner),
    )


@router.get("", response_model=MatchListResponse)
async def get_matches(db: AsyncSession = Depends(get_db)):
    """
    Upcoming matches (today or later, soonest first).

    Falls back to the most recent past matches when nothing is scheduled.
    """
    result = await db.execute(
        _with_players(
            select(Match)
            .where(Match.date >= date.today())
            .order_by(Match.date.asc(), Match.id)
            .limit(UPCOMING_LIMIT)
        )
    )
    matches = result.scalars().all()
    upcoming = bool(matches)

    if not matches:
        result = await db.execute(
            _with_players(
                select(Match).order_by(Match.date.desc(), Match.id.desc()).limit(RECENT_LIMIT)
            )
        )
        matches = result.scalars().all()

    return MatchListResponse(
        items=[MatchResponse.model_validate(m) for m in matches],
        total=len(matches),
        upcoming=upcoming,
    )
