from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.models import Match, Player
from app.schemas.player import PlayerResponse, PlayerListResponse, PlayerDetailResponse
from app.utils.error_messages import get_error_message

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", response_model=PlayerListResponse)
async def get_players(
    favorites_only: bool = Query(default=False),
    limit: int = Query(default=100, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Get players ordered by rank (unranked last)."""
    query = select(Player)
    if favorites_only:
        query = query.where(Player.favorite.is_(True))

    # Count total
    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = (
        query.order_by(Player.rank.is_(None), Player.rank, Player.name)
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(query)
    players = result.scalars().all()

    return PlayerListResponse(
        items=[PlayerResponse.model_validate(p) for p in players],
        total=total,
    )


async def _get_player_or_404(db: AsyncSession, player_id: int, lang: str) -> Player:
    player = await db.get(Player, player_id)
    if player is None:
        raise HTTPException(status_code=404, detail=get_error_message("player_not_found", lang))
    return player


@router.get("/{player_id}", response_model=PlayerDetailResponse)
async def get_player(
    player_id: int,
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Get player by ID with win percentage over decided matches."""
    player = await _get_player_or_404(db, player_id, lang)

    result = await db.execute(
        select(
            func.count(Match.id),
            func.count(Match.id).filter(Match.winner_id == player.id),
        ).where(
            or_(Match.player1_id == player.id, Match.player2_id == player.id),
            Match.winner_id.is_not(None),
        )
    )
    played, won = result.one()

    return PlayerDetailResponse(
        id=player.id,
        name=player.name,
        country=player.country,
        rank=player.rank,
        points=player.points,
        favorite=player.favorite,
        matches_played=played,
        matches_won=won,
        win_percentage=round(won / played * 100, 1) if played else None,
        updated_at=player.updated_at,
    )


@router.post("/{player_id}/favorite", response_model=PlayerResponse)
async def toggle_favorite(
    player_id: int,
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Toggle the favorite flag."""
    player = await _get_player_or_404(db, player_id, lang)
    player.favorite = not player.favorite
    await db.commit()
    await db.refresh(player)
    return PlayerResponse.model_validate(player)
