import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from kombu.exceptions import OperationalError
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_db
from app.models import Match, Player, Prediction
from app.schemas.match import PairMatchItem, PairMatchesResponse
from app.schemas.prediction import (
    FutureMatchItem,
    FutureMatchesResponse,
    GeneratePredictionsResponse,
    PredictionDetailResponse,
    PredictionPreviewResponse,
    PredictionRequest,
    PredictionResponse,
    RecentPredictionItem,
)
from app.services.match_predictor import MatchPredictor, ProbabilityResult
from app.services.sync import SyncOrchestrator
from app.tasks.sync_tasks import fetch_recent_matches
from app.utils.error_messages import get_error_message
from app.utils.surfaces import display_surface

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/predictions", tags=["predictions"])

RECENT_PREDICTIONS_LIMIT = 10
UPCOMING_PAIR_LIMIT = 10
PAIR_MATCHES_LIMIT = 50
BACKGROUND_FETCH_LIMIT = 50

LOCAL_SOURCE = "local"
QUEUED_SOURCE = "queued"


def percent(value: float) -> float:
    return round(value * 100, 1)


def _pair_filter(player1_id: int, player2_id: int):
    return or_(
        and_(Match.player1_id == player1_id, Match.player2_id == player2_id),
        and_(Match.player1_id == player2_id, Match.player2_id == player1_id),
    )


async def _get_pair_or_404(
    db: AsyncSession, player1_id: int, player2_id: int, lang: str
) -> tuple[Player, Player]:
    player1 = await db.get(Player, player1_id)
    player2 = await db.get(Player, player2_id)
    if player1 is None or player2 is None:
        raise HTTPException(status_code=404, detail=get_error_message("player_not_found", lang))
    return player1, player2


def _preview_response(player1: Player, player2: Player, result: ProbabilityResult) -> dict:
    return {
        "player1": player1.name,
        "player2": player2.name,
        "player1_probability": percent(result.player1_probability),
        "player2_probability": percent(result.player2_probability),
        "predicted_winner": result.predicted_winner.name,
        "confidence": percent(result.confidence),
    }


async def _upcoming_for_pair(
    db: AsyncSession, player1: Player, player2: Player
) -> tuple[list[dict], str]:
    """Stored future matches of the pair, else fixtures from the upcoming chain."""
    result = await db.execute(
        select(Match)
        .where(_pair_filter(player1.id, player2.id), Match.date >= date.today())
        .order_by(Match.date.asc())
        .limit(UPCOMING_PAIR_LIMIT)
    )
    stored = result.scalars().all()
    if stored:
        return [
            {"tournament": m.tournament, "date": m.date, "surface": m.surface}
            for m in stored
        ], LOCAL_SOURCE

    orchestrator = SyncOrchestrator(db)
    fetched = await orchestrator.fetch_upcoming_for_pair(player1, player2, UPCOMING_PAIR_LIMIT)
    return [
        {"tournament": f.tournament, "date": f.date, "surface": f.surface}
        for f in fetched.records
    ], fetched.source


@router.post("/predict", response_model=PredictionResponse)
async def predict(
    request: PredictionRequest,
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Predict the winner of a match and record the prediction."""
    player1, player2 = await _get_pair_or_404(db, request.player1_id, request.player2_id, lang)
    if player1.id == player2.id:
        raise HTTPException(status_code=422, detail=get_error_message("same_player", lang))

    predictor = MatchPredictor(db)
    result = await predictor.predict_match_winner(player1, player2)
    return PredictionResponse(
        **_preview_response(player1, player2, result),
        persisted=result.prediction is not None,
        prediction_id=result.prediction.id if result.prediction is not None else None,
        message=None if result.prediction is not None else get_error_message("prediction_not_saved", lang),
    )


@router.post("/preview", response_model=PredictionPreviewResponse)
async def preview(
    request: PredictionRequest,
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Probabilities for a pair without recording anything."""
    player1, player2 = await _get_pair_or_404(db, request.player1_id, request.player2_id, lang)
    if player1.id == player2.id:
        raise HTTPException(status_code=422, detail=get_error_message("same_player", lang))

    predictor = MatchPredictor(db)
    result = await predictor.predict_match_probabilities(player1, player2)
    return PredictionPreviewResponse(**_preview_response(player1, player2, result))


@router.get("/recent", response_model=list[RecentPredictionItem])
async def recent_predictions(db: AsyncSession = Depends(get_db)):
    """Last recorded predictions, newest first."""
    result = await db.execute(
        select(Prediction)
        .options(
            selectinload(Prediction.player1),
            selectinload(Prediction.player2),
            selectinload(Prediction.predicted_winner),
        )
        .order_by(Prediction.prediction_date.desc(), Prediction.id.desc())
        .limit(RECENT_PREDICTIONS_LIMIT)
    )
    return [
        RecentPredictionItem(
            id=p.id,
            player1=p.player1.name,
            player2=p.player2.name,
            predicted_winner=p.predicted_winner.name,
            confidence=percent(p.confidence),
            prediction_date=p.prediction_date,
        )
        for p in result.scalars().all()
    ]


@router.get("/future-matches", response_model=FutureMatchesResponse)
async def future_matches(
    player1_id: int,
    player2_id: int,
    only_next: bool = Query(default=False),
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Upcoming matches between two players, each with a preview prediction."""
    player1, player2 = await _get_pair_or_404(db, player1_id, player2_id, lang)
    fixtures, source = await _upcoming_for_pair(db, player1, player2)

    # Same players for every fixture, so one preview serves all
    predictor = MatchPredictor(db)
    probs = await predictor.predict_match_probabilities(player1, player2)
    preview = _preview_response(player1, player2, probs)

    items = [FutureMatchItem(**fixture, **preview) for fixture in fixtures]
    if only_next:
        items = items[:1]
    return FutureMatchesResponse(source=source, upcoming=items)


@router.post("/generate", response_model=GeneratePredictionsResponse)
async def generate_predictions(
    request: PredictionRequest,
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Record one prediction per upcoming fixture of the pair."""
    player1, player2 = await _get_pair_or_404(db, request.player1_id, request.player2_id, lang)
    if player1.id == player2.id:
        raise HTTPException(status_code=422, detail=get_error_message("same_player", lang))

    fixtures, source = await _upcoming_for_pair(db, player1, player2)
    predictor = MatchPredictor(db)
    created = 0
    for _ in fixtures:
        result = await predictor.predict_match_winner(player1, player2)
        if result.prediction is not None:
            created += 1

    return GeneratePredictionsResponse(created=created, fixtures=len(fixtures), source=source)


@router.get("/recent-matches", response_model=PairMatchesResponse)
async def recent_matches(
    player1_id: int,
    player2_id: int,
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """
    Stored matches between two players, newest first.

    When none are stored yet a background fetch is enqueued and the
    response says ``queued``; scraping inline would time the request out.
    """
    player1, player2 = await _get_pair_or_404(db, player1_id, player2_id, lang)

    result = await db.execute(
        select(Match)
        .options(
            selectinload(Match.player1),
            selectinload(Match.player2),
            selectinload(Match.winner),
        )
        .where(_pair_filter(player1.id, player2.id))
        .order_by(Match.date.desc(), Match.id.desc())
        .limit(PAIR_MATCHES_LIMIT)
    )
    matches = result.scalars().all()

    if not matches:
        try:
            fetch_recent_matches.delay(BACKGROUND_FETCH_LIMIT)
        except OperationalError as e:
            logger.warning("Could not enqueue background fetch for %s vs %s: %s", player1.name, player2.name, e)
        else:
            logger.info(
                "No stored matches for %s vs %s, background fetch enqueued",
                player1.name, player2.name,
            )
        return PairMatchesResponse(
            source=QUEUED_SOURCE,
            matches=[],
            message=get_error_message("matches_queued", lang),
        )

    return PairMatchesResponse(
        source=LOCAL_SOURCE,
        matches=[
            PairMatchItem(
                id=m.id,
                player1=m.player1.name,
                player2=m.player2.name,
                winner=m.winner.name if m.winner else None,
                tournament=m.tournament,
                date=m.date,
                surface=display_surface(m.surface, m.id),
                score=m.score,
                status=m.status,
            )
            for m in matches
        ],
    )


@router.get("/{prediction_id}", response_model=PredictionDetailResponse)
async def get_prediction(
    prediction_id: int,
    lang: str = Query("es", pattern="^(es|en)$"),
    db: AsyncSession = Depends(get_db),
):
    """Stored prediction with probabilities derived from its confidence."""
    result = await db.execute(
        select(Prediction)
        .options(
            selectinload(Prediction.player1),
            selectinload(Prediction.player2),
            selectinload(Prediction.predicted_winner),
        )
        .where(Prediction.id == prediction_id)
    )
    prediction = result.scalar_one_or_none()
    if prediction is None:
        raise HTTPException(status_code=404, detail=get_error_message("prediction_not_found", lang))

    if prediction.predicted_winner_id == prediction.player1_id:
        p1, p2 = prediction.confidence, 1 - prediction.confidence
    else:
        p1, p2 = 1 - prediction.confidence, prediction.confidence

    return PredictionDetailResponse(
        id=prediction.id,
        player1=prediction.player1.name,
        player2=prediction.player2.name,
        player1_probability=percent(p1),
        player2_probability=percent(p2),
        predicted_winner=prediction.predicted_winner.name,
        confidence=percent(prediction.confidence),
        prediction_date=prediction.prediction_date,
    )
