from fastapi import APIRouter

from app.api.players import router as players_router
from app.api.matches import router as matches_router
from app.api.predictions import router as predictions_router
from app.api.sync import router as sync_router

api_router = APIRouter()

# Local data
api_router.include_router(players_router)
api_router.include_router(matches_router)
api_router.include_router(predictions_router)

# Remote sources
api_router.include_router(sync_router)
