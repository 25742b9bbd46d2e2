import asyncio
import logging
from contextlib import asynccontextmanager
from contextlib import suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import engine, AsyncSessionLocal
from app.services.sources.records import DataKind
from app.services.sync import SyncOrchestrator

settings = get_settings()
logger = logging.getLogger(__name__)

STARTUP_SCRAPE_DELAY_SECONDS = 5


async def startup_scrape() -> None:
    """Populate upcoming fixtures, then recent results, once the app is up."""
    await asyncio.sleep(STARTUP_SCRAPE_DELAY_SECONDS)
    try:
        async with AsyncSessionLocal() as db:
            orchestrator = SyncOrchestrator(db)
            limit = settings.startup_scrape_limit
            result = await orchestrator.fetch_and_persist_fixtures(DataKind.upcoming, limit)
            logger.info(f"Startup scrape: {result['count']} upcoming matches from {result['source']}")
            if result["count"] == 0:
                result = await orchestrator.fetch_and_persist_fixtures(DataKind.recent, limit)
                logger.info(f"Startup scrape: {result['count']} recent matches from {result['source']}")
    except Exception as e:
        logger.error(f"Startup scrape failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    scrape_task = None
    if settings.startup_scrape and not settings.force_sample:
        scrape_task = asyncio.create_task(startup_scrape())
    else:
        logger.info(
            "Startup scrape skipped (STARTUP_SCRAPE=%s, FORCE_SAMPLE=%s)",
            settings.startup_scrape, settings.force_sample,
        )
    yield
    # Shutdown
    if scrape_task is not None:
        scrape_task.cancel()
        with suppress(asyncio.CancelledError):
            await scrape_task

    await engine.dispose()


app = FastAPI(
    title="Tennis Predictor",
    description="Tennis rankings, fixtures and match outcome predictions",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
_origins = (
    settings.allowed_origins.split(",")
    if settings.allowed_origins != "*"
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Import and include routers after app is created
from app.api.router import api_router
app.include_router(api_router, prefix="/api/v1")
