import pytest
from datetime import date, timedelta
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base
from app.api.deps import get_db  # Import from where routes actually use it
from app.models import Player, Match, MatchStatus, MatchSource


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# Note: Using pytest-asyncio's built-in event_loop fixture (asyncio_mode = auto)


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture(scope="function")
async def client(test_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with overridden database dependency."""

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# --- Data Fixtures ---

@pytest.fixture
async def sample_players(test_session) -> list[Player]:
    """Create three ranked players."""
    players = [
        Player(name="Jannik Sinner", country="Italy", rank=1, points=11830),
        Player(name="Carlos Alcaraz", country="Spain", rank=2, points=8850),
        Player(name="Alexander Zverev", country="Germany", rank=3, points=7500),
    ]
    test_session.add_all(players)
    await test_session.commit()
    for player in players:
        await test_session.refresh(player)
    return players


@pytest.fixture
async def unranked_player(test_session) -> Player:
    """Create a player without rank or points."""
    player = Player(name="Local Qualifier")
    test_session.add(player)
    await test_session.commit()
    await test_session.refresh(player)
    return player


@pytest.fixture
async def sample_matches(test_session, sample_players) -> list[Match]:
    """Two finished meetings won by Sinner and one upcoming fixture."""
    sinner, alcaraz, _ = sample_players
    today = date.today()
    matches = [
        Match(
            player1_id=sinner.id,
            player2_id=alcaraz.id,
            winner_id=sinner.id,
            tournament="US Open",
            date=today - timedelta(days=30),
            surface="Hard",
            score="6-4 6-3",
            status=MatchStatus.finished.value,
            source=MatchSource.espn.value,
            external_id="401",
        ),
        Match(
            player1_id=alcaraz.id,
            player2_id=sinner.id,
            winner_id=sinner.id,
            tournament="Wimbledon",
            date=today - timedelta(days=60),
            surface="Grass",
            score="7-6 6-4",
            status=MatchStatus.finished.value,
            source=MatchSource.espn.value,
            external_id="402",
        ),
        Match(
            player1_id=sinner.id,
            player2_id=alcaraz.id,
            tournament="ATP Finals",
            date=today + timedelta(days=10),
            surface="Hard",
            status=MatchStatus.upcoming.value,
            source=MatchSource.scores365.value,
        ),
    ]
    test_session.add_all(matches)
    await test_session.commit()
    for match in matches:
        await test_session.refresh(match)
    return matches
