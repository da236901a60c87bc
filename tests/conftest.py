"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from mazebot.main import app
from mazebot.db.database import Base, get_db
from mazebot.models.maze import Maze
from mazebot.core import parse_maze_text
from mazebot.api.deps import limiter
from mazebot.services.run_service import get_run_service

# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


TUTORIAL_MAZE = """X XXXXXXX
X   X   X
X X X X X
X X   X X
X XXXXX X
X       X
XXXXXXX X"""

CORRIDOR_MAZE = """X X
X X
X X
X X"""

SEALED_MAZE = """X XXX
X XXX
XXXXX
XXOXX"""


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_session) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_runs():
    """Drop live runs and rate limit counters between tests."""
    registry = get_run_service().registry
    registry.clear()
    limiter.reset()
    yield
    registry.clear()


async def add_maze(session: AsyncSession, grid_data: str, name: str) -> Maze:
    """Store a parsed maze directly in the database."""
    maze = Maze(**parse_maze_text(grid_data, name=name).to_dict())
    session.add(maze)
    await session.commit()
    await session.refresh(maze)
    return maze


@pytest_asyncio.fixture
async def tutorial_maze(test_session) -> Maze:
    """Create the tutorial maze."""
    return await add_maze(test_session, TUTORIAL_MAZE, "Tutorial")


@pytest_asyncio.fixture
async def corridor_maze(test_session) -> Maze:
    """Create a straight corridor maze."""
    return await add_maze(test_session, CORRIDOR_MAZE, "Corridor")


@pytest_asyncio.fixture
async def sealed_maze(test_session) -> Maze:
    """Create a maze whose exit cannot be reached."""
    return await add_maze(test_session, SEALED_MAZE, "Sealed")
