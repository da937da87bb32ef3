"""Shared pytest fixtures for the progress service test suite."""

from collections.abc import AsyncGenerator
from datetime import timedelta
from itertools import count

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.container import Services, build_services
from app.database import Base, init_db
from app.models import Course, CourseGame, LevelDefinition, Student
from app.schemas import Attempt
from app.services.level_catalog import LevelCatalog
from app.services.progress import ProgressCalculator
from app.services.text_generator import MockTextGenerator
from main import app
from tests.fakes import BASE_TIME, FailingLevelStore, InMemoryAttemptStore, StaticLevelStore

# ---------------------------------------------------------------------------
# Async engine & session fixtures (in-memory SQLite)
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture()
async def async_engine():
    """Create a fresh in-memory async engine per test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    await init_db(engine)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def text_generator() -> MockTextGenerator:
    return MockTextGenerator()


@pytest.fixture()
def services(session_factory, text_generator) -> Services:
    """Services wired the same way the application lifespan wires them."""
    return build_services(Settings(), session_factory, text_generator=text_generator)


@pytest.fixture()
async def client(services: Services) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTPX async client wired to the FastAPI app with test services."""
    app.state.services = services

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as ac:
        yield ac

    app.state.services = None


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_attempts() -> InMemoryAttemptStore:
    return InMemoryAttemptStore()


@pytest.fixture()
def make_calculator(memory_attempts):
    """Build a ProgressCalculator over a static or failing catalog."""

    def _make(
        games: dict[str, list[int]] | None = None,
        *,
        failing: bool = False,
        unlock_beyond_catalog: bool = True,
    ) -> ProgressCalculator:
        store = FailingLevelStore() if failing else StaticLevelStore(games)
        return ProgressCalculator(
            memory_attempts,
            LevelCatalog(store),
            unlock_beyond_catalog=unlock_beyond_catalog,
        )

    return _make


# ---------------------------------------------------------------------------
# Convenience / data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_attempt():
    """Factory for Attempt records with increasing timestamps."""
    seq = count(1)

    def _make(**overrides) -> Attempt:
        n = next(seq)
        created_at = overrides.pop("created_at", BASE_TIME + timedelta(minutes=n))
        data = {
            "id": f"rec-{n}",
            "student_id": "s1",
            "game_id": "game-escritura",
            "level": 1,
            "activity": 1,
            "points": 10,
            "total_points_snapshot": 10,
            "attempts": 1,
            "is_completed": True,
            "max_unlocked_level": 1,
            "created_at": created_at,
            "updated_at": created_at,
        }
        data.update(overrides)
        return Attempt(**data)

    return _make


@pytest.fixture()
def add_levels(session_factory):
    """Insert level definitions: ``await add_levels("game-x", [5, 3])``."""

    async def _add(game_id: str, counts: list[int], *, inactive: tuple[int, ...] = ()) -> None:
        async with session_factory() as session:
            for i, n in enumerate(counts, start=1):
                session.add(
                    LevelDefinition(
                        id=f"{game_id}-level-{i}",
                        game_id=game_id,
                        level=i,
                        name=f"Nivel {i}",
                        difficulty="Fácil",
                        activities_count=n,
                        config={"color": "blue"},
                        is_active=i not in inactive,
                    )
                )
            await session.commit()

    return _add


@pytest.fixture()
async def roster(session_factory) -> dict:
    """course-1 with two students and two active games, plus an outsider in course-2."""
    async with session_factory() as session:
        session.add_all([
            Course(id="course-1", name="3º A"),
            Course(id="course-2", name="3º B"),
        ])
        await session.flush()
        session.add_all([
            Student(id="s1", name="Ana", lastname="Pérez", course_id="course-1"),
            Student(id="s2", name="Bruno", lastname="Gómez", course_id="course-1"),
            Student(id="s3", name="Carla", lastname="Ruiz", course_id="course-2"),
            CourseGame(id="cg-1", course_id="course-1", game_id="game-escritura"),
            CourseGame(id="cg-2", course_id="course-1", game_id="game-ordenamiento"),
            CourseGame(
                id="cg-3", course_id="course-1", game_id="game-escala", is_active=False
            ),
        ])
        await session.commit()
    return {"course_id": "course-1", "students": ["s1", "s2"]}
