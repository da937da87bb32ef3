"""Level catalog - read-only access to each game's ordered level list."""

import logging
from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.exceptions import StoreUnavailableError
from app.models.level_definition import LevelDefinition
from app.schemas import Level

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITIES_PER_LEVEL = 5

# ---------------------------------------------------------------------------
# Arithmetic game numbering
# ---------------------------------------------------------------------------
# The calculos game stores three operations under a single game id using
# disjoint level ranges. Stored attempts and catalogs depend on this layout.
ARITHMETIC_GAME_KEY = "calculos"
LEVELS_PER_OPERATION = 3
ARITHMETIC_OPERATIONS: tuple[str, ...] = ("suma", "resta", "multiplicacion")


def operation_for_level(level: int) -> str | None:
    """Return the arithmetic operation a calculos level belongs to."""
    if level < 1:
        return None
    index = (level - 1) // LEVELS_PER_OPERATION
    if index >= len(ARITHMETIC_OPERATIONS):
        return None
    return ARITHMETIC_OPERATIONS[index]


def operation_level_range(operation: str) -> range:
    """Stored level numbers used by *operation* (e.g. resta -> 4..6)."""
    index = ARITHMETIC_OPERATIONS.index(operation)
    first = index * LEVELS_PER_OPERATION + 1
    return range(first, first + LEVELS_PER_OPERATION)


def display_level(level: int) -> int:
    """1-based position of a calculos level inside its operation."""
    return (level - 1) % LEVELS_PER_OPERATION + 1


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class LevelStore(ABC):
    """Abstract source of level definitions."""

    @abstractmethod
    async def query_by_game(self, game_id: str) -> list[Level]:
        """Return every level definition of a game, in any order."""


class SqlLevelStore(LevelStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def query_by_game(self, game_id: str) -> list[Level]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(LevelDefinition)
                    .where(LevelDefinition.game_id == game_id)
                    .order_by(LevelDefinition.level)
                )
                return [Level.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Failed to read levels for game %s: %s", game_id, e)
            raise StoreUnavailableError(f"Could not read levels for game {game_id}") from e


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class LevelCatalog:
    """Per-game level arithmetic on top of a ``LevelStore``.

    Unknown games simply have no levels. Store failures are raised as
    ``StoreUnavailableError`` and each caller decides how to degrade.
    """

    def __init__(
        self,
        store: LevelStore,
        default_activities: int = DEFAULT_ACTIVITIES_PER_LEVEL,
    ) -> None:
        self._store = store
        self.default_activities = default_activities

    async def levels_for_game(self, game_id: str, only_active: bool = False) -> list[Level]:
        levels = sorted(await self._store.query_by_game(game_id), key=lambda lv: lv.level)
        if only_active:
            levels = [lv for lv in levels if lv.is_active]
        return levels

    async def activities_count(
        self, game_id: str, level: int, default: int | None = None
    ) -> int:
        fallback = self.default_activities if default is None else default
        for lv in await self.levels_for_game(game_id):
            if lv.level == level:
                return lv.activities_count
        return fallback

    async def total_activities(self, game_id: str) -> int:
        return sum(lv.activities_count for lv in await self.levels_for_game(game_id))
