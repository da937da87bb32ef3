"""Progress calculator - percentage and level-unlock decisions per game.

Positions are counted over the concatenation of every level's activities:
with activity counts ``[5, 3]``, level 2 activity 2 is activity 7 of 8.

Catalog failures never bubble out of this module: each operation falls back
to a documented default and logs a warning instead.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from app.exceptions import StoreUnavailableError
from app.schemas import Attempt, LastActivity, ProgressSnapshot
from app.services.attempt_store import AttemptStore
from app.services.level_catalog import LevelCatalog

logger = logging.getLogger(__name__)


def most_advanced(records: Sequence[Attempt]) -> Attempt | None:
    """Highest level, then highest activity, then most recent record.

    A record without an activity stands for a fully completed level and
    outranks any explicit activity on the same level.
    """
    if not records:
        return None
    return max(
        records,
        key=lambda r: (
            r.level,
            r.activity is None,
            r.activity or 0,
            r.created_at,
        ),
    )


class ProgressCalculator:
    def __init__(
        self,
        attempts: AttemptStore,
        catalog: LevelCatalog,
        unlock_beyond_catalog: bool = True,
    ) -> None:
        self._attempts = attempts
        self._catalog = catalog
        self.unlock_beyond_catalog = unlock_beyond_catalog

    async def absolute_activity_number(
        self, game_id: str, level: int, activity: int | None = None
    ) -> int:
        """Position of (level, activity) in the game's full activity sequence."""
        try:
            levels = await self._catalog.levels_for_game(game_id)
        except StoreUnavailableError as e:
            logger.warning(
                "Catalog unavailable for game %s, using raw activity number: %s", game_id, e
            )
            return activity or 0

        preceding = sum(lv.activities_count for lv in levels if lv.level < level)
        if activity is None:
            current = next((lv for lv in levels if lv.level == level), None)
            activity = (
                current.activities_count if current else self._catalog.default_activities
            )
        return preceding + activity

    async def student_progress(
        self,
        student_id: str,
        game_id: str,
        records: Sequence[Attempt] | None = None,
    ) -> ProgressSnapshot:
        """Snapshot of how far the student got in *game_id*.

        ``records`` may carry the already-fetched log for this student and game.
        """
        if records is None:
            records = await self._attempts.query_by_student_and_game(student_id, game_id)

        latest = most_advanced(records)
        if latest is None:
            return ProgressSnapshot()

        last_activity = LastActivity(level=latest.level, activity=latest.activity)
        absolute = await self.absolute_activity_number(game_id, latest.level, latest.activity)

        try:
            total = await self._catalog.total_activities(game_id)
        except StoreUnavailableError as e:
            logger.warning("Catalog unavailable for game %s, progress undefined: %s", game_id, e)
            total = 0

        if total == 0:
            # An attempt exists but the game has no measurable length.
            return ProgressSnapshot(
                percentage=0,
                absolute_activity_number=absolute,
                total_activities=0,
                last_activity=last_activity,
            )

        percentage = min(100.0, round(absolute / total * 100, 2))
        return ProgressSnapshot(
            percentage=percentage,
            absolute_activity_number=absolute,
            total_activities=total,
            last_activity=last_activity,
        )

    async def max_unlocked_level(
        self,
        student_id: str,
        game_id: str,
        records: Sequence[Attempt] | None = None,
    ) -> int:
        """Highest level the student may play. Level 1 is always open."""
        if records is None:
            records = await self._attempts.query_by_student_and_game(student_id, game_id)

        completed = [r for r in records if r.is_completed]
        if not completed:
            return 1

        top_level = max(r.level for r in completed)
        best = most_advanced([r for r in completed if r.level == top_level])

        try:
            levels = await self._catalog.levels_for_game(game_id)
        except StoreUnavailableError as e:
            logger.warning(
                "Catalog unavailable for game %s, keeping level %d: %s", game_id, top_level, e
            )
            return top_level

        current = next((lv for lv in levels if lv.level == top_level), None)
        required = current.activities_count if current else self._catalog.default_activities

        if best.activity is not None and best.activity < required:
            return top_level

        if not self.unlock_beyond_catalog and not any(
            lv.level == top_level + 1 for lv in levels
        ):
            return top_level
        return top_level + 1
