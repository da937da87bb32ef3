"""Statistics aggregator - pure reductions over attempt records.

Nothing here performs I/O. Results do not depend on the order of the input
list: sums use ``math.fsum`` and ties on ``created_at`` yield the same
timestamp whichever record wins.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence

from app.schemas import Attempt, GameProgress, StudentAggregate

GAME_ID_PREFIX = "game-"


def normalize_game_id(game_id: str) -> str:
    """Grouping key for a game: the stored id without its ``game-`` prefix."""
    if game_id.startswith(GAME_ID_PREFIX):
        return game_id[len(GAME_ID_PREFIX):]
    return game_id


def accuracy(record: Attempt) -> float | None:
    """Percentage of correct answers, or None when the record has no question data."""
    if not record.total_questions or record.total_questions <= 0:
        return None
    if record.correct_answers is None:
        return None
    return record.correct_answers / record.total_questions * 100


def average_accuracy(records: Iterable[Attempt]) -> int:
    """Mean accuracy, rounded; records without question data are left out."""
    scores = [score for score in map(accuracy, records) if score is not None]
    if not scores:
        return 0
    return round(math.fsum(scores) / len(scores))


def completion_rate(records: Sequence[Attempt]) -> float:
    """Share of records marked completed, as a percentage."""
    if not records:
        return 0.0
    completed = sum(1 for r in records if r.is_completed)
    return round(completed / len(records) * 100, 2)


def aggregate(records: Sequence[Attempt]) -> StudentAggregate:
    """Reduce a slice of attempt records into per-game rollups."""
    if not records:
        return StudentAggregate()

    groups: dict[str, list[Attempt]] = defaultdict(list)
    for record in records:
        groups[normalize_game_id(record.game_id)].append(record)

    latest = max(records, key=lambda r: r.created_at)

    return StudentAggregate(
        total_games_played=len(groups),
        average_score=average_accuracy(records),
        last_activity=latest.created_at.isoformat(),
        progress_by_game={
            key: _game_progress(group) for key, group in sorted(groups.items())
        },
    )


def _game_progress(records: list[Attempt]) -> GameProgress:
    return GameProgress(
        completed=sum(1 for r in records if r.is_completed),
        average_score=average_accuracy(records),
        total_time=sum(r.completion_time_seconds or 0 for r in records),
        total_attempts=sum(r.attempts for r in records),
    )
