"""Tests for absolute activity numbering, progress snapshots and unlocking."""

import pytest

from app.schemas import LastActivity, ProgressSnapshot
from app.services.progress import most_advanced

GAME = "game-x"


# ---------------------------------------------------------------------------
# absolute_activity_number
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "counts",
    [[5], [5, 3], [1, 1, 1, 1], [4, 0, 6], [2, 7, 3, 5]],
)
async def test_absolute_number_is_sum_of_preceding_levels_plus_activity(make_calculator, counts):
    calculator = make_calculator({GAME: counts})
    for level in range(1, len(counts) + 1):
        preceding = sum(counts[: level - 1])
        for activity in range(1, counts[level - 1] + 1):
            assert await calculator.absolute_activity_number(GAME, level, activity) == (
                preceding + activity
            )


async def test_absolute_number_for_level_two_activity_two(make_calculator):
    calculator = make_calculator({GAME: [5, 3]})
    assert await calculator.absolute_activity_number(GAME, 2, 2) == 7


async def test_absent_activity_counts_the_whole_level(make_calculator):
    calculator = make_calculator({GAME: [5, 3]})
    assert await calculator.absolute_activity_number(GAME, 1) == 5
    assert await calculator.absolute_activity_number(GAME, 2) == 8


async def test_level_missing_from_catalog_uses_default_count(make_calculator):
    calculator = make_calculator({GAME: [5, 3]})
    assert await calculator.absolute_activity_number(GAME, 3) == 8 + 5
    assert await calculator.absolute_activity_number(GAME, 3, 2) == 10


async def test_absolute_number_falls_back_to_raw_activity_when_catalog_fails(make_calculator):
    calculator = make_calculator(failing=True)
    assert await calculator.absolute_activity_number(GAME, 2, 4) == 4
    assert await calculator.absolute_activity_number(GAME, 2) == 0


# ---------------------------------------------------------------------------
# student_progress
# ---------------------------------------------------------------------------


async def test_progress_without_records_is_empty(make_calculator):
    calculator = make_calculator({GAME: [5, 3]})
    snapshot = await calculator.student_progress("s1", GAME, records=[])
    assert snapshot == ProgressSnapshot()
    assert snapshot.percentage == 0
    assert snapshot.last_activity is None


async def test_progress_reads_from_the_attempt_store(make_calculator, memory_attempts, make_attempt):
    memory_attempts.records.append(make_attempt(game_id=GAME, level=1, activity=4))
    memory_attempts.records.append(make_attempt(student_id="s2", game_id=GAME, level=2, activity=3))
    calculator = make_calculator({GAME: [5, 3]})

    snapshot = await calculator.student_progress("s1", GAME)
    assert snapshot.absolute_activity_number == 4
    assert snapshot.last_activity == LastActivity(level=1, activity=4)


async def test_progress_on_level_two(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [5, 3]})
    records = [
        make_attempt(game_id=GAME, level=1, activity=5),
        make_attempt(game_id=GAME, level=2, activity=2),
    ]
    snapshot = await calculator.student_progress("s1", GAME, records=records)

    assert snapshot.absolute_activity_number == 7
    assert snapshot.total_activities == 8
    assert snapshot.percentage == 87.5
    assert snapshot.last_activity == LastActivity(level=2, activity=2)


async def test_progress_is_clamped_to_one_hundred(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [5, 3]})
    records = [make_attempt(game_id=GAME, level=3, activity=9)]
    snapshot = await calculator.student_progress("s1", GAME, records=records)

    assert snapshot.absolute_activity_number == 17
    assert snapshot.percentage == 100


async def test_percentage_rounds_to_two_decimals(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [3]})
    records = [make_attempt(game_id=GAME, level=1, activity=1)]
    snapshot = await calculator.student_progress("s1", GAME, records=records)
    assert snapshot.percentage == 33.33


async def test_progress_with_empty_catalog_reports_zero_but_keeps_last_activity(
    make_calculator, make_attempt
):
    calculator = make_calculator({})
    records = [make_attempt(game_id=GAME, level=2, activity=3)]
    snapshot = await calculator.student_progress("s1", GAME, records=records)

    assert snapshot.percentage == 0
    assert snapshot.total_activities == 0
    assert snapshot.last_activity == LastActivity(level=2, activity=3)


async def test_progress_with_failing_catalog_degrades(make_calculator, make_attempt):
    calculator = make_calculator(failing=True)
    records = [make_attempt(game_id=GAME, level=2, activity=3)]
    snapshot = await calculator.student_progress("s1", GAME, records=records)

    assert snapshot.percentage == 0
    assert snapshot.absolute_activity_number == 3
    assert snapshot.last_activity == LastActivity(level=2, activity=3)


# ---------------------------------------------------------------------------
# most_advanced
# ---------------------------------------------------------------------------


def test_most_advanced_prefers_level_over_recency(make_attempt):
    higher = make_attempt(level=2, activity=1)
    later = make_attempt(level=1, activity=5)
    assert most_advanced([higher, later]) is higher


def test_most_advanced_prefers_activity_within_level(make_attempt):
    a3 = make_attempt(level=1, activity=3)
    a2 = make_attempt(level=1, activity=2)
    assert most_advanced([a3, a2]) is a3


def test_most_advanced_breaks_ties_by_latest_timestamp(make_attempt):
    first = make_attempt(level=1, activity=3)
    second = make_attempt(level=1, activity=3)
    assert most_advanced([second, first]) is second
    assert most_advanced([first, second]) is second


def test_absent_activity_outranks_explicit_activity(make_attempt):
    whole = make_attempt(level=1, activity=None)
    partial = make_attempt(level=1, activity=5)
    assert most_advanced([whole, partial]) is whole


def test_most_advanced_of_nothing():
    assert most_advanced([]) is None


# ---------------------------------------------------------------------------
# max_unlocked_level
# ---------------------------------------------------------------------------


async def test_no_completed_records_unlocks_only_level_one(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [5, 3]})
    assert await calculator.max_unlocked_level("s1", GAME, records=[]) == 1

    records = [make_attempt(game_id=GAME, level=2, activity=3, is_completed=False)]
    assert await calculator.max_unlocked_level("s1", GAME, records=records) == 1


async def test_finishing_a_level_unlocks_the_next(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [5, 3]})
    records = [make_attempt(game_id=GAME, level=1, activity=5)]
    assert await calculator.max_unlocked_level("s1", GAME, records=records) == 2


async def test_partial_level_keeps_current_level(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [5, 3]})
    records = [make_attempt(game_id=GAME, level=1, activity=3)]
    assert await calculator.max_unlocked_level("s1", GAME, records=records) == 1


async def test_level_without_activity_counts_as_finished(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [5, 3]})
    records = [make_attempt(game_id=GAME, level=1, activity=None)]
    assert await calculator.max_unlocked_level("s1", GAME, records=records) == 2


async def test_unlock_beyond_catalog_policy(make_calculator, make_attempt):
    records = [make_attempt(game_id=GAME, level=2, activity=3)]

    optimistic = make_calculator({GAME: [5, 3]})
    assert await optimistic.max_unlocked_level("s1", GAME, records=records) == 3

    bounded = make_calculator({GAME: [5, 3]}, unlock_beyond_catalog=False)
    assert await bounded.max_unlocked_level("s1", GAME, records=records) == 2


async def test_unlock_keeps_level_when_catalog_fails(make_calculator, make_attempt):
    calculator = make_calculator(failing=True)
    records = [make_attempt(game_id=GAME, level=2, activity=3)]
    assert await calculator.max_unlocked_level("s1", GAME, records=records) == 2


async def test_unlock_is_monotonic_as_records_accumulate(make_calculator, make_attempt):
    calculator = make_calculator({GAME: [3, 2, 2]})
    sequence = [
        (1, 1, True), (1, 2, False), (1, 2, True), (1, 3, True),
        (2, 1, True), (1, 1, True), (2, 2, False), (2, 2, True),
        (3, 1, False), (1, 3, True), (3, 2, True),
    ]

    records = []
    previous = await calculator.max_unlocked_level("s1", GAME, records=records)
    assert previous == 1
    for level, activity, completed in sequence:
        records.append(
            make_attempt(game_id=GAME, level=level, activity=activity, is_completed=completed)
        )
        current = await calculator.max_unlocked_level("s1", GAME, records=records)
        assert current >= previous >= 1
        previous = current

    assert previous == 4
