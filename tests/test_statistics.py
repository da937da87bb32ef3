"""Tests for the pure statistics reductions."""

import random

from app.schemas import GameProgress, StudentAggregate
from app.services.statistics import (
    accuracy,
    aggregate,
    average_accuracy,
    completion_rate,
    normalize_game_id,
)


def test_normalize_game_id():
    assert normalize_game_id("game-escritura") == "escritura"
    assert normalize_game_id("escritura") == "escritura"
    assert normalize_game_id("my-game-x") == "my-game-x"


def test_accuracy_requires_question_data(make_attempt):
    assert accuracy(make_attempt(correct_answers=4, total_questions=5)) == 80
    assert accuracy(make_attempt(correct_answers=None, total_questions=5)) is None
    assert accuracy(make_attempt(correct_answers=3, total_questions=0)) is None
    assert accuracy(make_attempt()) is None


def test_empty_input_gives_empty_aggregate():
    result = aggregate([])
    assert result == StudentAggregate()
    assert result.total_games_played == 0
    assert result.average_score == 0
    assert result.last_activity is None
    assert result.progress_by_game == {}


def test_two_games_rollup(make_attempt):
    records = [
        make_attempt(
            game_id="game-escritura", correct_answers=8, total_questions=10,
            is_completed=True, completion_time_seconds=60, attempts=2,
        ),
        make_attempt(
            game_id="game-escritura", correct_answers=6, total_questions=10,
            is_completed=False, completion_time_seconds=30, attempts=1,
        ),
        make_attempt(
            game_id="game-ordenamiento", correct_answers=10, total_questions=10,
            is_completed=True, completion_time_seconds=None, attempts=3,
        ),
    ]
    result = aggregate(records)

    assert result.total_games_played == 2
    assert result.average_score == 80
    assert result.progress_by_game["escritura"] == GameProgress(
        completed=1, average_score=70, total_time=90, total_attempts=3
    )
    assert result.progress_by_game["ordenamiento"] == GameProgress(
        completed=1, average_score=100, total_time=0, total_attempts=3
    )


def test_records_without_question_data_do_not_lower_accuracy(make_attempt):
    records = [
        make_attempt(correct_answers=None, total_questions=10),
        make_attempt(correct_answers=8, total_questions=10),
    ]
    assert average_accuracy(records) == 80
    assert aggregate(records).average_score == 80
    assert aggregate(records).progress_by_game["escritura"].average_score == 80


def test_average_accuracy_without_any_question_data(make_attempt):
    assert average_accuracy([make_attempt(), make_attempt()]) == 0


def test_prefixed_and_bare_game_ids_share_a_group(make_attempt):
    records = [
        make_attempt(game_id="game-escala"),
        make_attempt(game_id="escala"),
    ]
    result = aggregate(records)
    assert result.total_games_played == 1
    assert result.progress_by_game["escala"].completed == 2


def test_last_activity_is_latest_timestamp(make_attempt):
    records = [make_attempt(), make_attempt(), make_attempt()]
    result = aggregate(records)
    assert result.last_activity == records[-1].created_at.isoformat()


def test_aggregate_is_order_independent(make_attempt):
    records = [
        make_attempt(
            game_id=game,
            correct_answers=correct,
            total_questions=10,
            is_completed=correct >= 5,
            completion_time_seconds=correct * 7,
            attempts=correct % 3,
        )
        for game in ("game-escritura", "game-escala", "game-calculos")
        for correct in (1, 3, 7, 9, 10)
    ]
    expected = aggregate(records)

    rng = random.Random(7)
    for _ in range(5):
        shuffled = list(records)
        rng.shuffle(shuffled)
        assert aggregate(shuffled) == expected
    assert aggregate(list(reversed(records))) == expected


def test_completion_rate(make_attempt):
    assert completion_rate([]) == 0
    records = [
        make_attempt(is_completed=True),
        make_attempt(is_completed=False),
        make_attempt(is_completed=False),
    ]
    assert completion_rate(records) == 33.33
