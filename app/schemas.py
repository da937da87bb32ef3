"""Pydantic models for requests, responses and the read-side domain records.

JSON payloads use camelCase field names to stay compatible with the existing
game front-end; Python code uses the snake_case attribute names.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.level_config import LevelConfig


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Attempt(CamelModel):
    """Immutable view of one stored attempt record."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    student_id: str
    game_id: str
    level: int
    activity: int | None = None
    points: int = 0
    total_points_snapshot: int = 0
    attempts: int = 0
    correct_answers: int | None = None
    total_questions: int | None = None
    completion_time_seconds: int | None = None
    is_completed: bool = False
    max_unlocked_level: int = 1
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class AttemptInput(CamelModel):
    """Submission payload.

    Fields are optional here so that missing values are reported by the
    submission service with the offending field name.
    """

    student_id: str | None = None
    game_id: str | None = None
    level: int | None = None
    activity: int | None = None
    points: int | None = None
    attempts: int | None = None
    correct_answers: int | None = None
    total_questions: int | None = None
    completion_time_seconds: int | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "completionTimeSeconds", "completionTime", "completion_time_seconds"
        ),
    )
    is_completed: bool | None = None
    max_unlocked_level: int | None = None


class Level(CamelModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    game_id: str
    level: int
    name: str
    description: str | None = None
    difficulty: str | None = None
    activities_count: int
    config: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

    @property
    def parameters(self) -> LevelConfig:
        return LevelConfig(self.config)


# ---------------------------------------------------------------------------
# Derived structures
# ---------------------------------------------------------------------------


class LastActivity(CamelModel):
    level: int
    activity: int | None = None


class ProgressSnapshot(CamelModel):
    percentage: float = 0
    absolute_activity_number: int = 0
    total_activities: int = 0
    last_activity: LastActivity | None = None


class GameProgressSnapshot(ProgressSnapshot):
    game_id: str
    max_unlocked_level: int = 1
    total_points: int = 0
    completion_rate: float = 0
    average_accuracy: int = 0
    last_activity_at: datetime | None = None


class GameProgress(CamelModel):
    completed: int = 0
    average_score: int = 0
    total_time: int = 0
    total_attempts: int = 0


class StudentAggregate(CamelModel):
    total_games_played: int = 0
    average_score: int = 0
    last_activity: str | None = None
    progress_by_game: dict[str, GameProgress] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class StudentProgressResponse(CamelModel):
    student_id: str
    total_points: int
    total_games_played: int
    games: list[GameProgressSnapshot]


class StudentGameSummary(CamelModel):
    student_id: str
    student_name: str
    max_unlocked_level: int
    total_points: int
    completion_rate: float
    average_accuracy: int
    last_activity: datetime | None = None


class GameStatistics(CamelModel):
    game_id: str
    total_students: int = 0
    average_points: float = 0
    average_accuracy: float = 0
    completion_rate: float = 0
    student_progress: list[StudentGameSummary] = Field(default_factory=list)


class CourseGameProgress(CamelModel):
    game_id: str
    average_progress: int = 0
    total_students: int = 0
    students_with_progress: int = 0


class CourseProgressByGame(CamelModel):
    course_id: str
    total_students: int = 0
    progress_by_game: list[CourseGameProgress] = Field(default_factory=list)


class GameLevels(CamelModel):
    game_id: str
    levels: list[Level]


class ReportRequest(CamelModel):
    recent_days: int | None = Field(default=None, ge=1, le=365)


class StudentReport(CamelModel):
    student_id: str
    student_name: str
    student_lastname: str
    report: str


class GeneratedText(BaseModel):
    text: str
    provider: str
    model: str
