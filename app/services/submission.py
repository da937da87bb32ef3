"""Submission service - validates an attempt and appends it to the log."""

import logging

from app.exceptions import AttemptValidationError
from app.schemas import Attempt, AttemptInput
from app.services.attempt_store import AttemptDraft, AttemptStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("student_id", "game_id", "level", "points", "attempts", "is_completed")


class SubmissionService:
    def __init__(self, attempts: AttemptStore) -> None:
        self._attempts = attempts

    async def submit(self, payload: AttemptInput) -> Attempt:
        """Validate *payload* and persist it as a new attempt record.

        Store failures propagate: a lost write is never acceptable here.
        """
        draft = self.validate(payload)
        record = await self._attempts.append(draft)
        logger.info(
            "Stored attempt %s student=%s game=%s level=%d activity=%s total=%d",
            record.id,
            record.student_id,
            record.game_id,
            record.level,
            record.activity,
            record.total_points_snapshot,
        )
        return record

    @staticmethod
    def validate(payload: AttemptInput) -> AttemptDraft:
        for name in REQUIRED_FIELDS:
            value = getattr(payload, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise AttemptValidationError(name, "is required")

        if payload.level < 1:
            raise AttemptValidationError("level", "must be greater than or equal to 1")
        if payload.activity is not None and payload.activity < 1:
            raise AttemptValidationError("activity", "must be greater than or equal to 1")
        if payload.points < 0:
            raise AttemptValidationError("points", "must be greater than or equal to 0")
        if payload.attempts < 0:
            raise AttemptValidationError("attempts", "must be greater than or equal to 0")

        for name in ("correct_answers", "total_questions", "completion_time_seconds"):
            value = getattr(payload, name)
            if value is not None and value < 0:
                raise AttemptValidationError(name, "must be greater than or equal to 0")

        if (
            payload.correct_answers is not None
            and payload.total_questions is not None
            and payload.correct_answers > payload.total_questions
        ):
            raise AttemptValidationError(
                "correct_answers", "cannot be greater than total_questions"
            )

        if payload.max_unlocked_level is not None and payload.max_unlocked_level < 1:
            raise AttemptValidationError(
                "max_unlocked_level", "must be greater than or equal to 1"
            )

        return AttemptDraft(
            student_id=payload.student_id.strip(),
            game_id=payload.game_id.strip(),
            level=payload.level,
            activity=payload.activity,
            points=payload.points,
            attempts=payload.attempts,
            correct_answers=payload.correct_answers,
            total_questions=payload.total_questions,
            completion_time_seconds=payload.completion_time_seconds,
            is_completed=payload.is_completed,
            max_unlocked_level=payload.max_unlocked_level or payload.level,
        )
