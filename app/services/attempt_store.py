"""Append-only attempt log.

``AttemptStore`` is the interface the services depend on; ``SqlAttemptStore``
is the SQLAlchemy implementation. Records are never updated or deleted.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.exceptions import StoreUnavailableError
from app.models.attempt_record import AttemptRecord
from app.models.point_total import StudentPointTotal
from app.schemas import Attempt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptDraft:
    """A validated attempt that has not been persisted yet.

    There is no ``total_points_snapshot`` here: the store
    assigns it in the same transaction as the insert.
    """

    student_id: str
    game_id: str
    level: int
    points: int
    attempts: int
    is_completed: bool
    max_unlocked_level: int
    activity: int | None = None
    correct_answers: int | None = None
    total_questions: int | None = None
    completion_time_seconds: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class AttemptStore(ABC):
    """Abstract interface for the attempt log."""

    @abstractmethod
    async def append(self, draft: AttemptDraft) -> Attempt:
        """Persist a new record, assigning its cumulative point snapshot."""

    @abstractmethod
    async def query_by_student(self, student_id: str) -> list[Attempt]:
        """All records of one student."""

    @abstractmethod
    async def query_by_student_and_game(self, student_id: str, game_id: str) -> list[Attempt]:
        """All records of one student for one game."""

    @abstractmethod
    async def query_by_game(self, game_id: str) -> list[Attempt]:
        """All records of one game, across students."""


class SqlAttemptStore(AttemptStore):
    """SQLAlchemy-backed attempt log."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append(self, draft: AttemptDraft) -> Attempt:
        try:
            return await self._append_once(draft)
        except IntegrityError:
            # Another writer created the student's counter row first.
            logger.info("Retrying append for student %s after counter race", draft.student_id)
            try:
                return await self._append_once(draft)
            except SQLAlchemyError as e:
                logger.error("Failed to append attempt for student %s: %s", draft.student_id, e)
                raise StoreUnavailableError("Could not store attempt") from e
        except SQLAlchemyError as e:
            logger.error("Failed to append attempt for student %s: %s", draft.student_id, e)
            raise StoreUnavailableError("Could not store attempt") from e

    async def _append_once(self, draft: AttemptDraft) -> Attempt:
        async with self._session_factory() as session, session.begin():
            total = await self._increment_total(session, draft.student_id, draft.points)
            record = AttemptRecord(
                id=str(uuid.uuid4()),
                student_id=draft.student_id,
                game_id=draft.game_id,
                level=draft.level,
                activity=draft.activity,
                points=draft.points,
                total_points_snapshot=total,
                attempts=draft.attempts,
                correct_answers=draft.correct_answers,
                total_questions=draft.total_questions,
                completion_time_seconds=draft.completion_time_seconds,
                is_completed=draft.is_completed,
                max_unlocked_level=draft.max_unlocked_level,
                created_at=draft.created_at,
                updated_at=draft.created_at,
            )
            session.add(record)
            await session.flush()
            return Attempt.model_validate(record)

    async def _increment_total(self, session: AsyncSession, student_id: str, points: int) -> int:
        """Bump the student's running total and return the new value.

        The UPDATE holds the row (or database) write lock until commit, so two
        concurrent submissions cannot both read the same prior total.
        """
        result = await session.execute(
            update(StudentPointTotal)
            .where(StudentPointTotal.student_id == student_id)
            .values(total=StudentPointTotal.total + points)
        )
        if result.rowcount == 0:
            # First write through the counter: seed it from the existing log.
            baseline = await session.scalar(
                select(func.coalesce(func.sum(AttemptRecord.points), 0)).where(
                    AttemptRecord.student_id == student_id
                )
            )
            session.add(StudentPointTotal(student_id=student_id, total=int(baseline) + points))
            await session.flush()

        total = await session.scalar(
            select(StudentPointTotal.total).where(StudentPointTotal.student_id == student_id)
        )
        return int(total)

    async def query_by_student(self, student_id: str) -> list[Attempt]:
        return await self._query(
            select(AttemptRecord)
            .where(AttemptRecord.student_id == student_id)
            .order_by(AttemptRecord.created_at),
            f"student {student_id}",
        )

    async def query_by_student_and_game(self, student_id: str, game_id: str) -> list[Attempt]:
        return await self._query(
            select(AttemptRecord)
            .where(
                AttemptRecord.student_id == student_id,
                AttemptRecord.game_id == game_id,
            )
            .order_by(AttemptRecord.created_at),
            f"student {student_id} / game {game_id}",
        )

    async def query_by_game(self, game_id: str) -> list[Attempt]:
        return await self._query(
            select(AttemptRecord)
            .where(AttemptRecord.game_id == game_id)
            .order_by(AttemptRecord.student_id, AttemptRecord.created_at),
            f"game {game_id}",
        )

    async def _query(self, stmt, label: str) -> list[Attempt]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [Attempt.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Failed to read attempts for %s: %s", label, e)
            raise StoreUnavailableError(f"Could not read attempts for {label}") from e
