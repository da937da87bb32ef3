"""Read access to students, courses and the games assigned to each course."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.exceptions import StoreUnavailableError
from app.models.course import Course, CourseGame
from app.models.student import Student

logger = logging.getLogger(__name__)


class RosterStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_student(self, student_id: str) -> Student | None:
        return await self._scalar(
            select(Student).where(Student.id == student_id), f"student {student_id}"
        )

    async def find_students(self, student_ids: list[str]) -> dict[str, Student]:
        if not student_ids:
            return {}
        rows = await self._scalars(
            select(Student).where(Student.id.in_(student_ids)), "students"
        )
        return {s.id: s for s in rows}

    async def find_course(self, course_id: str) -> Course | None:
        return await self._scalar(
            select(Course).where(Course.id == course_id), f"course {course_id}"
        )

    async def students_in_course(self, course_id: str) -> list[Student]:
        return await self._scalars(
            select(Student).where(Student.course_id == course_id).order_by(Student.lastname),
            f"course {course_id} students",
        )

    async def games_for_course(self, course_id: str, only_active: bool = True) -> list[str]:
        stmt = select(CourseGame.game_id).where(CourseGame.course_id == course_id)
        if only_active:
            stmt = stmt.where(CourseGame.is_active.is_(True))
        return await self._scalars(stmt.order_by(CourseGame.game_id), f"course {course_id} games")

    async def _scalar(self, stmt, label: str):
        try:
            async with self._session_factory() as session:
                return (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to read %s: %s", label, e)
            raise StoreUnavailableError(f"Could not read {label}") from e

    async def _scalars(self, stmt, label: str) -> list:
        try:
            async with self._session_factory() as session:
                return list((await session.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to read %s: %s", label, e)
            raise StoreUnavailableError(f"Could not read {label}") from e
