"""Reporting facade - the operations exposed to the HTTP layer.

Composes the submission service, progress calculator, statistics aggregator
and level catalog. Every read here is computed from the attempt log on
demand; nothing is cached between calls.
"""

import logging
import math
from collections import defaultdict
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

from app.exceptions import NotFoundError, StoreUnavailableError
from app.schemas import (
    Attempt,
    AttemptInput,
    CourseGameProgress,
    CourseProgressByGame,
    GameLevels,
    GameProgressSnapshot,
    GameStatistics,
    StudentGameSummary,
    StudentProgressResponse,
    StudentReport,
)
from app.services.attempt_store import AttemptStore
from app.services.level_catalog import LevelCatalog
from app.services.progress import ProgressCalculator
from app.services.report_prompt import build_report_prompt, summarize_window
from app.services.roster import RosterStore
from app.services.statistics import (
    accuracy,
    aggregate,
    average_accuracy,
    completion_rate,
    normalize_game_id,
)
from app.services.submission import SubmissionService
from app.services.text_generator import TextGenerator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _group_by_game(records: Sequence[Attempt]) -> dict[str, list[Attempt]]:
    groups: dict[str, list[Attempt]] = defaultdict(list)
    for record in records:
        groups[record.game_id].append(record)
    return dict(sorted(groups.items()))


class ReportingFacade:
    def __init__(
        self,
        *,
        attempts: AttemptStore,
        catalog: LevelCatalog,
        calculator: ProgressCalculator,
        submissions: SubmissionService,
        roster: RosterStore,
        text_generator: TextGenerator,
        report_recent_days: int = 7,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._attempts = attempts
        self._catalog = catalog
        self._calculator = calculator
        self._submissions = submissions
        self._roster = roster
        self._text_generator = text_generator
        self._report_recent_days = report_recent_days
        self._clock = clock

    # -- writes ------------------------------------------------------------

    async def submit_attempt(self, payload: AttemptInput) -> Attempt:
        return await self._submissions.submit(payload)

    # -- student progress --------------------------------------------------

    async def get_progress(
        self, student_id: str, game_id: str | None = None
    ) -> list[GameProgressSnapshot]:
        """Per-game progress for a student, optionally limited to one game."""
        if game_id:
            records = await self._attempts.query_by_student_and_game(student_id, game_id)
        else:
            records = await self._attempts.query_by_student(student_id)
        return await self._progress_for(student_id, records)

    async def get_student_progress(
        self, student_id: str, game_id: str | None = None
    ) -> StudentProgressResponse:
        if game_id:
            records = await self._attempts.query_by_student_and_game(student_id, game_id)
            total_points = sum(r.points for r in records)
        else:
            records = await self._attempts.query_by_student(student_id)
            total_points = await self.get_total_points(student_id, records=records)
        games = await self._progress_for(student_id, records)
        return StudentProgressResponse(
            student_id=student_id,
            total_points=total_points,
            total_games_played=len(games),
            games=games,
        )

    async def get_total_points(
        self, student_id: str, records: Sequence[Attempt] | None = None
    ) -> int:
        """Latest cumulative snapshot; the running total never decreases.

        ``records`` may carry the student's already-fetched log.
        """
        if records is None:
            records = await self._attempts.query_by_student(student_id)
        return max((r.total_points_snapshot for r in records), default=0)

    async def _progress_for(
        self, student_id: str, records: Sequence[Attempt]
    ) -> list[GameProgressSnapshot]:
        results = []
        for game_id, group in _group_by_game(records).items():
            snapshot = await self._calculator.student_progress(student_id, game_id, records=group)
            unlocked = await self._calculator.max_unlocked_level(
                student_id, game_id, records=group
            )
            results.append(
                GameProgressSnapshot(
                    **snapshot.model_dump(),
                    game_id=game_id,
                    max_unlocked_level=unlocked,
                    total_points=sum(r.points for r in group),
                    completion_rate=completion_rate(group),
                    average_accuracy=average_accuracy(group),
                    last_activity_at=max(r.created_at for r in group),
                )
            )
        return results

    # -- dashboards --------------------------------------------------------

    async def get_game_statistics(self, game_id: str) -> GameStatistics:
        """Dashboard figures for one game across every student who played it.

        Each student is reduced on their own first, then the per-student
        figures are averaged.
        """
        records = await self._attempts.query_by_game(game_id)
        if not records:
            if not await self._catalog.levels_for_game(game_id):
                raise NotFoundError("game", game_id)
            return GameStatistics(game_id=game_id)

        by_student: dict[str, list[Attempt]] = defaultdict(list)
        for record in records:
            by_student[record.student_id].append(record)

        try:
            students = await self._roster.find_students(sorted(by_student))
        except StoreUnavailableError as e:
            logger.warning("Roster unavailable, showing student ids only: %s", e)
            students = {}

        summaries = []
        accuracies = []
        for student_id, group in sorted(by_student.items()):
            rollup = aggregate(group)
            if any(accuracy(r) is not None for r in group):
                accuracies.append(rollup.average_score)
            student = students.get(student_id)
            summaries.append(
                StudentGameSummary(
                    student_id=student_id,
                    student_name=f"{student.name} {student.lastname}" if student else student_id,
                    max_unlocked_level=await self._calculator.max_unlocked_level(
                        student_id, game_id, records=group
                    ),
                    total_points=sum(r.points for r in group),
                    completion_rate=completion_rate(group),
                    average_accuracy=rollup.average_score,
                    last_activity=max(r.created_at for r in group),
                )
            )

        n = len(summaries)
        return GameStatistics(
            game_id=game_id,
            total_students=n,
            average_points=round(math.fsum(s.total_points for s in summaries) / n, 2),
            average_accuracy=(
                round(math.fsum(accuracies) / len(accuracies), 2) if accuracies else 0
            ),
            completion_rate=round(math.fsum(s.completion_rate for s in summaries) / n, 2),
            student_progress=summaries,
        )

    async def get_course_progress_by_game(self, course_id: str) -> CourseProgressByGame:
        course = await self._roster.find_course(course_id)
        if course is None:
            raise NotFoundError("course", course_id)

        students = await self._roster.students_in_course(course_id)
        game_ids = await self._roster.games_for_course(course_id)

        rollups = []
        for game_id in game_ids:
            rollups.append(await self._course_game_progress(game_id, students))

        return CourseProgressByGame(
            course_id=course_id,
            total_students=len(students),
            progress_by_game=rollups,
        )

    async def _course_game_progress(self, game_id: str, students: list) -> CourseGameProgress:
        key = normalize_game_id(game_id)
        try:
            total = await self._catalog.total_activities(game_id)
        except StoreUnavailableError as e:
            logger.warning("Catalog unavailable for game %s: %s", game_id, e)
            total = 0
        if total == 0:
            return CourseGameProgress(game_id=key, total_students=len(students))

        percentages = []
        for student in students:
            try:
                snapshot = await self._calculator.student_progress(student.id, game_id)
                percentages.append(snapshot.percentage)
            except StoreUnavailableError as e:
                logger.warning(
                    "Progress unavailable for student %s in game %s: %s", student.id, game_id, e
                )
                percentages.append(0)

        return CourseGameProgress(
            game_id=key,
            average_progress=round(math.fsum(percentages) / len(percentages)) if percentages else 0,
            total_students=len(students),
            students_with_progress=sum(1 for p in percentages if p > 0),
        )

    # -- catalog -----------------------------------------------------------

    async def get_game_levels(self, game_id: str, only_active: bool = False) -> GameLevels:
        levels = await self._catalog.levels_for_game(game_id, only_active=only_active)
        return GameLevels(game_id=game_id, levels=levels)

    # -- narrative report --------------------------------------------------

    async def generate_report(
        self, student_id: str, recent_days: int | None = None
    ) -> StudentReport:
        student = await self._roster.find_student(student_id)
        if student is None:
            raise NotFoundError("student", student_id)

        records = await self._attempts.query_by_student(student_id)
        if not records:
            return StudentReport(
                student_id=student.id,
                student_name=student.name,
                student_lastname=student.lastname,
                report=(
                    f"No se encontraron estadísticas registradas para {student.name} "
                    f"{student.lastname}. Pide al estudiante que complete nuevas "
                    "actividades para poder generar un informe."
                ),
            )

        days = recent_days or self._report_recent_days
        window_start = self._clock() - timedelta(days=days)

        percentages: dict[str, float] = {}
        for game_id, group in _group_by_game(records).items():
            snapshot = await self._calculator.student_progress(student_id, game_id, records=group)
            key = normalize_game_id(game_id)
            percentages[key] = max(percentages.get(key, 0), snapshot.percentage)

        prompt = build_report_prompt(
            records=records,
            summary=aggregate(records),
            progress_percentages=percentages,
            windows=summarize_window(records, window_start),
            recent_days=days,
        )
        result = await self._text_generator.generate(prompt)
        logger.info(
            "Generated report for student %s with %s/%s", student_id, result.provider, result.model
        )

        return StudentReport(
            student_id=student.id,
            student_name=student.name,
            student_lastname=student.lastname,
            report=result.text,
        )
