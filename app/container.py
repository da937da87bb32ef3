"""Composition root - builds and wires every service once per process."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import Settings
from app.services import (
    AttemptStore,
    LevelCatalog,
    ProgressCalculator,
    ReportingFacade,
    RosterStore,
    SqlAttemptStore,
    SqlLevelStore,
    SubmissionService,
    TextGenerator,
    build_text_generator,
)


@dataclass(frozen=True)
class Services:
    attempts: AttemptStore
    catalog: LevelCatalog
    calculator: ProgressCalculator
    submissions: SubmissionService
    reporting: ReportingFacade


def build_services(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    text_generator: TextGenerator | None = None,
) -> Services:
    attempts = SqlAttemptStore(session_factory)
    catalog = LevelCatalog(
        SqlLevelStore(session_factory),
        default_activities=settings.DEFAULT_ACTIVITIES_PER_LEVEL,
    )
    calculator = ProgressCalculator(
        attempts,
        catalog,
        unlock_beyond_catalog=settings.UNLOCK_BEYOND_CATALOG,
    )
    submissions = SubmissionService(attempts)
    reporting = ReportingFacade(
        attempts=attempts,
        catalog=catalog,
        calculator=calculator,
        submissions=submissions,
        roster=RosterStore(session_factory),
        text_generator=text_generator or build_text_generator(settings),
        report_recent_days=settings.REPORT_RECENT_DAYS,
    )
    return Services(
        attempts=attempts,
        catalog=catalog,
        calculator=calculator,
        submissions=submissions,
        reporting=reporting,
    )
