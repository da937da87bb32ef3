"""Service layer - progress computation, submission and reporting."""

from app.services.attempt_store import AttemptDraft, AttemptStore, SqlAttemptStore
from app.services.level_catalog import LevelCatalog, LevelStore, SqlLevelStore
from app.services.progress import ProgressCalculator
from app.services.reporting import ReportingFacade
from app.services.roster import RosterStore
from app.services.submission import SubmissionService
from app.services.text_generator import TextGenerator, build_text_generator

__all__ = [
    "AttemptDraft",
    "AttemptStore",
    "LevelCatalog",
    "LevelStore",
    "ProgressCalculator",
    "ReportingFacade",
    "RosterStore",
    "SqlAttemptStore",
    "SqlLevelStore",
    "SubmissionService",
    "TextGenerator",
    "build_text_generator",
]
