"""Attempt submission, student progress, game statistics and report routes."""

from fastapi import APIRouter, Body, Depends, Query

from app.dependencies import get_reporting
from app.schemas import (
    Attempt,
    AttemptInput,
    GameStatistics,
    ReportRequest,
    StudentProgressResponse,
    StudentReport,
)
from app.services.reporting import ReportingFacade

router = APIRouter(prefix="/api/statistics", tags=["statistics"])


@router.post("", response_model=Attempt, status_code=201)
async def submit_attempt(
    body: AttemptInput,
    reporting: ReportingFacade = Depends(get_reporting),
):
    """Append one attempt record to the log."""
    return await reporting.submit_attempt(body)


@router.get("/students/{student_id}/progress", response_model=StudentProgressResponse)
async def student_progress(
    student_id: str,
    game_id: str | None = Query(default=None, alias="gameId"),
    reporting: ReportingFacade = Depends(get_reporting),
):
    """Per-game progress, unlock level and totals for a student."""
    return await reporting.get_student_progress(student_id, game_id)


@router.get("/games/{game_id}", response_model=GameStatistics)
async def game_statistics(
    game_id: str,
    reporting: ReportingFacade = Depends(get_reporting),
):
    """Dashboard figures for one game."""
    return await reporting.get_game_statistics(game_id)


@router.post("/students/{student_id}/report", response_model=StudentReport)
async def student_report(
    student_id: str,
    body: ReportRequest | None = Body(default=None),
    reporting: ReportingFacade = Depends(get_reporting),
):
    """Narrative report for a student over the recent-days window."""
    recent_days = body.recent_days if body else None
    return await reporting.generate_report(student_id, recent_days)
