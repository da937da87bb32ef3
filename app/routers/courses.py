"""Course-level progress routes."""

from fastapi import APIRouter, Depends

from app.dependencies import get_reporting
from app.schemas import CourseProgressByGame
from app.services.reporting import ReportingFacade

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("/{course_id}/progress-by-game", response_model=CourseProgressByGame)
async def course_progress_by_game(
    course_id: str,
    reporting: ReportingFacade = Depends(get_reporting),
):
    """Average progress of the course roster in each assigned game."""
    return await reporting.get_course_progress_by_game(course_id)
