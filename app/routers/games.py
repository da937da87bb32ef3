"""Level catalog routes."""

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_reporting
from app.schemas import GameLevels
from app.services.reporting import ReportingFacade

router = APIRouter(prefix="/api/games", tags=["games"])


@router.get("/{game_id}/levels", response_model=GameLevels)
async def game_levels(
    game_id: str,
    only_active: bool = Query(default=False, alias="onlyActive"),
    reporting: ReportingFacade = Depends(get_reporting),
):
    """Ordered level list of a game; empty for unknown games."""
    return await reporting.get_game_levels(game_id, only_active=only_active)
