"""Recursero Progress - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.container import build_services
from app.database import async_session, init_db
from app.exceptions import ProgressTrackingError
from app.routers import courses, games, statistics

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # Create data directory if needed
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    # Initialize database tables
    await init_db()
    app.state.services = build_services(settings, async_session)
    yield


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)


@app.exception_handler(ProgressTrackingError)
async def progress_error_handler(request: Request, exc: ProgressTrackingError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
    )


@app.get("/health")
async def health():
    return {"app": settings.APP_NAME, "status": "ok"}


# Routers
app.include_router(statistics.router)
app.include_router(courses.router)
app.include_router(games.router)
