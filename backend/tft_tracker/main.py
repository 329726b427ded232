"""Main FastAPI application for the TFT match tracker."""

from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI
import structlog

from tft_tracker.core import get_db_manager, get_global_settings
from tft_tracker.core.logging import setup_logging
from tft_tracker.features.jobs import (
    get_tracker,
    shutdown_tracker,
    start_tracker,
    tracker_router,
)
from tft_tracker.features.players import players_router
from tft_tracker.init_db import init_db

settings = get_global_settings()
setup_logging(settings.log_level)
logger = structlog.get_logger(__name__)


async def _start_tracker_safely() -> None:
    """Start the match tracker with error handling."""
    try:
        tracker = await start_tracker()
        if tracker:
            logger.info("Match tracker started")
    except Exception as e:
        logger.error(
            "Failed to start match tracker",
            error=str(e),
            error_type=type(e).__name__,
        )
        # Don't fail startup, player registration still works


async def _shutdown_tracker_safely() -> None:
    """Shutdown the match tracker with error handling."""
    try:
        await shutdown_tracker()
    except Exception as e:
        logger.error(
            "Error during match tracker shutdown",
            error=str(e),
            error_type=type(e).__name__,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting up TFT match tracker")
    await init_db()
    await _start_tracker_safely()
    yield
    logger.info("Shutting down TFT match tracker")
    await _shutdown_tracker_safely()
    await get_db_manager().close()


tags_metadata = [
    {
        "name": "players",
        "description": "Register tracked players and read leaderboards.",
    },
    {
        "name": "tracker",
        "description": "Match tracker status and manual ticks.",
    },
    {
        "name": "health",
        "description": "Health check endpoint.",
    },
]

app = FastAPI(
    title="TFT Match Tracker",
    description="Polls Teamfight Tactics match history for tracked players "
    "and announces finished matches with rank changes.",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    debug=settings.debug,
)

app.include_router(players_router, prefix="/api/v1")
app.include_router(tracker_router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Reports whether the application is up and the tracker loop state.
    """
    tracker = get_tracker()
    return {
        "status": "healthy",
        "message": "Application is running",
        "version": "0.1.0",
        "debug": settings.debug,
        "tracker_state": tracker.state.value if tracker else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tft_tracker.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
