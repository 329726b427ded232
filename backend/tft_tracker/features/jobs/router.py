"""Match tracker API endpoints."""

from fastapi import APIRouter, BackgroundTasks, HTTPException
import structlog

from .dependencies import MatchTrackerDep
from .scheduler import TrackerState
from .schemas import TrackerStatusResponse, TrackerTriggerResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/tracker", tags=["tracker"])


@router.get("/status", response_model=TrackerStatusResponse)
async def get_tracker_status(tracker: MatchTrackerDep):
    """
    Get the match tracker state, failure counters and cache statistics.

    Returns:
        Tracker status snapshot.
    """
    return tracker.status()


@router.post("/trigger", response_model=TrackerTriggerResponse)
async def trigger_tick(tracker: MatchTrackerDep, background_tasks: BackgroundTasks):
    """
    Manually trigger a roster pass outside the normal interval.

    A request made while a pass is running is dropped, not queued.

    Raises:
        409: Tracker is halted or stopped.
    """
    if tracker.state in (TrackerState.HALTED, TrackerState.STOPPED):
        raise HTTPException(
            status_code=409,
            detail=f"Match tracker is {tracker.state.value} and cannot be triggered",
        )

    if tracker.state == TrackerState.RUNNING:
        return TrackerTriggerResponse(
            success=False, message="A tick is already running, request dropped"
        )

    background_tasks.add_task(tracker.trigger_tick)
    logger.info("Tick triggered manually")
    return TrackerTriggerResponse(success=True, message="Tick triggered")
