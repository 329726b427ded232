"""Dependencies for the jobs feature."""

from typing import Annotated

from fastapi import Depends, HTTPException

from .runtime import get_tracker
from .scheduler import MatchTrackerScheduler


async def get_match_tracker() -> MatchTrackerScheduler:
    """Get the running match tracker instance."""
    tracker = get_tracker()
    if tracker is None:
        raise HTTPException(status_code=503, detail="Match tracker is not running")
    return tracker


# Type aliases for cleaner dependency injection
MatchTrackerDep = Annotated[MatchTrackerScheduler, Depends(get_match_tracker)]

__all__ = ["get_match_tracker", "MatchTrackerDep"]
