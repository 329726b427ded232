"""Jobs feature module.

The match tracker: per-player processing, the poll scheduler and its API.
"""

from .error_handling import (
    Fatal,
    PlayerOutcome,
    Processed,
    Retryable,
    Skip,
    capture_player_outcome,
    outcome_from_error,
)
from .match_tracker import PlayerMatchProcessor
from .router import router as tracker_router
from .runtime import get_tracker, shutdown_tracker, start_tracker
from .scheduler import MatchTrackerScheduler, TickSummary, TrackerState

__all__ = [
    "Fatal",
    "PlayerOutcome",
    "Processed",
    "Retryable",
    "Skip",
    "capture_player_outcome",
    "outcome_from_error",
    "PlayerMatchProcessor",
    "tracker_router",
    "get_tracker",
    "shutdown_tracker",
    "start_tracker",
    "MatchTrackerScheduler",
    "TickSummary",
    "TrackerState",
]
