"""Per-player outcome types and error classification for the match tracker.

Error Handling Strategy:
- NotFound: the player is skipped for this tick
- Unauthorized: fatal, the shared credential is broken and the tracker halts
- Everything else (rate limits, 5xx, network, persistence): retryable on the
  next tick, logged without aborting the current one
"""

from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, ParamSpec, Union

import structlog

from tft_tracker.core.exceptions import PlayerNotFoundError
from tft_tracker.core.riot_api.errors import APIErrorKind, RiotAPIError

logger = structlog.get_logger(__name__)

P = ParamSpec("P")


@dataclass(frozen=True)
class Processed:
    """A new match was handled (notification attempted, pointer advanced)."""

    match_id: str
    notified: bool = True


@dataclass(frozen=True)
class Skip:
    """Nothing to do for this player this tick. Counts as a success."""

    reason: str


@dataclass(frozen=True)
class Retryable:
    """Transient failure; the next tick tries again."""

    error: BaseException


@dataclass(frozen=True)
class Fatal:
    """Global failure; the tracker must halt."""

    error: BaseException


PlayerOutcome = Union[Processed, Skip, Retryable, Fatal]


def is_failure(outcome: PlayerOutcome) -> bool:
    return isinstance(outcome, (Retryable, Fatal))


def outcome_from_error(error: Exception) -> PlayerOutcome:
    """Classify an exception by error kind, never by raw status code."""
    if isinstance(error, RiotAPIError):
        if error.kind == APIErrorKind.NOT_FOUND:
            return Skip(reason=f"not found: {error.url or error}")
        if error.kind == APIErrorKind.UNAUTHORIZED:
            return Fatal(error=error)
        return Retryable(error=error)
    if isinstance(error, PlayerNotFoundError):
        return Skip(reason="player no longer tracked")
    return Retryable(error=error)


def _extract_log_context(
    log_context: Optional[Callable[..., dict[str, Any]]],
    args: tuple,
    kwargs: dict,
    func_name: str,
) -> dict:
    """Extract logging context from function arguments."""
    if not log_context:
        return {}

    try:
        return log_context(*args, **kwargs)
    except Exception as e:
        logger.warning(
            "Failed to extract log context",
            error=str(e),
            function=func_name,
        )
        return {}


def _log_outcome(
    outcome: PlayerOutcome, error: Exception, operation: str, context: dict
) -> None:
    if isinstance(outcome, Fatal):
        logger.critical(
            f"Authentication failure during {operation} - tracker cannot continue",
            error=str(error),
            error_type=type(error).__name__,
            **context,
        )
    elif isinstance(outcome, Skip):
        logger.info(
            f"Skipping {operation}",
            reason=outcome.reason,
            **context,
        )
    else:
        logger.error(
            f"Failed to {operation}",
            error=str(error),
            error_type=type(error).__name__,
            **context,
        )


def capture_player_outcome(
    *,
    operation: str,
    log_context: Optional[Callable[..., dict[str, Any]]] = None,
) -> Callable[
    [Callable[P, Awaitable[PlayerOutcome]]], Callable[P, Awaitable[PlayerOutcome]]
]:
    """Decorator turning exceptions of a per-player coroutine into outcomes.

    :param operation: Description of the operation (e.g., "process player").
    :param log_context: Optional function extracting context from args for logging.
                        Example: lambda self, player: {"puuid": player.puuid}

    Usage example::

        @capture_player_outcome(
            operation="process player",
            log_context=lambda self, player: {"puuid": player.puuid},
        )
        async def process(self, player: TrackedPlayer) -> PlayerOutcome:
            ...
    """

    def decorator(
        func: Callable[P, Awaitable[PlayerOutcome]],
    ) -> Callable[P, Awaitable[PlayerOutcome]]:
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> PlayerOutcome:
            try:
                return await func(*args, **kwargs)
            except Exception as error:
                context = _extract_log_context(
                    log_context, args, kwargs, func.__name__
                )
                outcome = outcome_from_error(error)
                _log_outcome(outcome, error, operation, context)
                return outcome

        return async_wrapper

    return decorator
