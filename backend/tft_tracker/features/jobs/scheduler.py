"""Poll scheduler for the match tracker.

An explicit loop driven by a stop event replaces interval callbacks:

- IDLE -> RUNNING when a tick starts; a tick requested while another one is
  RUNNING is dropped (single-flight)
- RUNNING -> IDLE when the roster pass finishes
- RUNNING -> HALTED when a player outcome is Fatal (credential rejected);
  one alert is sent and no further tick runs
- -> STOPPED when the stop event is observed at a tick boundary or between
  players

The scheduler owns the match cache, the pairing tracker and both failure
counters.
"""

import asyncio
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

import structlog
from structlog import contextvars as structlog_contextvars

from tft_tracker.core.config import Settings, get_global_settings
from tft_tracker.features.matches.cache import MatchCache, PairingTracker
from tft_tracker.features.matches.notifier import MatchNotifier
from tft_tracker.features.players.repository import TrackedPlayerRepositoryInterface
from .error_handling import Fatal, PlayerOutcome, Processed, Skip, is_failure
from .match_tracker import PlayerMatchProcessor

logger = structlog.get_logger(__name__)

RepositoryFactory = Callable[
    [], AbstractAsyncContextManager[TrackedPlayerRepositoryInterface]
]


class TrackerState(str, Enum):
    """Scheduler lifecycle states."""

    IDLE = "idle"
    RUNNING = "running"
    HALTED = "halted"
    STOPPED = "stopped"


@dataclass
class TickSummary:
    """Counts of per-player outcomes for one tick."""

    tick_id: int
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    players: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    fatal: Optional[BaseException] = None
    roster_error: Optional[BaseException] = None
    interrupted: bool = False

    def record(self, outcome: PlayerOutcome) -> None:
        if isinstance(outcome, Processed):
            self.processed += 1
        elif isinstance(outcome, Skip):
            self.skipped += 1
        elif is_failure(outcome):
            self.failed += 1
            if isinstance(outcome, Fatal):
                self.fatal = outcome.error

    @property
    def succeeded(self) -> int:
        return self.processed + self.skipped

    @property
    def all_failed(self) -> bool:
        """True when the roster could not be read or every attempted player failed."""
        if self.roster_error is not None:
            return True
        return self.failed > 0 and self.succeeded == 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "tick_id": self.tick_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "players": self.players,
            "processed": self.processed,
            "skipped": self.skipped,
            "failed": self.failed,
            "interrupted": self.interrupted,
        }


class MatchTrackerScheduler:
    """Runs roster passes on a backoff-aware interval."""

    def __init__(
        self,
        processor: PlayerMatchProcessor,
        repository_factory: RepositoryFactory,
        notifier: MatchNotifier,
        cache: MatchCache,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            processor: Per-player match processor
            repository_factory: Opens a repository scoped to one tick
            notifier: Used for operator alerts (halt, unhealthy)
            cache: Match dedup cache, swept after every tick
            settings: Interval, backoff cap and unhealthy threshold source
        """
        settings = settings or get_global_settings()
        self.processor = processor
        self.repository_factory = repository_factory
        self.notifier = notifier
        self.cache = cache
        self.pairing = PairingTracker()

        self.poll_interval = settings.poll_interval_seconds
        self.max_backoff = settings.max_backoff_seconds
        self.unhealthy_threshold = settings.unhealthy_threshold

        self.state = TrackerState.IDLE
        self.backoff_failures = 0
        self.consecutive_failures = 0
        self.ticks_run = 0
        self.dropped_ticks = 0
        self.last_tick: Optional[TickSummary] = None
        self.halt_reason: Optional[str] = None
        self._unhealthy_alerted = False
        self._stop_event: Optional[asyncio.Event] = None

    def _stop_requested(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    def next_delay(self) -> float:
        """Seconds until the next tick: ``min(interval * 2^failures, cap)``."""
        return min(self.poll_interval * (2**self.backoff_failures), self.max_backoff)

    async def run(self, stop_event: asyncio.Event) -> TrackerState:
        """
        Run ticks until stopped or halted.

        Args:
            stop_event: Cooperative cancellation signal

        Returns:
            Final state, STOPPED or HALTED
        """
        self._stop_event = stop_event
        logger.info(
            "Match tracker started",
            poll_interval_seconds=self.poll_interval,
            max_backoff_seconds=self.max_backoff,
        )

        while not stop_event.is_set():
            await self.run_tick()
            if self.state == TrackerState.HALTED or stop_event.is_set():
                break

            delay = self.next_delay()
            logger.debug("Next tick scheduled", delay_seconds=delay)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

        if self.state != TrackerState.HALTED:
            self.state = TrackerState.STOPPED
        logger.info("Match tracker loop exited", state=self.state.value)
        return self.state

    async def trigger_tick(self) -> Optional[TickSummary]:
        """Run one tick now; dropped if a tick is in flight or the tracker halted."""
        return await self.run_tick()

    async def run_tick(self) -> Optional[TickSummary]:
        """
        Process the whole roster once.

        Returns:
            The tick summary, or None when the tick was dropped
        """
        if self.state == TrackerState.RUNNING:
            self.dropped_ticks += 1
            logger.debug("Tick dropped, previous tick still running")
            return None
        if self.state in (TrackerState.HALTED, TrackerState.STOPPED):
            logger.debug("Tick skipped", state=self.state.value)
            return None
        if self._stop_requested():
            return None

        self.state = TrackerState.RUNNING
        self.ticks_run += 1
        summary = TickSummary(tick_id=self.ticks_run)
        self.pairing.reset()

        with structlog_contextvars.bound_contextvars(tick_id=summary.tick_id):
            try:
                await self._process_roster(summary)
            except Exception as e:
                summary.roster_error = e
                logger.error(
                    "Failed to load tracked players",
                    error=str(e),
                    error_type=type(e).__name__,
                )
            finally:
                self.cache.sweep_expired()
                summary.finished_at = datetime.now(timezone.utc)

            await self._after_tick(summary)

        return summary

    async def _process_roster(self, summary: TickSummary) -> None:
        async with self.repository_factory() as repository:
            players = await repository.list_tracked_players()
            summary.players = len(players)

            for player in players:
                if self._stop_requested():
                    summary.interrupted = True
                    logger.info("Stop requested, ending tick early")
                    break

                with structlog_contextvars.bound_contextvars(puuid=player.puuid):
                    outcome = await self.processor.process(
                        player, repository, self.pairing
                    )
                summary.record(outcome)

                if isinstance(outcome, Fatal):
                    break

    async def _after_tick(self, summary: TickSummary) -> None:
        self.last_tick = summary

        if summary.fatal is not None:
            await self._halt(summary.fatal)
            return

        self.state = TrackerState.IDLE

        if summary.all_failed:
            self.backoff_failures += 1
            self.consecutive_failures += 1
            logger.warning(
                "Tick failed for every player",
                backoff_failures=self.backoff_failures,
                consecutive_failures=self.consecutive_failures,
                next_delay_seconds=self.next_delay(),
            )
            if (
                self.consecutive_failures >= self.unhealthy_threshold
                and not self._unhealthy_alerted
            ):
                self._unhealthy_alerted = True
                await self.notifier.send_alert(
                    "Match tracker unhealthy: "
                    f"{self.consecutive_failures} consecutive ticks failed for every player"
                )
        else:
            self.backoff_failures = 0
            self.consecutive_failures = 0
            self._unhealthy_alerted = False

        logger.info("Tick completed", **summary.as_dict())

    async def _halt(self, error: BaseException) -> None:
        self.state = TrackerState.HALTED
        self.halt_reason = str(error)
        logger.critical(
            "Match tracker halted, Riot API credential rejected",
            error=str(error),
            error_type=type(error).__name__,
        )
        await self.notifier.send_alert(
            "Match tracker halted: the Riot API key was rejected (401). "
            "Update RIOT_API_KEY and restart the service."
        )

    def status(self) -> Dict[str, Any]:
        """Snapshot of scheduler state for the HTTP API."""
        return {
            "state": self.state.value,
            "backoff_failures": self.backoff_failures,
            "consecutive_failures": self.consecutive_failures,
            "next_delay_seconds": self.next_delay(),
            "ticks_run": self.ticks_run,
            "dropped_ticks": self.dropped_ticks,
            "halt_reason": self.halt_reason,
            "last_tick": self.last_tick.as_dict() if self.last_tick else None,
            "cache": self.cache.stats(),
        }
