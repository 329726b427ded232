"""Tests for the match tracker scheduler: backoff, halting and single-flight."""

import asyncio
from unittest.mock import MagicMock

import pytest

from tft_tracker.core.config import Settings
from tft_tracker.core.riot_api.errors import AuthenticationError, ServerError
from tft_tracker.features.jobs.error_handling import Skip
from tft_tracker.features.jobs.match_tracker import PlayerMatchProcessor
from tft_tracker.features.jobs.scheduler import MatchTrackerScheduler, TrackerState
from tft_tracker.features.matches.cache import MatchCache
from tft_tracker.features.matches.notifier import MatchNotifier
from tft_tracker.features.players.gateway import RiotAPIGateway
from tests.fakes import (
    InMemoryTrackedPlayerRepository,
    make_player,
    repository_factory,
)


def make_settings(**overrides) -> Settings:
    values = {
        "poll_interval_seconds": 15.0,
        "max_backoff_seconds": 600.0,
        "unhealthy_threshold": 3,
    }
    values.update(overrides)
    return Settings(**values)


def make_scheduler(riot_client, channel, repository, **settings) -> MatchTrackerScheduler:
    cache = MatchCache()
    notifier = MatchNotifier(channel)
    processor = PlayerMatchProcessor(riot_client, RiotAPIGateway(riot_client), cache, notifier)
    return MatchTrackerScheduler(
        processor,
        repository_factory(repository),
        notifier,
        cache,
        make_settings(**settings),
    )


class StubProcessor:
    """Processor double returning canned outcomes and running a hook per call."""

    def __init__(self, hook=None):
        self.calls = []
        self.hook = hook

    async def process(self, player, repository, pairing):
        self.calls.append(player.puuid)
        if self.hook is not None:
            await self.hook(player)
        return Skip(reason="stub")


@pytest.fixture
def roster():
    return InMemoryTrackedPlayerRepository([make_player("alice"), make_player("bob")])


class TestBackoff:
    """Failure counters and the poll delay."""

    def test_next_delay_doubles_and_caps(self, riot_client, channel, roster):
        scheduler = make_scheduler(riot_client, channel, roster)

        assert scheduler.next_delay() == 15.0
        scheduler.backoff_failures = 2
        assert scheduler.next_delay() == 60.0
        scheduler.backoff_failures = 10
        assert scheduler.next_delay() == 600.0

    async def test_all_players_failing_increments_backoff(
        self, riot_client, channel, roster
    ):
        riot_client.errors["alice"] = ServerError("down", status_code=503)
        riot_client.errors["bob"] = ServerError("down", status_code=503)
        scheduler = make_scheduler(riot_client, channel, roster)

        summary = await scheduler.run_tick()

        assert summary.failed == 2
        assert scheduler.backoff_failures == 1
        assert scheduler.consecutive_failures == 1
        assert scheduler.next_delay() == 30.0
        assert scheduler.state == TrackerState.IDLE

    async def test_one_success_resets_backoff(self, riot_client, channel, roster):
        riot_client.errors["alice"] = ServerError("down", status_code=503)
        riot_client.errors["bob"] = ServerError("down", status_code=503)
        scheduler = make_scheduler(riot_client, channel, roster)
        await scheduler.run_tick()
        await scheduler.run_tick()
        assert scheduler.backoff_failures == 2

        del riot_client.errors["bob"]
        summary = await scheduler.run_tick()

        assert summary.failed == 1
        assert summary.skipped == 1
        assert scheduler.backoff_failures == 0
        assert scheduler.consecutive_failures == 0
        assert scheduler.next_delay() == 15.0

    async def test_roster_failure_counts_as_failed_tick(self, riot_client, channel, roster):
        roster.list_error = RuntimeError("database unavailable")
        scheduler = make_scheduler(riot_client, channel, roster)

        summary = await scheduler.run_tick()

        assert summary.roster_error is roster.list_error
        assert scheduler.backoff_failures == 1
        assert scheduler.state == TrackerState.IDLE

    async def test_empty_roster_is_healthy(self, riot_client, channel):
        scheduler = make_scheduler(riot_client, channel, InMemoryTrackedPlayerRepository())
        scheduler.backoff_failures = 3

        summary = await scheduler.run_tick()

        assert summary.players == 0
        assert scheduler.backoff_failures == 0

    async def test_unhealthy_alert_sent_once(self, riot_client, channel, roster):
        riot_client.errors["alice"] = ServerError("down", status_code=503)
        riot_client.errors["bob"] = ServerError("down", status_code=503)
        scheduler = make_scheduler(riot_client, channel, roster, unhealthy_threshold=2)

        for _ in range(4):
            await scheduler.run_tick()

        alerts = [p for p in channel.sent if p.text.startswith(":warning:")]
        assert len(alerts) == 1
        assert "unhealthy" in alerts[0].text
        assert scheduler.consecutive_failures == 4

    async def test_unhealthy_alert_rearms_after_recovery(self, riot_client, channel, roster):
        riot_client.errors["alice"] = ServerError("down", status_code=503)
        riot_client.errors["bob"] = ServerError("down", status_code=503)
        scheduler = make_scheduler(riot_client, channel, roster, unhealthy_threshold=1)

        await scheduler.run_tick()
        riot_client.errors.clear()
        await scheduler.run_tick()
        riot_client.errors["alice"] = ServerError("down", status_code=503)
        riot_client.errors["bob"] = ServerError("down", status_code=503)
        await scheduler.run_tick()

        alerts = [p for p in channel.sent if "unhealthy" in (p.text or "")]
        assert len(alerts) == 2


class TestHalt:
    """A rejected credential stops the tracker."""

    async def test_unauthorized_halts_with_single_alert(self, riot_client, channel, roster):
        riot_client.errors["alice"] = AuthenticationError("bad key", status_code=401)
        scheduler = make_scheduler(riot_client, channel, roster)

        state = await scheduler.run(asyncio.Event())

        assert state == TrackerState.HALTED
        assert scheduler.ticks_run == 1
        assert riot_client.last_match_calls == ["alice"]
        assert len(channel.sent) == 1
        assert "halted" in channel.sent[0].text
        assert scheduler.halt_reason is not None

    async def test_no_tick_runs_after_halt(self, riot_client, channel, roster):
        riot_client.errors["alice"] = AuthenticationError("bad key", status_code=401)
        scheduler = make_scheduler(riot_client, channel, roster)
        await scheduler.run_tick()

        assert await scheduler.trigger_tick() is None
        assert scheduler.ticks_run == 1
        assert len(channel.sent) == 1


class TestLifecycle:
    """Single-flight ticks and cooperative stop."""

    async def test_tick_requested_while_running_is_dropped(self, channel, roster):
        gate = asyncio.Event()
        entered = asyncio.Event()

        async def block(player):
            entered.set()
            await gate.wait()

        stub = StubProcessor(hook=block)
        scheduler = MatchTrackerScheduler(
            stub, repository_factory(roster), MatchNotifier(channel), MatchCache(), make_settings()
        )

        first = asyncio.create_task(scheduler.run_tick())
        await entered.wait()

        assert scheduler.state == TrackerState.RUNNING
        assert await scheduler.trigger_tick() is None
        assert scheduler.dropped_ticks == 1

        gate.set()
        summary = await first

        assert summary.skipped == 2
        assert scheduler.ticks_run == 1
        assert scheduler.state == TrackerState.IDLE

    async def test_stop_before_start(self, riot_client, channel, roster):
        scheduler = make_scheduler(riot_client, channel, roster)
        stop_event = asyncio.Event()
        stop_event.set()

        state = await scheduler.run(stop_event)

        assert state == TrackerState.STOPPED
        assert scheduler.ticks_run == 0

    async def test_stop_between_players(self, channel, roster):
        stop_event = asyncio.Event()

        async def request_stop(player):
            stop_event.set()

        stub = StubProcessor(hook=request_stop)
        scheduler = MatchTrackerScheduler(
            stub, repository_factory(roster), MatchNotifier(channel), MatchCache(), make_settings()
        )

        state = await scheduler.run(stop_event)

        assert state == TrackerState.STOPPED
        assert stub.calls == ["alice"]
        assert scheduler.last_tick.interrupted is True

    async def test_loop_waits_between_ticks(self, channel, roster):
        stop_event = asyncio.Event()
        stub = StubProcessor()

        async def stop_after_three(player):
            if len(stub.calls) >= 6:
                stop_event.set()

        stub.hook = stop_after_three
        scheduler = MatchTrackerScheduler(
            stub,
            repository_factory(roster),
            MatchNotifier(channel),
            MatchCache(),
            make_settings(poll_interval_seconds=0.01),
        )

        state = await asyncio.wait_for(scheduler.run(stop_event), timeout=5)

        assert state == TrackerState.STOPPED
        assert scheduler.ticks_run == 3

    async def test_cache_swept_after_every_tick(self, riot_client, channel, roster):
        scheduler = make_scheduler(riot_client, channel, roster)
        scheduler.cache.sweep_expired = MagicMock(return_value=0)

        await scheduler.run_tick()
        roster.list_error = RuntimeError("database unavailable")
        await scheduler.run_tick()

        assert scheduler.cache.sweep_expired.call_count == 2

    async def test_status(self, riot_client, channel, roster):
        scheduler = make_scheduler(riot_client, channel, roster)
        await scheduler.run_tick()

        status = scheduler.status()

        assert status["state"] == "idle"
        assert status["ticks_run"] == 1
        assert status["next_delay_seconds"] == 15.0
        assert status["last_tick"]["players"] == 2
        assert status["cache"]["size"] == 0
