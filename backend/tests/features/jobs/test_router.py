"""Integration tests for the tracker endpoints."""

import pytest
from fastapi.testclient import TestClient

from tft_tracker.core.config import Settings
from tft_tracker.features.jobs.dependencies import get_match_tracker
from tft_tracker.features.jobs.match_tracker import PlayerMatchProcessor
from tft_tracker.features.jobs.scheduler import MatchTrackerScheduler, TrackerState
from tft_tracker.features.matches.cache import MatchCache
from tft_tracker.features.matches.notifier import MatchNotifier
from tft_tracker.features.players.gateway import RiotAPIGateway
from tft_tracker.main import app
from tests.fakes import InMemoryTrackedPlayerRepository, make_player, repository_factory


@pytest.fixture
def tracker(riot_client, channel):
    cache = MatchCache()
    notifier = MatchNotifier(channel)
    processor = PlayerMatchProcessor(riot_client, RiotAPIGateway(riot_client), cache, notifier)
    repository = InMemoryTrackedPlayerRepository([make_player("alice")])
    return MatchTrackerScheduler(
        processor,
        repository_factory(repository),
        notifier,
        cache,
        Settings(poll_interval_seconds=15, max_backoff_seconds=600),
    )


@pytest.fixture
def client(tracker):
    app.dependency_overrides[get_match_tracker] = lambda: tracker
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_status(client):
    response = client.get("/api/v1/tracker/status")

    assert response.status_code == 200
    body = response.json()
    assert body["state"] == "idle"
    assert body["next_delay_seconds"] == 15
    assert body["last_tick"] is None
    assert body["cache"]["size"] == 0


def test_trigger_runs_a_tick(client, tracker):
    response = client.post("/api/v1/tracker/trigger")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert tracker.ticks_run == 1


def test_trigger_while_running_is_dropped(client, tracker):
    tracker.state = TrackerState.RUNNING

    response = client.post("/api/v1/tracker/trigger")

    assert response.json()["success"] is False
    assert tracker.ticks_run == 0


def test_trigger_after_halt_is_rejected(client, tracker):
    tracker.state = TrackerState.HALTED

    response = client.post("/api/v1/tracker/trigger")

    assert response.status_code == 409


def test_status_without_tracker():
    app.dependency_overrides.clear()
    response = TestClient(app).get("/api/v1/tracker/status")

    assert response.status_code == 503


def test_health():
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
