"""Integration tests for the tracked player endpoints."""

import pytest
from fastapi.testclient import TestClient

from tft_tracker.core.riot_api.errors import NotFoundError, ServerError
from tft_tracker.features.players.dependencies import (
    get_player_query_service,
    get_player_service,
)
from tft_tracker.features.players.gateway import RiotAPIGateway
from tft_tracker.features.players.ranks import Ranked, RankSnapshots
from tft_tracker.features.players.service import PlayerService
from tft_tracker.main import app
from tests.fakes import InMemoryTrackedPlayerRepository, make_player


@pytest.fixture
def repository():
    return InMemoryTrackedPlayerRepository()


@pytest.fixture
def client(repository, riot_client):
    riot_client.puuids[("Alice", "EUW")] = "puuid-alice"
    riot_client.latest["puuid-alice"] = "EUW1_500"

    app.dependency_overrides[get_player_service] = lambda: PlayerService(
        repository, RiotAPIGateway(riot_client)
    )
    app.dependency_overrides[get_player_query_service] = lambda: PlayerService(repository)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_register_player(client, repository):
    """Registering stores the player with its current latest match."""
    response = client.post(
        "/api/v1/players/",
        json={"game_name": "Alice", "tag_line": "#EUW", "platform": "euw1"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["riot_id"] == "Alice#EUW"
    assert body["last_match_id"] == "EUW1_500"
    assert "puuid-alice" in repository.players


def test_register_duplicate_returns_409(client, repository):
    repository.players["puuid-alice"] = make_player("puuid-alice")

    response = client.post(
        "/api/v1/players/", json={"game_name": "Alice", "tag_line": "EUW", "platform": "euw1"}
    )

    assert response.status_code == 409


def test_register_unknown_platform_returns_400(client):
    response = client.post(
        "/api/v1/players/", json={"game_name": "Alice", "tag_line": "EUW", "platform": "xx9"}
    )

    assert response.status_code == 400


def test_register_unknown_riot_id_returns_404(client, riot_client):
    async def missing(region, game_name, tag_line):
        raise NotFoundError("Account not found", status_code=404)

    riot_client.get_player_id = missing

    response = client.post(
        "/api/v1/players/", json={"game_name": "Ghost", "tag_line": "000", "platform": "euw1"}
    )

    assert response.status_code == 404


def test_register_upstream_failure_returns_502(client, riot_client):
    async def down(region, game_name, tag_line):
        raise ServerError("Service Unavailable", status_code=503)

    riot_client.get_player_id = down

    response = client.post(
        "/api/v1/players/", json={"game_name": "Alice", "tag_line": "EUW", "platform": "euw1"}
    )

    assert response.status_code == 502


def test_list_players(client, repository):
    repository.players["a"] = make_player("a")

    response = client.get("/api/v1/players/")

    assert response.status_code == 200
    assert response.json()["total"] == 1


def test_leaderboard(client, repository):
    repository.players["a"] = make_player("a")
    repository.players["b"] = make_player(
        "b", ranks=RankSnapshots(double_up=Ranked("EMERALD", "IV", 12))
    )

    response = client.get("/api/v1/players/leaderboard", params={"mode": "double_up"})

    assert response.status_code == 200
    entries = response.json()["entries"]
    assert [e["puuid"] for e in entries] == ["b", "a"]
    assert entries[0]["rank"] == "EMERALD IV 12 LP"
    assert entries[1]["rank"] == "Unranked"


def test_leaderboard_rejects_unknown_mode(client):
    response = client.get("/api/v1/players/leaderboard", params={"mode": "arena"})

    assert response.status_code == 422


def test_remove_player(client, repository):
    repository.players["a"] = make_player("a")

    assert client.delete("/api/v1/players/a").status_code == 204
    assert client.delete("/api/v1/players/a").status_code == 404
