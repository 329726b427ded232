"""Tests for the player service: registration, removal and leaderboards."""

import pytest

from tft_tracker.core import DuplicatePlayerError, PlayerNotFoundError, ValidationError
from tft_tracker.core.riot_api.errors import NotFoundError
from tft_tracker.features.players.gateway import RiotAPIGateway
from tft_tracker.features.players.ranks import Ranked, RankSnapshots
from tft_tracker.features.players.schemas import LeaderboardMode
from tft_tracker.features.players.service import PlayerService
from tests.fakes import InMemoryTrackedPlayerRepository, league_entry, make_player


@pytest.fixture
def repository():
    return InMemoryTrackedPlayerRepository()


@pytest.fixture
def service(repository, riot_client):
    riot_client.puuids[("Alice", "EUW")] = "puuid-alice"
    riot_client.latest["puuid-alice"] = "EUW1_500"
    riot_client.entries["puuid-alice"] = [
        league_entry("RANKED_TFT", "GOLD", "II", 40),
    ]
    return PlayerService(repository, RiotAPIGateway(riot_client))


class TestRegisterPlayer:
    """Registration by Riot ID."""

    async def test_register_stores_current_match_and_ranks(self, service, repository):
        """The latest match at registration becomes the last-seen pointer."""
        response = await service.register_player("Alice", "EUW", platform="euw1")

        assert response.puuid == "puuid-alice"
        assert response.riot_id == "Alice#EUW"
        assert response.region == "europe"
        assert response.last_match_id == "EUW1_500"
        assert response.solo_rank == "GOLD II 40 LP"
        assert response.double_up_rank == "Unranked"
        assert repository.players["puuid-alice"].ranks.solo == Ranked("GOLD", "II", 40)

    async def test_tag_line_hash_and_whitespace_are_stripped(self, service):
        response = await service.register_player("  Alice ", " #EUW", platform="EUW1")

        assert response.game_name == "Alice"
        assert response.tag_line == "EUW"
        assert response.platform == "euw1"

    async def test_empty_name_is_rejected(self, service, riot_client):
        with pytest.raises(ValidationError) as exc_info:
            await service.register_player("   ", "#", platform="euw1")

        assert exc_info.value.fields == ["game_name", "tag_line"]
        assert riot_client.last_match_calls == []

    async def test_unknown_platform_is_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.register_player("Alice", "EUW", platform="mars1")

        assert exc_info.value.fields == ["platform"]

    async def test_already_tracked_is_duplicate(self, service, repository):
        repository.players["puuid-alice"] = make_player("puuid-alice")

        with pytest.raises(DuplicatePlayerError):
            await service.register_player("Alice", "EUW", platform="euw1")

    async def test_unknown_riot_id_propagates(self, service, riot_client):
        async def missing(region, game_name, tag_line):
            raise NotFoundError("Account not found", status_code=404)

        riot_client.get_player_id = missing

        with pytest.raises(NotFoundError):
            await service.register_player("Ghost", "000", platform="euw1")

    async def test_register_without_gateway(self, repository):
        service = PlayerService(repository)

        with pytest.raises(ValueError):
            await service.register_player("Alice", "EUW", platform="euw1")


class TestRemoveAndList:
    """Roster maintenance."""

    async def test_remove_player(self, repository):
        repository.players["puuid-a"] = make_player("puuid-a")
        service = PlayerService(repository)

        await service.remove_player("puuid-a")

        assert "puuid-a" not in repository.players

    async def test_remove_missing_player(self, repository):
        with pytest.raises(PlayerNotFoundError):
            await PlayerService(repository).remove_player("missing")

    async def test_list_players(self, repository):
        repository.players["puuid-a"] = make_player("puuid-a")
        repository.players["puuid-b"] = make_player("puuid-b")

        result = await PlayerService(repository).list_players()

        assert result.total == 2
        assert [p.puuid for p in result.players] == ["puuid-a", "puuid-b"]


class TestLeaderboard:
    """Ordering by ladder score."""

    async def test_orders_by_score_with_unranked_last(self, repository):
        for player in [
            make_player("unranked-1"),
            make_player("gold", ranks=RankSnapshots(solo=Ranked("GOLD", "I", 80))),
            make_player("iron", ranks=RankSnapshots(solo=Ranked("IRON", "IV", 0))),
            make_player("unranked-2"),
            make_player("master", ranks=RankSnapshots(solo=Ranked("MASTER", "I", 120))),
        ]:
            repository.players[player.puuid] = player

        board = await PlayerService(repository).leaderboard(LeaderboardMode.SOLO)

        assert [e.puuid for e in board.entries] == [
            "master",
            "gold",
            "iron",
            "unranked-1",
            "unranked-2",
        ]
        assert [e.position for e in board.entries] == [1, 2, 3, 4, 5]
        assert board.entries[2].ranked is True
        assert board.entries[3].ranked is False
        assert board.entries[3].rank == "Unranked"

    async def test_double_up_mode_reads_double_up_rank(self, repository):
        repository.players["a"] = make_player(
            "a", ranks=RankSnapshots(solo=Ranked("CHALLENGER", "I", 900))
        )
        repository.players["b"] = make_player(
            "b", ranks=RankSnapshots(double_up=Ranked("SILVER", "III", 10))
        )

        board = await PlayerService(repository).leaderboard(LeaderboardMode.DOUBLE_UP)

        assert [e.puuid for e in board.entries] == ["b", "a"]
        assert board.mode == LeaderboardMode.DOUBLE_UP
