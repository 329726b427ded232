"""Player service for registering tracked players and building leaderboards.

Thin orchestration layer:
- All database queries delegated to the tracked player repository
- Riot API access goes through RiotAPIGateway
- Rank scoring lives in ``ranks``
"""

from typing import Optional

import structlog

from tft_tracker.core import (
    DuplicatePlayerError,
    PlayerNotFoundError,
    ValidationError,
    ensure_required_fields,
    get_global_settings,
)
from tft_tracker.core.riot_api.constants import region_for_platform
from .gateway import RiotAPIGateway
from .models import TrackedPlayer
from .ranks import Ranked, format_rank, rank_to_numeric
from .repository import TrackedPlayerRepositoryInterface
from .schemas import (
    LeaderboardEntry,
    LeaderboardMode,
    LeaderboardResponse,
    TrackedPlayerListResponse,
    TrackedPlayerResponse,
)

logger = structlog.get_logger(__name__)


def tracked_player_to_response(player: TrackedPlayer) -> TrackedPlayerResponse:
    """Transform a tracked player into its API schema."""
    return TrackedPlayerResponse(
        puuid=player.puuid,
        riot_id=player.riot_id,
        game_name=player.game_name,
        tag_line=player.tag_line,
        region=player.region,
        platform=player.platform,
        last_match_id=player.last_match_id,
        solo_rank=format_rank(player.ranks.solo),
        double_up_rank=format_rank(player.ranks.double_up),
    )


class PlayerService:
    """Service for tracked player operations (Thin Orchestration Layer).

    Responsibilities:
    - Normalize and validate registration input
    - Orchestrate the Riot ID lookup and the repository write
    - Order players by ladder score for leaderboards
    """

    def __init__(
        self,
        repository: TrackedPlayerRepositoryInterface,
        riot_gateway: Optional[RiotAPIGateway] = None,
    ):
        """Initialize player service with repository and gateway.

        Read-only operations (roster, leaderboard) work without a gateway.

        :param repository: Tracked player repository
        :param riot_gateway: Anti-Corruption Layer for Riot API
        """
        self.repository = repository
        self.riot_gateway = riot_gateway

    async def register_player(
        self,
        game_name: str,
        tag_line: str,
        platform: Optional[str] = None,
    ) -> TrackedPlayerResponse:
        """Start tracking a player by Riot ID.

        The player's current latest match becomes the last-seen pointer, so
        only matches finished after registration are announced.

        :param game_name: Riot ID game name
        :param tag_line: Riot ID tag line, with or without a leading '#'
        :param platform: Platform code, the configured default when None
        :returns: The tracked player
        :raises ValidationError: If name, tag or platform are invalid
        :raises DuplicatePlayerError: If the player is already tracked
        :raises NotFoundError: If the Riot ID does not exist
        """
        safe_game_name = (game_name or "").strip()
        safe_tag_line = (tag_line or "").strip()
        if safe_tag_line.startswith("#"):
            safe_tag_line = safe_tag_line[1:]

        ensure_required_fields(
            {"game_name": safe_game_name, "tag_line": safe_tag_line},
            ["game_name", "tag_line"],
            operation="register_player",
        )

        normalized_platform = (
            platform or get_global_settings().default_platform
        ).strip().lower()
        try:
            region = region_for_platform(normalized_platform).value
        except ValueError as e:
            raise ValidationError(
                f"Unknown platform: {normalized_platform}",
                fields=["platform"],
                operation="register_player",
            ) from e

        if self.riot_gateway is None:
            raise ValueError("riot_gateway is required to register players")

        profile = await self.riot_gateway.fetch_player_profile(
            safe_game_name, safe_tag_line, region, normalized_platform
        )

        if await self.repository.player_exists(profile.puuid):
            raise DuplicatePlayerError(profile.puuid, operation="register_player")

        player = await self.repository.register_player(
            puuid=profile.puuid,
            region=region,
            platform=normalized_platform,
            game_name=profile.game_name,
            tag_line=profile.tag_line,
            last_match_id=profile.last_match_id,
            snapshots=profile.ranks,
        )

        logger.info(
            "Player tracking started",
            puuid=player.puuid,
            riot_id=player.riot_id,
            platform=normalized_platform,
        )
        return tracked_player_to_response(player)

    async def remove_player(self, puuid: str) -> None:
        """Stop tracking a player.

        :raises PlayerNotFoundError: If the player is not tracked
        """
        removed = await self.repository.remove_player(puuid)
        if not removed:
            raise PlayerNotFoundError(puuid, operation="remove_player")
        logger.info("Player tracking stopped", puuid=puuid)

    async def list_players(self) -> TrackedPlayerListResponse:
        """Get every tracked player."""
        players = await self.repository.list_tracked_players()
        return TrackedPlayerListResponse(
            players=[tracked_player_to_response(p) for p in players],
            total=len(players),
        )

    async def leaderboard(self, mode: LeaderboardMode) -> LeaderboardResponse:
        """Rank tracked players by ladder score for one queue.

        Ranked players are ordered by score, best first; unranked players
        follow in roster order.
        """
        players = await self.repository.list_tracked_players()

        rows = []
        for player in players:
            snapshot = (
                player.ranks.solo
                if mode == LeaderboardMode.SOLO
                else player.ranks.double_up
            )
            rows.append((player, snapshot, rank_to_numeric(snapshot)))

        rows.sort(key=lambda row: (not isinstance(row[1], Ranked), -row[2]))

        entries = [
            LeaderboardEntry(
                position=position,
                puuid=player.puuid,
                riot_id=player.riot_id,
                rank=format_rank(snapshot),
                score=score,
                ranked=isinstance(snapshot, Ranked),
            )
            for position, (player, snapshot, score) in enumerate(rows, start=1)
        ]
        return LeaderboardResponse(mode=mode, entries=entries)
