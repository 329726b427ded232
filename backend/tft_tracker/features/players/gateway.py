"""
Riot API Gateway - Anti-Corruption Layer for Players Feature.

Translates Riot API semantics and data structures to our domain language,
isolating the players feature and the tracker from external API details.

Transforms:
- League entries (camelCase, one entry per queue) → RankSnapshots (solo, double_up)
- Riot ID lookup + match history → registration data
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import structlog

from tft_tracker.core.enums import RankedQueue
from .ranks import UNRANKED, RankSnapshot, RankSnapshots, snapshot_from_fields

if TYPE_CHECKING:
    from tft_tracker.core.riot_api.client import RiotAPIClient
    from tft_tracker.core.riot_api.models import LeagueEntryDTO

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PlayerProfile:
    """Everything needed to start tracking a player."""

    puuid: str
    game_name: str
    tag_line: str
    last_match_id: Optional[str]
    ranks: RankSnapshots


class RiotAPIGateway:
    """
    Anti-Corruption Layer for Riot API integration.

    Hides external API structure and transforms data to our domain model.
    """

    def __init__(self, riot_api_client: "RiotAPIClient"):
        """
        Initialize gateway with Riot API client.

        :param riot_api_client: Low-level Riot API client
        """
        self._client = riot_api_client

    @property
    def client(self) -> "RiotAPIClient":
        return self._client

    async def get_rank_snapshots(self, puuid: str, platform: str) -> RankSnapshots:
        """
        Fetch league entries and pick the solo and Double Up ones by queue type.

        Args:
            puuid: Player's unique identifier
            platform: Platform code (e.g., "euw1")

        Returns:
            RankSnapshots; a queue without an entry is Unranked

        Raises:
            RiotAPIError: If the API call fails (404 is already absorbed)
        """
        entries = await self._client.get_league_entries(puuid, platform)

        snapshots = RankSnapshots(
            solo=_pick_queue(entries, RankedQueue.SOLO),
            double_up=_pick_queue(entries, RankedQueue.DOUBLE_UP),
        )
        logger.debug(
            "Player ranks fetched and transformed",
            puuid=puuid,
            entry_count=len(entries),
            solo=snapshots.solo.display(),
            double_up=snapshots.double_up.display(),
        )
        return snapshots

    async def fetch_player_profile(
        self, game_name: str, tag_line: str, region: str, platform: str
    ) -> PlayerProfile:
        """
        Resolve a Riot ID and read its current match pointer and ranks.

        Args:
            game_name: Player's game name (Riot ID part 1)
            tag_line: Player's tag line (Riot ID part 2)
            region: Regional routing value (e.g., "europe")
            platform: Platform code (e.g., "euw1")

        Returns:
            PlayerProfile with the latest match id so history is not replayed

        Raises:
            NotFoundError: If the Riot ID does not exist
            RiotAPIError: If any other API call fails
        """
        logger.debug(
            "Fetching player from Riot API",
            game_name=game_name,
            tag_line=tag_line,
            region=region,
            platform=platform,
        )

        puuid = await self._client.get_player_id(region, game_name, tag_line)
        last_match_id = await self._client.get_last_match_id(puuid, region)
        ranks = await self.get_rank_snapshots(puuid, platform)

        logger.info(
            "Player profile fetched",
            puuid=puuid,
            riot_id=f"{game_name}#{tag_line}",
            last_match_id=last_match_id,
        )
        return PlayerProfile(
            puuid=puuid,
            game_name=game_name,
            tag_line=tag_line,
            last_match_id=last_match_id,
            ranks=ranks,
        )


def _pick_queue(entries: list["LeagueEntryDTO"], queue: RankedQueue) -> RankSnapshot:
    entry = next((e for e in entries if e.queue_type == queue.value), None)
    if entry is None:
        return UNRANKED
    return snapshot_from_fields(entry.tier, entry.rank, entry.league_points)
