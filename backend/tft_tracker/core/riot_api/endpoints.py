"""Riot API endpoint definitions and routing information."""

from typing import Optional, Union
from urllib.parse import quote

from .constants import Region, Platform


def _enum_str(value: Union[Region, Platform, str]) -> str:
    """Extract string value from enum or return as-is."""
    return value.value if isinstance(value, (Region, Platform)) else str(value).lower()


class RiotAPIEndpoints:
    """TFT endpoint definitions and routing."""

    def __init__(
        self, region: Region = Region.EUROPE, platform: Platform = Platform.EUW1
    ):
        """
        Initialize endpoint configuration.

        Args:
            region: Default region for regional endpoints
            platform: Default platform for platform endpoints
        """
        self.region = region
        self.platform = platform

    def get_base_url(self, region: Optional[Union[Region, str]] = None) -> str:
        """Get base URL for regional endpoints."""
        return f"https://{_enum_str(region or self.region)}.api.riotgames.com"

    def get_platform_url(self, platform: Optional[Union[Platform, str]] = None) -> str:
        """Get base URL for platform endpoints."""
        return f"https://{_enum_str(platform or self.platform)}.api.riotgames.com"

    # Account endpoints (Regional)
    def account_by_riot_id(
        self, game_name: str, tag_line: str, region: Optional[Region] = None
    ) -> str:
        """Get account by Riot ID endpoint."""
        base_url = self.get_base_url(region)
        return f"{base_url}/riot/account/v1/accounts/by-riot-id/{quote(game_name, safe='')}/{quote(tag_line, safe='')}"

    # Match endpoints (Regional)
    def match_ids_by_puuid(
        self,
        puuid: str,
        start: int = 0,
        count: int = 1,
        region: Optional[Region] = None,
    ) -> str:
        """Get most recent TFT match ids endpoint."""
        base_url = self.get_base_url(region)
        return f"{base_url}/tft/match/v1/matches/by-puuid/{puuid}/ids?start={start}&count={count}"

    def match_by_id(self, match_id: str, region: Optional[Region] = None) -> str:
        """Get TFT match by ID endpoint."""
        base_url = self.get_base_url(region)
        return f"{base_url}/tft/match/v1/matches/{match_id}"

    # League endpoints (Platform)
    def league_entries_by_puuid(
        self, puuid: str, platform: Optional[Platform] = None
    ) -> str:
        """Get TFT league entries by PUUID endpoint."""
        platform_url = self.get_platform_url(platform)
        return f"{platform_url}/tft/league/v1/by-puuid/{puuid}"
