"""Pydantic models for Riot API response data."""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AccountDTO(BaseModel):
    """Riot Account information."""

    puuid: str
    game_name: Optional[str] = Field(None, alias="gameName")
    tag_line: Optional[str] = Field(None, alias="tagLine")

    model_config = ConfigDict(populate_by_name=True)


class TFTParticipantDTO(BaseModel):
    """Match participant information.

    ``units`` and ``traits`` are the board loadout; only the card renderer
    reads them.
    """

    puuid: str
    placement: int = Field(..., ge=1)
    partner_group_id: Optional[int] = None
    riot_id_game_name: Optional[str] = Field(None, alias="riotIdGameName")
    riot_id_tagline: Optional[str] = Field(None, alias="riotIdTagline")
    level: Optional[int] = None
    units: List[Dict[str, Any]] = Field(default_factory=list)
    traits: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class MatchInfoDTO(BaseModel):
    """Match information."""

    queue_id: int = Field(..., validation_alias=AliasChoices("queue_id", "queueId"))
    game_datetime: Optional[int] = None
    tft_set_number: Optional[int] = None
    participants: List[TFTParticipantDTO]

    model_config = ConfigDict(populate_by_name=True)


class MatchMetadataDTO(BaseModel):
    """Match metadata."""

    match_id: str
    participants: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class MatchDTO(BaseModel):
    """Complete match data."""

    metadata: MatchMetadataDTO
    info: MatchInfoDTO

    @property
    def match_id(self) -> str:
        """Get match ID from metadata."""
        return self.metadata.match_id

    @property
    def queue_id(self) -> int:
        """Get queue ID from match info."""
        return self.info.queue_id

    def participant(self, puuid: str) -> Optional[TFTParticipantDTO]:
        """Get a participant entry by puuid."""
        return next((p for p in self.info.participants if p.puuid == puuid), None)

    model_config = ConfigDict(populate_by_name=True)


class LeagueEntryDTO(BaseModel):
    """League entry information."""

    queue_type: str = Field(..., alias="queueType")
    tier: Optional[str] = None
    rank: Optional[str] = None
    league_points: int = Field(0, alias="leaguePoints")
    wins: int = 0
    losses: int = 0
    puuid: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
