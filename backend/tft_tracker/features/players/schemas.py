"""Pydantic schemas for the tracked player API."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class LeaderboardMode(str, Enum):
    """Queue a leaderboard is ranked by."""

    SOLO = "solo"
    DOUBLE_UP = "double_up"


class PlayerRegisterRequest(BaseModel):
    """Schema for starting to track a player by Riot ID."""

    game_name: str = Field(..., min_length=1, description="Riot ID game name")
    tag_line: str = Field(
        ..., min_length=1, description="Riot ID tag line, a leading '#' is accepted"
    )
    platform: Optional[str] = Field(
        None, description="Platform shard (e.g. euw1); defaults to the configured one"
    )


class TrackedPlayerResponse(BaseModel):
    """Schema for tracked player response data."""

    puuid: str
    riot_id: str = Field(..., description="Riot ID in format name#tag")
    game_name: str
    tag_line: str
    region: str
    platform: str
    last_match_id: Optional[str] = None
    solo_rank: str = Field(..., description="e.g. 'DIAMOND II 75 LP' or 'Unranked'")
    double_up_rank: str


class TrackedPlayerListResponse(BaseModel):
    """Schema for the tracked player roster."""

    players: list[TrackedPlayerResponse]
    total: int


class LeaderboardEntry(BaseModel):
    """One leaderboard row."""

    position: int = Field(..., ge=1)
    puuid: str
    riot_id: str
    rank: str
    score: int = Field(..., description="Ladder score, 0 for unranked")
    ranked: bool


class LeaderboardResponse(BaseModel):
    """Schema for a leaderboard ordered best first, unranked last."""

    mode: LeaderboardMode
    entries: list[LeaderboardEntry]
