"""
Riot API client package for Teamfight Tactics API integration.

This package provides an HTTP client for the account, TFT match and TFT
league endpoints, with retries and a classified error taxonomy.
"""

from .client import RiotAPIClient
from .errors import (
    APIErrorKind,
    RiotAPIError,
    NotFoundError,
    AuthenticationError,
    ForbiddenError,
    RateLimitError,
    ServerError,
    ClientError,
    UnknownAPIError,
    InvalidResponseError,
)
from .models import (
    AccountDTO,
    TFTParticipantDTO,
    MatchDTO,
    LeagueEntryDTO,
)
from .endpoints import RiotAPIEndpoints
from .constants import Region, Platform, QueueType, region_for_platform

__all__ = [
    "RiotAPIClient",
    "APIErrorKind",
    "RiotAPIError",
    "NotFoundError",
    "AuthenticationError",
    "ForbiddenError",
    "RateLimitError",
    "ServerError",
    "ClientError",
    "UnknownAPIError",
    "InvalidResponseError",
    "AccountDTO",
    "TFTParticipantDTO",
    "MatchDTO",
    "LeagueEntryDTO",
    "RiotAPIEndpoints",
    "Region",
    "Platform",
    "QueueType",
    "region_for_platform",
]
