"""Dependencies for the players feature.

Injects repository and gateway into service following dependency inversion principle.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tft_tracker.core import get_db
from tft_tracker.core.dependencies import get_riot_client
from tft_tracker.core.riot_api.client import RiotAPIClient
from .gateway import RiotAPIGateway
from .repository import SQLAlchemyTrackedPlayerRepository, TrackedPlayerRepositoryInterface
from .service import PlayerService


async def get_tracked_player_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TrackedPlayerRepositoryInterface:
    """Get tracked player repository instance.

    :param db: Database session
    :returns: Tracked player repository implementation
    """
    return SQLAlchemyTrackedPlayerRepository(db)


async def get_riot_gateway(
    riot_client: Annotated[RiotAPIClient, Depends(get_riot_client)],
) -> RiotAPIGateway:
    """Get Riot API gateway instance.

    :param riot_client: Riot API client
    :returns: Riot API gateway
    """
    return RiotAPIGateway(riot_client)


async def get_player_service(
    repository: Annotated[
        TrackedPlayerRepositoryInterface, Depends(get_tracked_player_repository)
    ],
    gateway: Annotated[RiotAPIGateway, Depends(get_riot_gateway)],
) -> PlayerService:
    """Get player service instance.

    :param repository: Tracked player repository
    :param gateway: Riot API gateway (Anti-Corruption Layer)
    :returns: Player service with injected dependencies
    """
    return PlayerService(repository, gateway)


async def get_player_query_service(
    repository: Annotated[
        TrackedPlayerRepositoryInterface, Depends(get_tracked_player_repository)
    ],
) -> PlayerService:
    """Get a read-only player service that never opens a Riot API session."""
    return PlayerService(repository)


# Type aliases for cleaner dependency injection
PlayerServiceDep = Annotated[PlayerService, Depends(get_player_service)]
PlayerQueryServiceDep = Annotated[PlayerService, Depends(get_player_query_service)]
TrackedPlayerRepositoryDep = Annotated[
    TrackedPlayerRepositoryInterface, Depends(get_tracked_player_repository)
]

__all__ = [
    "get_player_service",
    "get_player_query_service",
    "get_tracked_player_repository",
    "get_riot_gateway",
    "PlayerServiceDep",
    "PlayerQueryServiceDep",
    "TrackedPlayerRepositoryDep",
]
