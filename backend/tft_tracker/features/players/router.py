"""Tracked player API endpoints."""

from fastapi import APIRouter, HTTPException, Query
import structlog

from tft_tracker.core import DuplicatePlayerError, PlayerNotFoundError, ValidationError
from tft_tracker.core.riot_api.errors import NotFoundError, RiotAPIError
from .dependencies import PlayerQueryServiceDep, PlayerServiceDep
from .schemas import (
    LeaderboardMode,
    LeaderboardResponse,
    PlayerRegisterRequest,
    TrackedPlayerListResponse,
    TrackedPlayerResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/players", tags=["players"])


@router.post("/", response_model=TrackedPlayerResponse, status_code=201)
async def register_player(
    request: PlayerRegisterRequest,
    player_service: PlayerServiceDep,
):
    """
    Start tracking a player by Riot ID.

    Raises:
        400: Missing name or tag, or unknown platform.
        404: Riot ID does not exist.
        409: Player already tracked.
        502: Riot API failure.
    """
    try:
        return await player_service.register_player(
            request.game_name, request.tag_line, request.platform
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DuplicatePlayerError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except NotFoundError:
        raise HTTPException(
            status_code=404,
            detail=f"Riot ID not found: {request.game_name}#{request.tag_line}",
        )
    except RiotAPIError as e:
        logger.error(
            "Riot API failure during registration",
            error=str(e),
            error_kind=e.kind.value,
            status_code=e.status_code,
        )
        raise HTTPException(status_code=502, detail="Riot API request failed")


@router.get("/", response_model=TrackedPlayerListResponse)
async def list_players(player_service: PlayerQueryServiceDep):
    """List all tracked players."""
    return await player_service.list_players()


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    player_service: PlayerQueryServiceDep,
    mode: LeaderboardMode = Query(
        LeaderboardMode.SOLO, description="Queue to rank players by"
    ),
):
    """
    Get tracked players ordered by rank for one queue.

    Unranked players are listed last.
    """
    return await player_service.leaderboard(mode)


@router.delete("/{puuid}", status_code=204)
async def remove_player(puuid: str, player_service: PlayerQueryServiceDep):
    """
    Stop tracking a player.

    Raises:
        404: Player not tracked.
    """
    try:
        await player_service.remove_player(puuid)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
