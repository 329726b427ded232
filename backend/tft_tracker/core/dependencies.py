"""Core dependencies for FastAPI application."""

from collections.abc import AsyncGenerator

from fastapi import HTTPException

from .config import get_global_settings
from .riot_api import RiotAPIClient


async def get_riot_client() -> AsyncGenerator[RiotAPIClient, None]:
    """Get Riot API client instance."""
    settings = get_global_settings()

    if not settings.riot_api_key:
        raise HTTPException(status_code=500, detail="Riot API key not configured")

    client = RiotAPIClient(
        api_key=settings.riot_api_key, platform=settings.default_platform
    )
    await client.start_session()
    try:
        yield client
    finally:
        await client.close()


__all__ = ["get_riot_client"]
