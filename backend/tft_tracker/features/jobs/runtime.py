"""Lifecycle of the match tracker inside the application process."""

import asyncio
from typing import Optional, Union

import structlog

from tft_tracker.core import get_global_settings
from tft_tracker.core.riot_api.client import RiotAPIClient
from tft_tracker.features.matches.cache import MatchCache
from tft_tracker.features.matches.notifier import MatchNotifier
from tft_tracker.features.notifications.channel import (
    DiscordWebhookChannel,
    LoggingChannel,
)
from tft_tracker.features.players.gateway import RiotAPIGateway
from tft_tracker.features.players.repository import open_tracked_player_repository
from .match_tracker import PlayerMatchProcessor
from .scheduler import MatchTrackerScheduler

logger = structlog.get_logger(__name__)

# Global tracker instance
_tracker: Optional[MatchTrackerScheduler] = None
_tracker_task: Optional["asyncio.Task[object]"] = None
_stop_event: Optional[asyncio.Event] = None
_riot_client: Optional[RiotAPIClient] = None
_channel: Optional[Union[DiscordWebhookChannel, LoggingChannel]] = None


def get_tracker() -> Optional[MatchTrackerScheduler]:
    """Get the global tracker instance.

    Returns:
        The tracker if initialized, None otherwise.
    """
    return _tracker


def build_tracker() -> MatchTrackerScheduler:
    """Wire client, cache, channel and processor into a scheduler."""
    global _riot_client, _channel

    settings = get_global_settings()

    _riot_client = RiotAPIClient()
    if settings.discord_webhook_url:
        _channel = DiscordWebhookChannel(
            settings.discord_webhook_url, timeout=settings.api_request_timeout
        )
    else:
        logger.warning("No notification webhook configured, notifications are logged only")
        _channel = LoggingChannel()

    cache = MatchCache(
        ttl=settings.match_cache_ttl_seconds, maxsize=settings.match_cache_maxsize
    )
    notifier = MatchNotifier(_channel)
    processor = PlayerMatchProcessor(
        _riot_client, RiotAPIGateway(_riot_client), cache, notifier
    )
    return MatchTrackerScheduler(
        processor, open_tracked_player_repository, notifier, cache, settings
    )


async def start_tracker() -> Optional[MatchTrackerScheduler]:
    """Build the tracker and start its loop as a background task.

    Returns:
        The running tracker, or None when disabled via configuration.
    """
    global _tracker, _tracker_task, _stop_event

    settings = get_global_settings()

    if not settings.tracker_enabled:
        logger.info("Match tracker is disabled via configuration")
        return None

    if _tracker is not None:
        logger.warning("Match tracker already initialized")
        return _tracker

    if not settings.riot_api_key:
        logger.warning(
            "RIOT_API_KEY not configured, the tracker will halt on its first request",
            hint="Get your key from https://developer.riotgames.com",
        )

    _tracker = build_tracker()
    _stop_event = asyncio.Event()
    _tracker_task = asyncio.create_task(_tracker.run(_stop_event))
    logger.info("Match tracker task started")
    return _tracker


async def shutdown_tracker() -> None:
    """Signal the loop to stop, wait for the in-flight player, release clients."""
    global _tracker, _tracker_task, _stop_event, _riot_client, _channel

    if _tracker is None:
        logger.info("Match tracker is not running, nothing to shutdown")
        return

    try:
        logger.info("Shutting down match tracker")
        if _stop_event is not None:
            _stop_event.set()
        if _tracker_task is not None:
            await _tracker_task
    finally:
        if _riot_client is not None:
            await _riot_client.close()
        if _channel is not None:
            await _channel.close()
        _tracker = None
        _tracker_task = None
        _stop_event = None
        _riot_client = None
        _channel = None

    logger.info("Match tracker shut down successfully")
