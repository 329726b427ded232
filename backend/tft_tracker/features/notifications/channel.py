"""Notification channels.

A channel delivers a ``NotificationPayload`` (text, an optional card image,
or both). Delivery is best effort: callers log failures and move on.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx
import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NotificationPayload:
    """Message handed to a notification channel."""

    text: Optional[str] = None
    image_bytes: Optional[bytes] = None
    image_filename: str = "match.png"

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.image_bytes


class NotificationChannel(Protocol):
    """Delivery contract used by the tracker."""

    async def send(self, payload: NotificationPayload) -> None:
        ...


class LoggingChannel:
    """Channel that only writes notifications to the log."""

    def __init__(self) -> None:
        self.sent: list[NotificationPayload] = []

    async def send(self, payload: NotificationPayload) -> None:
        self.sent.append(payload)
        logger.info(
            "Notification",
            text=payload.text,
            has_image=payload.image_bytes is not None,
        )

    async def close(self) -> None:
        pass


class DiscordWebhookChannel:
    """Posts notifications to a Discord channel webhook.

    Text-only payloads are sent as JSON; payloads carrying an image are sent
    as multipart form data with the text in ``payload_json``.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize webhook channel.

        Args:
            webhook_url: Discord webhook URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    self.session = httpx.AsyncClient(
                        timeout=httpx.Timeout(self.timeout),
                        transport=self._transport,
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()

    async def send(self, payload: NotificationPayload) -> None:
        """
        Deliver one payload.

        Raises:
            httpx.HTTPError: If the request fails or Discord rejects it
        """
        if payload.is_empty:
            logger.debug("Skipping empty notification")
            return

        await self.start_session()
        assert self.session is not None

        message = {"content": payload.text or ""}
        if payload.image_bytes is None:
            response = await self.session.post(self.webhook_url, json=message)
        else:
            response = await self.session.post(
                self.webhook_url,
                data={"payload_json": json.dumps(message)},
                files={
                    "files[0]": (
                        payload.image_filename,
                        payload.image_bytes,
                        "image/png",
                    )
                },
            )
        response.raise_for_status()
        logger.debug(
            "Notification delivered",
            status_code=response.status_code,
            has_image=payload.image_bytes is not None,
        )
