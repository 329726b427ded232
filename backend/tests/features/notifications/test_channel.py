"""Tests for notification channels."""

import json

import httpx
import pytest

from tft_tracker.features.notifications.channel import (
    DiscordWebhookChannel,
    LoggingChannel,
    NotificationPayload,
)

WEBHOOK_URL = "https://discord.com/api/webhooks/1/token"


class RecordingTransport:
    def __init__(self, status_code: int = 204):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code)


def make_channel(recorder: RecordingTransport) -> DiscordWebhookChannel:
    return DiscordWebhookChannel(WEBHOOK_URL, transport=httpx.MockTransport(recorder))


class TestDiscordWebhookChannel:
    """Webhook payload encoding."""

    async def test_text_is_posted_as_json(self):
        recorder = RecordingTransport()
        channel = make_channel(recorder)

        await channel.send(NotificationPayload(text="**Alice#EUW** finished 1st"))

        request = recorder.requests[0]
        assert str(request.url) == WEBHOOK_URL
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {"content": "**Alice#EUW** finished 1st"}
        await channel.close()

    async def test_image_is_posted_as_multipart(self):
        recorder = RecordingTransport()
        channel = make_channel(recorder)

        await channel.send(NotificationPayload(text="GG", image_bytes=b"\x89PNGDATA"))

        request = recorder.requests[0]
        body = request.read()
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="payload_json"' in body
        assert b'{"content": "GG"}' in body
        assert b'name="files[0]"; filename="match.png"' in body
        assert b"\x89PNGDATA" in body
        await channel.close()

    async def test_empty_payload_is_skipped(self):
        recorder = RecordingTransport()
        channel = make_channel(recorder)

        await channel.send(NotificationPayload())

        assert recorder.requests == []

    async def test_rejected_delivery_raises(self):
        channel = make_channel(RecordingTransport(status_code=400))

        with pytest.raises(httpx.HTTPStatusError):
            await channel.send(NotificationPayload(text="hello"))
        await channel.close()


class TestLoggingChannel:
    async def test_records_payloads(self):
        channel = LoggingChannel()

        await channel.send(NotificationPayload(text="hello"))

        assert [p.text for p in channel.sent] == ["hello"]
