"""Shared fixtures for tracker tests."""

import pytest

from tft_tracker.features.notifications.channel import LoggingChannel
from tests.fakes import FakeRiotClient


@pytest.fixture
def riot_client() -> FakeRiotClient:
    return FakeRiotClient()


@pytest.fixture
def channel() -> LoggingChannel:
    return LoggingChannel()
