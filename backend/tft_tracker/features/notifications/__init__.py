"""Notifications feature module.

Delivery channels and the external card renderer contract.
"""

from .channel import (
    DiscordWebhookChannel,
    LoggingChannel,
    NotificationChannel,
    NotificationPayload,
)
from .renderer import CardRenderer, RenderInputError, validate_render_input

__all__ = [
    "DiscordWebhookChannel",
    "LoggingChannel",
    "NotificationChannel",
    "NotificationPayload",
    "CardRenderer",
    "RenderInputError",
    "validate_render_input",
]
