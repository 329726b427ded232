"""Card renderer contract.

Image generation is provided from outside the tracker; a renderer turns a
finished match into PNG bytes attached to the notification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol

if TYPE_CHECKING:
    from tft_tracker.core.riot_api.models import TFTParticipantDTO
    from tft_tracker.features.matches.classifier import MatchMode
    from tft_tracker.features.matches.notifier import TeammateInfo
    from tft_tracker.features.players.models import TrackedPlayer
    from tft_tracker.features.players.ranks import RankSnapshot


class RenderInputError(ValueError):
    """Structurally invalid renderer input (missing player or participant)."""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


class CardRenderer(Protocol):
    """Renders a match card image."""

    async def render(
        self,
        player: "TrackedPlayer",
        participant: "TFTParticipantDTO",
        snapshot: "RankSnapshot",
        delta_text: str,
        placement: int,
        teammate: Optional["TeammateInfo"],
        mode: "MatchMode",
    ) -> bytes:
        ...


def validate_render_input(player: Any, participant: Any) -> None:
    """Fail fast before rendering a card without the data it needs.

    Raises:
        RenderInputError: If the player or the participant entry is missing
    """
    if player is None:
        raise RenderInputError("Card renderer requires a player", field="player")
    if participant is None:
        raise RenderInputError(
            "Card renderer requires the player's participant entry",
            field="participant",
        )
    if not getattr(player, "puuid", None):
        raise RenderInputError("Player has no puuid", field="player.puuid")
    if getattr(participant, "placement", None) is None:
        raise RenderInputError(
            "Participant has no placement", field="participant.placement"
        )
