"""Builds and sends finished-match notifications."""

from dataclasses import dataclass
from typing import Optional

import structlog

from tft_tracker.core.riot_api.models import TFTParticipantDTO
from tft_tracker.features.notifications.channel import (
    NotificationChannel,
    NotificationPayload,
)
from tft_tracker.features.notifications.renderer import (
    CardRenderer,
    RenderInputError,
    validate_render_input,
)
from tft_tracker.features.players.models import TrackedPlayer
from tft_tracker.features.players.ranks import (
    UNRANKED,
    DeltaResult,
    RankSnapshot,
    format_delta,
    format_rank,
)
from .classifier import MatchMode, ordinal

logger = structlog.get_logger(__name__)

_MODE_LABELS = {
    MatchMode.SOLO: "Ranked TFT",
    MatchMode.DOUBLE_UP: "Double Up",
    MatchMode.OTHER: "TFT",
}


@dataclass(frozen=True)
class TeammateInfo:
    """Double Up partner shown next to the player.

    An untracked partner carries an ``Unranked`` placeholder and no delta.
    """

    game_name: str
    tag_line: str
    snapshot: RankSnapshot = UNRANKED
    delta: Optional[int] = None
    tracked: bool = False

    @property
    def riot_id(self) -> str:
        if self.tag_line:
            return f"{self.game_name}#{self.tag_line}"
        return self.game_name

    @classmethod
    def untracked(cls, participant: TFTParticipantDTO) -> "TeammateInfo":
        return cls(
            game_name=participant.riot_id_game_name or "Unknown",
            tag_line=participant.riot_id_tagline or "",
        )


def is_top_half(placement: int, mode: MatchMode) -> bool:
    """Top four in a lobby of eight, top two of four Double Up teams."""
    return placement <= (2 if mode == MatchMode.DOUBLE_UP else 4)


class MatchNotifier:
    """Formats match results and hands them to the notification channel."""

    def __init__(
        self,
        channel: NotificationChannel,
        renderer: Optional[CardRenderer] = None,
    ):
        self.channel = channel
        self.renderer = renderer

    def build_text(
        self,
        player: TrackedPlayer,
        placement: int,
        mode: MatchMode,
        rank_delta: Optional[DeltaResult] = None,
        teammate: Optional[TeammateInfo] = None,
    ) -> str:
        verdict = "GG" if is_top_half(placement, mode) else "unlucky"
        names = f"**{player.riot_id}**"
        if teammate is not None:
            names += f" & **{teammate.riot_id}**"

        text = f"{names} finished {ordinal(placement)} in {_MODE_LABELS[mode]}, {verdict}"

        if rank_delta is not None:
            line = f"{format_rank(rank_delta.new)}{format_delta(rank_delta.delta)}"
            if teammate is not None:
                line = f"{player.game_name}: {line}"
            text += f"\n{line}"
        if teammate is not None and mode == MatchMode.DOUBLE_UP:
            text += (
                f"\n{teammate.game_name}: "
                f"{format_rank(teammate.snapshot)}{format_delta(teammate.delta)}"
            )
        return text

    async def build_notification(
        self,
        player: TrackedPlayer,
        participant: TFTParticipantDTO,
        placement: int,
        mode: MatchMode,
        rank_delta: Optional[DeltaResult] = None,
        teammate: Optional[TeammateInfo] = None,
    ) -> NotificationPayload:
        """
        Build the payload for one finished match.

        Args:
            player: Tracked player the match belongs to
            participant: Player's participant entry in the match
            placement: Reported placement (team placement for Double Up)
            mode: Match classification
            rank_delta: Rank change for ranked modes, None otherwise
            teammate: Double Up partner, if any

        Returns:
            Text payload, with a card image when a renderer is configured
        """
        text = self.build_text(player, placement, mode, rank_delta, teammate)
        image_bytes = None

        if self.renderer is not None:
            snapshot = rank_delta.new if rank_delta is not None else player.ranks.solo
            delta_text = format_delta(rank_delta.delta) if rank_delta else ""
            try:
                validate_render_input(player, participant)
                image_bytes = await self.renderer.render(
                    player, participant, snapshot, delta_text, placement, teammate, mode
                )
            except RenderInputError as e:
                logger.error(
                    "Invalid card renderer input",
                    puuid=getattr(player, "puuid", None),
                    field=e.field,
                    error=str(e),
                )
            except Exception as e:
                logger.error(
                    "Card rendering failed, sending text only",
                    puuid=player.puuid,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        return NotificationPayload(text=text, image_bytes=image_bytes)

    async def send(self, payload: NotificationPayload) -> bool:
        """Deliver a payload once. Failures are logged, never retried."""
        try:
            await self.channel.send(payload)
            return True
        except Exception as e:
            logger.error(
                "Failed to send notification",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def send_alert(self, message: str) -> bool:
        """Deliver an operator alert through the same channel."""
        logger.warning("Sending operator alert", alert=message)
        return await self.send(NotificationPayload(text=f":warning: {message}"))
