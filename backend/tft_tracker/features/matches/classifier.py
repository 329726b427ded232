"""Match classification by queue and placement reporting."""

import math
from enum import Enum
from typing import Optional

from tft_tracker.core.riot_api.constants import QueueType
from tft_tracker.core.riot_api.models import MatchDTO, TFTParticipantDTO


class MatchMode(str, Enum):
    """How a finished match is announced."""

    SOLO = "solo"
    DOUBLE_UP = "double_up"
    OTHER = "other"


_QUEUE_MODES = {
    QueueType.RANKED_TFT.value: MatchMode.SOLO,
    QueueType.RANKED_DOUBLE_UP.value: MatchMode.DOUBLE_UP,
}


def classify(match: MatchDTO) -> MatchMode:
    """Ranked solo, ranked Double Up, or anything else."""
    return _QUEUE_MODES.get(match.queue_id, MatchMode.OTHER)


def reported_placement(raw_placement: int, mode: MatchMode) -> int:
    """Placement as players see it.

    Double Up lists eight individual placements for four teams, so team
    placement is the raw one halved and rounded up.
    """
    if mode == MatchMode.DOUBLE_UP:
        return math.ceil(raw_placement / 2)
    return raw_placement


def find_participant(match: MatchDTO, puuid: str) -> Optional[TFTParticipantDTO]:
    return match.participant(puuid)


def find_teammate(
    match: MatchDTO, participant: TFTParticipantDTO
) -> Optional[TFTParticipantDTO]:
    """The other participant sharing ``participant``'s partner group."""
    if participant.partner_group_id is None:
        return None
    return next(
        (
            p
            for p in match.info.participants
            if p.partner_group_id == participant.partner_group_id
            and p.puuid != participant.puuid
        ),
        None,
    )


def ordinal(number: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th'."""
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"
