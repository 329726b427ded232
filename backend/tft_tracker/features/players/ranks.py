"""Rank snapshots and the numeric rank ladder.

A rank is either ``Unranked`` or ``Ranked(tier, division, points)``. Both
variants map onto one comparable integer score: each tier is a 400 point
band (IRON = 0 ... CHALLENGER = 9), each division adds a fixed offset inside
the band, and the points within the division are added as-is.
"""

from dataclasses import dataclass
from typing import Optional, Union

import structlog

from tft_tracker.core.enums import Division, Tier

logger = structlog.get_logger(__name__)

TIER_BAND = 400

TIER_ORDER = [tier.value for tier in Tier]

DIVISION_OFFSETS = {
    Division.I.value: 300,
    Division.II.value: 200,
    Division.III.value: 100,
    Division.IV.value: 0,
}


@dataclass(frozen=True)
class Unranked:
    """No placement in the queue yet."""

    def display(self) -> str:
        return "Unranked"


@dataclass(frozen=True)
class Ranked:
    """A placed rank. ``division`` is empty for apex tiers on some payloads."""

    tier: str
    division: str = ""
    points: int = 0

    def display(self) -> str:
        parts = [self.tier.upper()]
        if self.division:
            parts.append(self.division.upper())
        parts.append(f"{self.points} LP")
        return " ".join(parts)


RankSnapshot = Union[Unranked, Ranked]

UNRANKED = Unranked()


@dataclass(frozen=True)
class RankSnapshots:
    """Current solo and Double Up ranks of one player."""

    solo: RankSnapshot = UNRANKED
    double_up: RankSnapshot = UNRANKED


@dataclass(frozen=True)
class DeltaResult:
    """Outcome of one rank update. ``delta`` is None without a ranked baseline."""

    old: RankSnapshot
    new: RankSnapshot
    delta: Optional[int]


@dataclass(frozen=True)
class RankUpdate:
    """Per-queue delta results of one transactional rank write."""

    solo: DeltaResult
    double_up: DeltaResult


def snapshot_from_fields(
    tier: Optional[str], division: Optional[str] = None, points: Optional[int] = None
) -> RankSnapshot:
    """Build a snapshot from nullable storage or API fields.

    A missing tier is the only signal for ``Unranked``; a ranked player at
    0 LP Iron IV stays ``Ranked``.
    """
    if not tier or tier.upper() == "UNRANKED":
        return UNRANKED
    return Ranked(tier=tier.upper(), division=(division or "").upper(), points=points or 0)


def rank_to_numeric(snapshot: RankSnapshot) -> int:
    """Convert a snapshot into its ladder score. Unknown tiers score 0."""
    if isinstance(snapshot, Unranked):
        return 0

    tier = snapshot.tier.upper()
    if tier not in TIER_ORDER:
        logger.warning("Unknown tier value encountered", tier=snapshot.tier)
        return 0

    tier_base = TIER_ORDER.index(tier) * TIER_BAND
    division_base = DIVISION_OFFSETS.get((snapshot.division or "").upper(), 0)
    return tier_base + division_base + snapshot.points


def compute_delta(old: RankSnapshot, new: RankSnapshot) -> DeltaResult:
    """Compute the signed score change between two snapshots."""
    if isinstance(old, Unranked):
        return DeltaResult(old=old, new=new, delta=None)
    return DeltaResult(old=old, new=new, delta=rank_to_numeric(new) - rank_to_numeric(old))


def format_delta(delta: Optional[int]) -> str:
    """Render a delta for messages: `` (+25 LP)``, `` (-8 LP)`` or nothing."""
    if delta is None:
        return ""
    sign = "+" if delta >= 0 else "-"
    return f" ({sign}{abs(delta)} LP)"


def format_rank(snapshot: RankSnapshot) -> str:
    """Render a snapshot for leaderboards and messages."""
    return snapshot.display()
