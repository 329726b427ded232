"""SQLAlchemy 2.0 ORM models for the players feature.

``TrackedPlayerORM`` is the only row the tracker writes: the last-seen match
pointer and the solo / Double Up rank columns.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime as SQLDateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from tft_tracker.core.models import Base
from .models import TrackedPlayer
from .ranks import Ranked, RankSnapshot, RankSnapshots, snapshot_from_fields


class TrackedPlayerORM(Base):
    """Tracked player domain model.

    Combines data and behavior:
    - Database fields with type safety (SQLAlchemy 2.0 Mapped types)
    - Rank snapshot conversion in both directions
    """

    __tablename__ = "tracked_players"
    __table_args__ = (
        Index("idx_tracked_players_riot_id", "game_name", "tag_line"),
    )

    # Primary key - PUUID is the unique identifier from Riot API
    puuid: Mapped[str] = mapped_column(
        String(78),
        primary_key=True,
        comment="Player's universally unique identifier from Riot API",
    )

    region: Mapped[str] = mapped_column(
        String(16), nullable=False, comment="Regional routing value (e.g. europe)"
    )
    platform: Mapped[str] = mapped_column(
        String(8), nullable=False, comment="Platform shard (e.g. euw1)"
    )
    game_name: Mapped[str] = mapped_column(
        String(128), nullable=False, comment="Riot ID game name"
    )
    tag_line: Mapped[str] = mapped_column(
        String(32), nullable=False, comment="Riot ID tag line"
    )

    last_match_id: Mapped[Optional[str]] = mapped_column(
        String(32), nullable=True, comment="Last match already processed"
    )

    # Solo queue rank
    solo_tier: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    solo_division: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    solo_lp: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Double Up rank
    double_up_tier: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    double_up_division: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    double_up_lp: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the tracked player."""
        return f"<TrackedPlayerORM(puuid='{self.puuid}', riot_id='{self.riot_id}')>"

    @property
    def riot_id(self) -> str:
        """Get the display Riot ID (e.g., 'Name#TAG')."""
        return f"{self.game_name}#{self.tag_line}"

    def snapshots(self) -> RankSnapshots:
        """Read both rank columns groups as snapshots."""
        return RankSnapshots(
            solo=snapshot_from_fields(self.solo_tier, self.solo_division, self.solo_lp),
            double_up=snapshot_from_fields(
                self.double_up_tier, self.double_up_division, self.double_up_lp
            ),
        )

    def apply_snapshots(self, snapshots: RankSnapshots) -> None:
        """Overwrite both rank column groups, clearing them for unranked."""
        self.solo_tier, self.solo_division, self.solo_lp = _columns(snapshots.solo)
        self.double_up_tier, self.double_up_division, self.double_up_lp = _columns(
            snapshots.double_up
        )

    def to_domain(self) -> TrackedPlayer:
        """Detach a read-only copy for the scheduler."""
        return TrackedPlayer(
            puuid=self.puuid,
            region=self.region,
            platform=self.platform,
            game_name=self.game_name,
            tag_line=self.tag_line,
            last_match_id=self.last_match_id,
            ranks=self.snapshots(),
        )


def _columns(snapshot: RankSnapshot) -> tuple[Optional[str], Optional[str], Optional[int]]:
    if isinstance(snapshot, Ranked):
        return snapshot.tier, snapshot.division or None, snapshot.points
    return None, None, None
