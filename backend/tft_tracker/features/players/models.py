"""Read-only player value handed to the tracker each tick."""

from dataclasses import dataclass, field
from typing import Optional

from .ranks import RankSnapshots


@dataclass(frozen=True)
class TrackedPlayer:
    """Detached copy of a tracked player row."""

    puuid: str
    region: str
    platform: str
    game_name: str
    tag_line: str
    last_match_id: Optional[str] = None
    ranks: RankSnapshots = field(default_factory=RankSnapshots)

    @property
    def riot_id(self) -> str:
        return f"{self.game_name}#{self.tag_line}"
