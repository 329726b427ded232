"""Players feature module.

Tracked players, their rank snapshots and the rank delta engine.
"""

from .gateway import PlayerProfile, RiotAPIGateway
from .models import TrackedPlayer
from .orm_models import TrackedPlayerORM
from .ranks import (
    UNRANKED,
    DeltaResult,
    Ranked,
    RankSnapshot,
    RankSnapshots,
    RankUpdate,
    Unranked,
    compute_delta,
    format_delta,
    format_rank,
    rank_to_numeric,
    snapshot_from_fields,
)
from .repository import (
    SQLAlchemyTrackedPlayerRepository,
    TrackedPlayerRepositoryInterface,
    open_tracked_player_repository,
)
from .router import router as players_router
from .service import PlayerService

__all__ = [
    "PlayerProfile",
    "RiotAPIGateway",
    "TrackedPlayer",
    "TrackedPlayerORM",
    "UNRANKED",
    "DeltaResult",
    "Ranked",
    "RankSnapshot",
    "RankSnapshots",
    "RankUpdate",
    "Unranked",
    "compute_delta",
    "format_delta",
    "format_rank",
    "rank_to_numeric",
    "snapshot_from_fields",
    "SQLAlchemyTrackedPlayerRepository",
    "TrackedPlayerRepositoryInterface",
    "open_tracked_player_repository",
    "players_router",
    "PlayerService",
]
