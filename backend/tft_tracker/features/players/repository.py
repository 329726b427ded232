"""Repository pattern implementation for players feature.

Provides collection-like interface for accessing tracked players.
Isolates data access logic from the tracker and the player service.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from tft_tracker.core import (
    DatabaseError,
    DuplicatePlayerError,
    PlayerNotFoundError,
    ensure_required_fields,
    get_db_manager,
)
from .models import TrackedPlayer
from .orm_models import TrackedPlayerORM
from .ranks import RankSnapshots, RankUpdate, compute_delta

logger = structlog.get_logger(__name__)


def _unavailable(error: OperationalError, operation: str, puuid: str) -> DatabaseError:
    return DatabaseError(
        f"Database unavailable: {error.orig}",
        operation=operation,
        context={"puuid": puuid},
    )


class TrackedPlayerRepositoryInterface(ABC):
    """Interface for tracked player repository.

    Defines contract for data access operations.
    Enables mocking and potential swap of implementations.
    """

    @abstractmethod
    async def list_tracked_players(self) -> list[TrackedPlayer]:
        """Get all tracked players in a stable order.

        :returns: Detached copies of every tracked player
        """
        pass

    @abstractmethod
    async def get_tracked_player(self, puuid: str) -> Optional[TrackedPlayer]:
        """Get tracked player by PUUID.

        :param puuid: Player's unique identifier
        :returns: TrackedPlayer if found, None otherwise
        """
        pass

    @abstractmethod
    async def set_last_seen_match(self, puuid: str, match_id: str) -> bool:
        """Move the player's last-seen match pointer.

        :param puuid: Player's unique identifier
        :param match_id: Match id just processed
        :returns: False if no player row matched
        """
        pass

    @abstractmethod
    async def apply_rank_update(
        self, puuid: str, snapshots: RankSnapshots
    ) -> RankUpdate:
        """Write new ranks under a row lock and return both deltas.

        :param puuid: Player's unique identifier
        :param snapshots: Freshly fetched solo and Double Up ranks
        :returns: Old/new snapshot and delta per queue
        :raises PlayerNotFoundError: If the player row does not exist
        """
        pass

    @abstractmethod
    async def register_player(
        self,
        puuid: str,
        region: str,
        platform: str,
        game_name: str,
        tag_line: str,
        last_match_id: Optional[str] = None,
        snapshots: Optional[RankSnapshots] = None,
    ) -> TrackedPlayer:
        """Add a new tracked player.

        :raises ValidationError: If a required field is missing or empty
        :raises DuplicatePlayerError: If the puuid is already tracked
        """
        pass

    @abstractmethod
    async def player_exists(self, puuid: str) -> bool:
        """Check whether a puuid is tracked."""
        pass

    @abstractmethod
    async def remove_player(self, puuid: str) -> bool:
        """Stop tracking a player.

        :returns: False if no player row matched
        """
        pass


class SQLAlchemyTrackedPlayerRepository(TrackedPlayerRepositoryInterface):
    """SQLAlchemy implementation of tracked player repository.

    Every write commits its own transaction and rolls back on failure.
    """

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        :param db: SQLAlchemy async session
        """
        self.db = db

    async def list_tracked_players(self) -> list[TrackedPlayer]:
        """Get all tracked players ordered by registration time."""
        stmt = select(TrackedPlayerORM).order_by(
            TrackedPlayerORM.created_at, TrackedPlayerORM.puuid
        )
        result = await self.db.execute(stmt)
        return [player.to_domain() for player in result.scalars().all()]

    async def get_tracked_player(self, puuid: str) -> Optional[TrackedPlayer]:
        """Get tracked player by PUUID."""
        player = await self._get_orm(puuid)
        return player.to_domain() if player else None

    async def set_last_seen_match(self, puuid: str, match_id: str) -> bool:
        """Move the player's last-seen match pointer."""
        stmt = (
            update(TrackedPlayerORM)
            .where(TrackedPlayerORM.puuid == puuid)
            .values(last_match_id=match_id)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except OperationalError as e:
            await self.db.rollback()
            raise _unavailable(e, "set_last_seen_match", puuid) from e
        except Exception:
            await self.db.rollback()
            raise

        updated = result.rowcount > 0
        if not updated:
            logger.warning("No tracked player to update last match", puuid=puuid)
        return updated

    async def apply_rank_update(
        self, puuid: str, snapshots: RankSnapshots
    ) -> RankUpdate:
        """Read-modify-write of the rank columns under ``SELECT ... FOR UPDATE``."""
        try:
            stmt = (
                select(TrackedPlayerORM)
                .where(TrackedPlayerORM.puuid == puuid)
                .with_for_update()
            )
            result = await self.db.execute(stmt)
            player = result.scalar_one_or_none()
            if player is None:
                raise PlayerNotFoundError(puuid, operation="apply_rank_update")

            old = player.snapshots()
            player.apply_snapshots(snapshots)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(
                "Rank update rolled back",
                puuid=puuid,
                error=str(e),
                error_type=type(e).__name__,
            )
            if isinstance(e, OperationalError):
                raise _unavailable(e, "apply_rank_update", puuid) from e
            raise

        update_result = RankUpdate(
            solo=compute_delta(old.solo, snapshots.solo),
            double_up=compute_delta(old.double_up, snapshots.double_up),
        )
        logger.debug(
            "Applied rank update",
            puuid=puuid,
            solo_delta=update_result.solo.delta,
            double_up_delta=update_result.double_up.delta,
        )
        return update_result

    async def register_player(
        self,
        puuid: str,
        region: str,
        platform: str,
        game_name: str,
        tag_line: str,
        last_match_id: Optional[str] = None,
        snapshots: Optional[RankSnapshots] = None,
    ) -> TrackedPlayer:
        """Add a new tracked player."""
        ensure_required_fields(
            {
                "puuid": puuid,
                "region": region,
                "platform": platform,
                "game_name": game_name,
                "tag_line": tag_line,
            },
            ["puuid", "region", "platform", "game_name", "tag_line"],
            operation="register_player",
        )

        if await self.player_exists(puuid):
            raise DuplicatePlayerError(puuid, operation="register_player")

        player = TrackedPlayerORM(
            puuid=puuid,
            region=region.lower(),
            platform=platform.lower(),
            game_name=game_name,
            tag_line=tag_line,
            last_match_id=last_match_id,
        )
        player.apply_snapshots(snapshots or RankSnapshots())
        self.db.add(player)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicatePlayerError(puuid, operation="register_player") from e
        except OperationalError as e:
            await self.db.rollback()
            raise _unavailable(e, "register_player", puuid) from e
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Registered tracked player", puuid=puuid, riot_id=player.riot_id)
        return player.to_domain()

    async def player_exists(self, puuid: str) -> bool:
        """Check whether a puuid is tracked."""
        stmt = (
            select(TrackedPlayerORM.puuid)
            .where(TrackedPlayerORM.puuid == puuid)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def remove_player(self, puuid: str) -> bool:
        """Stop tracking a player."""
        stmt = delete(TrackedPlayerORM).where(TrackedPlayerORM.puuid == puuid)
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except OperationalError as e:
            await self.db.rollback()
            raise _unavailable(e, "remove_player", puuid) from e
        except Exception:
            await self.db.rollback()
            raise
        return result.rowcount > 0

    async def _get_orm(self, puuid: str) -> Optional[TrackedPlayerORM]:
        stmt = select(TrackedPlayerORM).where(TrackedPlayerORM.puuid == puuid)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


@asynccontextmanager
async def open_tracked_player_repository() -> AsyncIterator[
    TrackedPlayerRepositoryInterface
]:
    """Open a session-scoped repository outside of FastAPI dependencies."""
    async with get_db_manager().get_session() as db:
        yield SQLAlchemyTrackedPlayerRepository(db)
