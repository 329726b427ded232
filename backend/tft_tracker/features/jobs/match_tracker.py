"""Per-player match processing for the match tracker.

For every tracked player, one pass:

1. Skip players already announced this tick as somebody's Double Up partner
2. Poll the latest match id and skip when it is the last one seen
3. Read match details from the dedup cache, fetching them once on a miss
4. Classify the match and, for ranked queues, fetch the current ranks
5. For Double Up, resolve the partner; a tracked partner whose newest match
   is this one gets its ranks fetched too, so the pair is announced once
6. Apply the rank updates, send the notification, then advance the
   last-seen pointers
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from tft_tracker.core.riot_api.client import RiotAPIClient
from tft_tracker.core.riot_api.models import MatchDTO, TFTParticipantDTO
from tft_tracker.features.matches.cache import MatchCache, PairingTracker
from tft_tracker.features.matches.classifier import (
    MatchMode,
    classify,
    find_participant,
    find_teammate,
    reported_placement,
)
from tft_tracker.features.matches.notifier import MatchNotifier, TeammateInfo
from tft_tracker.features.players.gateway import RiotAPIGateway
from tft_tracker.features.players.models import TrackedPlayer
from tft_tracker.features.players.ranks import DeltaResult, RankSnapshots
from tft_tracker.features.players.repository import TrackedPlayerRepositoryInterface
from .error_handling import PlayerOutcome, Processed, Skip, capture_player_outcome

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PartnerPlan:
    """Double Up partner as read before any write."""

    participant: TFTParticipantDTO
    tracked: Optional[TrackedPlayer] = None
    snapshots: Optional[RankSnapshots] = None

    @property
    def advances(self) -> bool:
        """Whether the partner's ranks and pointer move with this match."""
        return self.tracked is not None and self.snapshots is not None


class PlayerMatchProcessor:
    """Turns one tracked player's newest match into at most one notification."""

    def __init__(
        self,
        riot_client: RiotAPIClient,
        gateway: RiotAPIGateway,
        cache: MatchCache,
        notifier: MatchNotifier,
    ):
        """
        Initialize the processor.

        Args:
            riot_client: Riot API client for match lookups
            gateway: Anti-Corruption Layer for rank lookups
            cache: Match dedup cache shared across ticks
            notifier: Builds and sends notifications
        """
        self.riot_client = riot_client
        self.gateway = gateway
        self.cache = cache
        self.notifier = notifier

    @capture_player_outcome(
        operation="process tracked player",
        log_context=lambda self, player, *args, **kwargs: {
            "puuid": player.puuid,
            "riot_id": player.riot_id,
        },
    )
    async def process(
        self,
        player: TrackedPlayer,
        repository: TrackedPlayerRepositoryInterface,
        pairing: PairingTracker,
    ) -> PlayerOutcome:
        """
        Process one player.

        Args:
            player: Detached tracked player row
            repository: Repository scoped to the current tick
            pairing: Players already announced during the current tick

        Returns:
            Processed, Skip, Retryable or Fatal; never raises
        """
        if pairing.was_notified(player.puuid):
            return Skip(reason="already announced as teammate this tick")

        match_id = await self.riot_client.get_last_match_id(player.puuid, player.region)
        if match_id is None:
            return Skip(reason="no match history")
        if match_id == player.last_match_id:
            return Skip(reason="no new match")

        match = await self._get_match(player, match_id)
        if match is None:
            return Skip(reason="match details not found")

        participant = find_participant(match, player.puuid)
        if participant is None:
            logger.warning(
                "Player missing from match participants",
                puuid=player.puuid,
                match_id=match_id,
            )
            return Skip(reason="player not in match")

        mode = classify(match)
        placement = reported_placement(participant.placement, mode)

        # Remote reads first, so a failure leaves stored ranks untouched.
        snapshots: Optional[RankSnapshots] = None
        if mode in (MatchMode.SOLO, MatchMode.DOUBLE_UP):
            snapshots = await self.gateway.get_rank_snapshots(
                player.puuid, player.platform
            )

        partner: Optional[PartnerPlan] = None
        if mode == MatchMode.DOUBLE_UP:
            partner = await self._plan_teammate(match, participant, repository)

        rank_delta: Optional[DeltaResult] = None
        if snapshots is not None:
            update = await repository.apply_rank_update(player.puuid, snapshots)
            rank_delta = update.solo if mode == MatchMode.SOLO else update.double_up

        teammate: Optional[TeammateInfo] = None
        if partner is not None:
            teammate = await self._apply_teammate(partner, repository)

        payload = await self.notifier.build_notification(
            player, participant, placement, mode, rank_delta, teammate
        )
        sent = await self.notifier.send(payload)
        pairing.mark(player.puuid)

        await repository.set_last_seen_match(player.puuid, match_id)
        if partner is not None and partner.advances:
            pairing.mark(partner.tracked.puuid)
            await repository.set_last_seen_match(partner.tracked.puuid, match_id)

        logger.info(
            "Processed new match",
            puuid=player.puuid,
            match_id=match_id,
            mode=mode.value,
            placement=placement,
            delta=rank_delta.delta if rank_delta else None,
            notified=sent,
        )
        return Processed(match_id=match_id, notified=sent)

    async def _get_match(self, player: TrackedPlayer, match_id: str) -> Optional[MatchDTO]:
        """Cached match details, fetching and caching them once on a miss."""
        entry = self.cache.get(match_id)
        if entry is not None:
            return entry.payload

        match = await self.riot_client.get_match_details(player.region, match_id)
        if match is not None:
            self.cache.put(match_id, player.puuid, match)
        return match

    async def _plan_teammate(
        self,
        match: MatchDTO,
        participant: TFTParticipantDTO,
        repository: TrackedPlayerRepositoryInterface,
    ) -> Optional[PartnerPlan]:
        """
        Read everything needed to announce the partner, without writing.

        A tracked partner moves with this match only while it is still the
        partner's newest one and the partner has not handled it yet. Otherwise
        the stored snapshot is shown and the partner's pointer stays put.
        """
        teammate = find_teammate(match, participant)
        if teammate is None:
            return None

        tracked = await repository.get_tracked_player(teammate.puuid)
        if tracked is None or tracked.last_match_id == match.match_id:
            return PartnerPlan(participant=teammate, tracked=tracked)

        latest = await self.riot_client.get_last_match_id(tracked.puuid, tracked.region)
        if latest != match.match_id:
            logger.info(
                "Teammate has moved past this match",
                puuid=tracked.puuid,
                match_id=match.match_id,
                latest_match_id=latest,
            )
            return PartnerPlan(participant=teammate, tracked=tracked)

        snapshots = await self.gateway.get_rank_snapshots(
            tracked.puuid, tracked.platform
        )
        return PartnerPlan(participant=teammate, tracked=tracked, snapshots=snapshots)

    async def _apply_teammate(
        self, partner: PartnerPlan, repository: TrackedPlayerRepositoryInterface
    ) -> TeammateInfo:
        tracked = partner.tracked
        if tracked is None:
            return TeammateInfo.untracked(partner.participant)

        if not partner.advances:
            return TeammateInfo(
                game_name=tracked.game_name,
                tag_line=tracked.tag_line,
                snapshot=tracked.ranks.double_up,
                tracked=True,
            )

        update = await repository.apply_rank_update(tracked.puuid, partner.snapshots)
        return TeammateInfo(
            game_name=tracked.game_name,
            tag_line=tracked.tag_line,
            snapshot=update.double_up.new,
            delta=update.double_up.delta,
            tracked=True,
        )
