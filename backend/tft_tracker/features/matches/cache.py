"""
Dedup and pairing state owned by the match tracker.

``MatchCache`` keeps recently fetched match details so a match shared by
several tracked players is fetched once. ``PairingTracker`` remembers, for
the current tick only, which players were already announced as somebody's
Double Up teammate.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

import structlog

from tft_tracker.core.riot_api.models import MatchDTO

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A fetched match, tagged with the player whose poll fetched it."""

    match_id: str
    owner_puuid: str
    payload: MatchDTO
    inserted_at: float


class MatchCache:
    """TTL and size bounded match cache with thread-safe operations."""

    def __init__(
        self,
        ttl: float = 1200,
        maxsize: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize match cache.

        Args:
            ttl: Seconds an entry stays valid after insertion
            maxsize: Maximum number of entries; the oldest is evicted first
            clock: Time source in seconds, injectable for tests
        """
        self.ttl = ttl
        self.maxsize = maxsize
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self.lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.inserted_at >= self.ttl

    def has(self, match_id: str) -> bool:
        """Check for a live entry without touching hit statistics."""
        with self.lock:
            entry = self._entries.get(match_id)
            if entry is None:
                return False
            if self._is_expired(entry, self._clock()):
                del self._entries[match_id]
                return False
            return True

    def get(self, match_id: str) -> Optional[CacheEntry]:
        """
        Get an entry if present and not expired.

        Args:
            match_id: Match id

        Returns:
            CacheEntry if live, None otherwise
        """
        with self.lock:
            entry = self._entries.get(match_id)
            if entry is None:
                self._misses += 1
                return None
            if self._is_expired(entry, self._clock()):
                del self._entries[match_id]
                self._misses += 1
                logger.debug("Cache expired", match_id=match_id)
                return None
            self._hits += 1
            logger.debug("Cache hit", match_id=match_id, hits=self._hits)
            return entry

    def put(self, match_id: str, owner_puuid: str, payload: MatchDTO) -> CacheEntry:
        """
        Store fetched match details.

        Args:
            match_id: Match id
            owner_puuid: Player whose poll fetched the match
            payload: Match details

        Returns:
            The stored entry
        """
        with self.lock:
            if len(self._entries) >= self.maxsize and match_id not in self._entries:
                oldest_id = min(
                    self._entries, key=lambda key: self._entries[key].inserted_at
                )
                del self._entries[oldest_id]
                logger.debug("Cache eviction", match_id=oldest_id, reason="full")

            entry = CacheEntry(
                match_id=match_id,
                owner_puuid=owner_puuid,
                payload=payload,
                inserted_at=self._clock(),
            )
            self._entries[match_id] = entry
            logger.debug("Cache set", match_id=match_id, ttl=self.ttl)
            return entry

    def sweep_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self.lock:
            now = self._clock()
            expired = [
                key
                for key, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]
            for key in expired:
                del self._entries[key]
            if expired:
                logger.debug("Cache sweep", entries_removed=len(expired))
            return len(expired)

    def clear(self) -> None:
        """Clear all entries from cache."""
        with self.lock:
            count = len(self._entries)
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            logger.info("Cache cleared", entries_removed=count)

    def stats(self) -> Dict[str, float]:
        """Get cache statistics."""
        with self.lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "maxsize": self.maxsize,
                "ttl_seconds": self.ttl,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def __len__(self) -> int:
        """Get number of entries in cache."""
        with self.lock:
            return len(self._entries)


class PairingTracker:
    """Players already announced during the current tick."""

    def __init__(self) -> None:
        self._notified: Set[str] = set()

    def mark(self, puuid: str) -> None:
        self._notified.add(puuid)

    def was_notified(self, puuid: str) -> bool:
        return puuid in self._notified

    def reset(self) -> None:
        self._notified.clear()

    def __len__(self) -> int:
        return len(self._notified)
