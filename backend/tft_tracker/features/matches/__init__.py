"""Matches feature module.

Match dedup cache, classification and notification building.
"""

from .cache import CacheEntry, MatchCache, PairingTracker
from .classifier import (
    MatchMode,
    classify,
    find_participant,
    find_teammate,
    ordinal,
    reported_placement,
)
from .notifier import MatchNotifier, TeammateInfo

__all__ = [
    "CacheEntry",
    "MatchCache",
    "PairingTracker",
    "MatchMode",
    "classify",
    "find_participant",
    "find_teammate",
    "ordinal",
    "reported_placement",
    "MatchNotifier",
    "TeammateInfo",
]
