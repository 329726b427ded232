"""Shared enums used across features.

This module provides a single source of truth for enums used in both models and schemas.
"""

from enum import Enum


class Tier(str, Enum):
    """Teamfight Tactics rank tiers, lowest first."""

    IRON = "IRON"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    EMERALD = "EMERALD"
    DIAMOND = "DIAMOND"
    MASTER = "MASTER"
    GRANDMASTER = "GRANDMASTER"
    CHALLENGER = "CHALLENGER"


class Division(str, Enum):
    """Divisions inside a tier. Apex tiers only ever report ``I``."""

    I = "I"  # noqa: E741
    II = "II"
    III = "III"
    IV = "IV"


class RankedQueue(str, Enum):
    """Queue types reported by the league endpoint."""

    SOLO = "RANKED_TFT"
    DOUBLE_UP = "RANKED_TFT_DOUBLE_UP"
