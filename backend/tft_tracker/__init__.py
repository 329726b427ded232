"""
TFT Match Tracker Application Package.

Polls Teamfight Tactics match history for tracked players and announces
finished matches with their rank changes.
"""

from .core import get_global_settings, get_db_manager, get_db

__version__ = "0.1.0"

__all__ = [
    "get_global_settings",
    "get_db_manager",
    "get_db",
]
