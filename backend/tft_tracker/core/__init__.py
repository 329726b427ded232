"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import Settings, get_settings, get_global_settings
from .database import DatabaseManager, get_db, get_db_manager
from .exceptions import (
    ServiceException,
    ValidationError,
    DatabaseError,
    PlayerNotFoundError,
    DuplicatePlayerError,
)
from .enums import Tier, Division, RankedQueue
from .models import Base
from .validation import (
    ensure_required_fields,
    find_missing_fields,
    is_empty_or_none,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    # Database
    "DatabaseManager",
    "get_db",
    "get_db_manager",
    # Exceptions
    "ServiceException",
    "ValidationError",
    "DatabaseError",
    "PlayerNotFoundError",
    "DuplicatePlayerError",
    # Enums
    "Tier",
    "Division",
    "RankedQueue",
    # Models
    "Base",
    # Validation
    "ensure_required_fields",
    "find_missing_fields",
    "is_empty_or_none",
]
