"""Service layer exceptions.

Raised by repositories and services; Riot API errors live in
``core.riot_api.errors`` and are never wrapped by these.
"""

from typing import Any, Dict, Optional


class ServiceException(Exception):
    """Base exception for service layer failures."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context: Dict[str, Any] = context or {}

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class ValidationError(ServiceException):
    """Required input fields are missing or empty."""

    def __init__(
        self,
        message: str,
        fields: Optional[list[str]] = None,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message, operation=operation, context={"fields": fields or []})
        self.fields = fields or []


class DatabaseError(ServiceException):
    """Persistence failure (connection lost, statement failed)."""

    pass


class PlayerNotFoundError(DatabaseError):
    """No tracked player row matches the given puuid."""

    def __init__(self, puuid: str, operation: Optional[str] = None) -> None:
        super().__init__(
            f"Tracked player not found: {puuid}",
            operation=operation,
            context={"puuid": puuid},
        )
        self.puuid = puuid


class DuplicatePlayerError(DatabaseError):
    """A tracked player with the same puuid already exists."""

    def __init__(self, puuid: str, operation: Optional[str] = None) -> None:
        super().__init__(
            f"Player already tracked: {puuid}",
            operation=operation,
            context={"puuid": puuid},
        )
        self.puuid = puuid
