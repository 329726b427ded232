"""Validation utility functions to reduce complexity in validation logic."""

from typing import Any, Dict, List

import structlog

from .exceptions import ValidationError

logger = structlog.get_logger(__name__)


def is_empty_or_none(value: Any) -> bool:
    """
    Check if value is None or empty (empty string, list, dict, etc.).

    Whitespace-only strings count as empty.

    Args:
        value: Value to check

    Returns:
        True if value is None or empty, False otherwise
    """
    if value is None:
        return True
    if isinstance(value, str):
        return len(value.strip()) == 0
    if isinstance(value, (list, dict, set, tuple)):
        return len(value) == 0
    return False


def find_missing_fields(data: Dict[str, Any], required_fields: List[str]) -> List[str]:
    """
    Return the required fields that are absent or empty in data.

    Args:
        data: Dictionary to validate
        required_fields: List of required field names

    Returns:
        Missing field names in the order they were requested
    """
    return [field for field in required_fields if is_empty_or_none(data.get(field))]


def ensure_required_fields(
    data: Dict[str, Any],
    required_fields: List[str],
    operation: str,
) -> None:
    """
    Raise ``ValidationError`` naming every missing or empty required field.

    Args:
        data: Dictionary to validate
        required_fields: List of required field names
        operation: Operation name carried by the error

    Raises:
        ValidationError: If any required field is missing or empty
    """
    missing = find_missing_fields(data, required_fields)
    if missing:
        logger.warning("Missing required field", operation=operation, fields=missing)
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            fields=missing,
            operation=operation,
        )
