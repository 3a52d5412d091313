"""Helpers shared by the entity services."""
from services.exceptions import InvalidArgumentError

INVALID_ID = "Invalid ID."


def validate_id(value: int | None) -> int:
    """
    Ensure an id is a positive integer.

    Raises:
        InvalidArgumentError: For None, booleans, non-integers and values < 1.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidArgumentError(INVALID_ID)
    return value
