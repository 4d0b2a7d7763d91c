"""Shared validators for domain models and queue arguments."""

from .exceptions import OutOfRangeError
from .messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, messages, etc.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_in_range(value: int, field: str, minimum: int, maximum: int) -> int:
    """Return ``value`` if ``minimum <= value <= maximum``.

    Raises:
        OutOfRangeError: If the value falls outside the inclusive bounds.
    """
    if not minimum <= value <= maximum:
        raise OutOfRangeError(field, value, minimum, maximum)
    return value
