"""
Exception hierarchy for the dice roller.

Domain errors are raised to the immediate caller and never caught inside the
package. Operational failures (unknown line ids, malformed snapshots) are not
exceptions: the line manager reports them through False/None return values.
"""

from typing import Any


class DiceRollerError(Exception):
    """Base class for every error raised by the dice roller."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}


class InvalidDomainError(DiceRollerError, ValueError):
    """Raised when a dice parameter lies outside its allowed domain."""


def require_int_in_range(
    value: Any,
    param_name: str,
    min_val: int,
    max_val: int,
) -> int:
    """
    Validates that a value is an integer within an inclusive range.

    Args:
        value (Any): The value to validate.
        param_name (str): Human-readable parameter name for error messages.
        min_val (int): Minimum allowed value (inclusive).
        max_val (int): Maximum allowed value (inclusive).

    Returns:
        int: The validated value.

    Raises:
        InvalidDomainError: If the value is not an int in [min_val, max_val].

    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDomainError(
            f"{param_name} must be an integer, got {type(value).__name__}",
            {"param_name": param_name, "value": value},
        )
    if value < min_val or value > max_val:
        raise InvalidDomainError(
            f"{param_name} must be between {min_val} and {max_val}, got {value}",
            {"param_name": param_name, "value": value, "min": min_val, "max": max_val},
        )
    return value
