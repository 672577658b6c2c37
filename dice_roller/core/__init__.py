"""
Core module for the dice roller.

Contains the domain constants, logging setup, exception hierarchy and the
field validation policy shared by the roll engine and the line manager.
"""

from .constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_STATISTICS_LIMIT,
    MAX_CAP,
    MAX_DICE_COUNT,
    MAX_HISTORY_SIZE,
    MAX_SIDES,
    MIN_CAP,
    MIN_DICE_COUNT,
    MIN_SIDES,
    SNAPSHOT_VERSION,
    ApplyTo,
)
from .error_handling import (
    DiceRollerError,
    InvalidDomainError,
    require_int_in_range,
)
from .logging import get_logger, setup_logging
from .validation import (
    parse_int,
    validate_fields,
    validate_line_fields,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_STATISTICS_LIMIT",
    "MAX_CAP",
    "MAX_DICE_COUNT",
    "MAX_HISTORY_SIZE",
    "MAX_SIDES",
    "MIN_CAP",
    "MIN_DICE_COUNT",
    "MIN_SIDES",
    "SNAPSHOT_VERSION",
    "ApplyTo",
    "DiceRollerError",
    "InvalidDomainError",
    "require_int_in_range",
    "get_logger",
    "setup_logging",
    "parse_int",
    "validate_fields",
    "validate_line_fields",
]
