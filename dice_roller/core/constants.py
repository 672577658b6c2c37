"""
Constants and enumerations for the dice roller.

Defines the domain limits for dice pools, the defaults used when building
lines, and the enumerations shared by the roll engine and the line manager.
"""

from enum import Enum

# Dice pool limits (inclusive).
MIN_DICE_COUNT = 1
MAX_DICE_COUNT = 100
MIN_SIDES = 2
MAX_SIDES = 100

# Per-die cap limits (inclusive).
MIN_CAP = 1
MAX_CAP = 100

# Defaults applied when a field is missing or cannot be parsed.
DEFAULT_DICE_COUNT = 1
DEFAULT_SIDES = 6
DEFAULT_MODIFIER = 0

# Roll history.
MAX_HISTORY_SIZE = 100
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_STATISTICS_LIMIT = 50

# Snapshot format produced by LineManager.export_configuration().
SNAPSHOT_VERSION = "1.0"


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.value


class ApplyTo(NiceEnum):
    """Defines where a roll modifier is applied."""

    SUM = "sum"
    EACH = "each"

    @classmethod
    def from_value(cls, value: object) -> "ApplyTo":
        """
        Coerces a raw value into an ApplyTo member.

        Args:
            value (object): An ApplyTo member or its string value.

        Returns:
            ApplyTo: The matching member, SUM for anything unrecognised.

        """
        if isinstance(value, ApplyTo):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.SUM
